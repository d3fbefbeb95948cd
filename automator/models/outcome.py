"""Dispatch outcome domain models."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class DispatchStatus(str, Enum):
    """Outcome of running (or scheduling) one rule's action."""

    SUCCEEDED = "succeeded"
    SCHEDULED = "scheduled"
    SKIPPED = "skipped"  # Precondition unmet, handler not called
    FAILED = "failed"  # Handler raised
    UNSUPPORTED = "unsupported"  # Action kind has no wired handler


class DispatchOutcome(BaseModel):
    """Record of one rule's action against one event."""

    rule_id: int | str | None = Field(default=None, description="Rule that matched")
    rule_name: str = Field(..., description="Rule name")
    trigger: str = Field(..., description="Trigger kind of the event")
    action: str = Field(..., description="Action kind of the rule")
    event_id: str = Field(..., description="Event that triggered the rule")
    status: DispatchStatus = Field(..., description="Dispatch status")
    reason: str = Field(default="", description="Why the action was skipped, failed or is unsupported")
    scheduled_action_id: str | None = Field(
        default=None,
        description="Delayed action identifier (scheduled outcomes)",
    )
    fire_at: datetime | None = Field(default=None, description="When a delayed action will run")
    latency_ms: int = Field(default=0, ge=0, description="Handler latency in milliseconds")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        """True unless the handler failed."""
        return self.status != DispatchStatus.FAILED
