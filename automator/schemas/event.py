"""Event and rule API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from automator.models.outcome import DispatchOutcome
from automator.models.rule import Rule, TriggerKind


class EventRequest(BaseModel):
    """An event to process against a rule set."""

    trigger: TriggerKind = Field(..., description="Event trigger kind")
    data: dict[str, Any] | None = Field(default=None, description="Event payload")
    rules: list[Rule] = Field(default_factory=list, description="Rule set to evaluate")


class EventResponse(BaseModel):
    """Result of processing an event."""

    event_id: str = Field(..., description="Assigned event identifier")
    matched: list[str] = Field(default_factory=list, description="Names of matched rules")
    outcomes: list[DispatchOutcome] = Field(default_factory=list, description="Dispatch outcomes")


class MatchResponse(BaseModel):
    """Dry-run match result."""

    event_id: str
    matched: list[str] = Field(default_factory=list, description="Names of rules that would fire")


class ValidateRequest(BaseModel):
    """Request schema for rule validation."""

    rule: dict[str, Any] = Field(..., description="Rule to validate")


class ValidateResponse(BaseModel):
    """Response schema for rule validation."""

    valid: bool = Field(..., description="Whether the rule is valid")
    errors: list[str] = Field(default_factory=list, description="Validation errors")


class ScheduledActionResponse(BaseModel):
    """A delayed action waiting to fire."""

    action_id: str
    label: str
    seconds_remaining: float = Field(..., ge=0)
    fire_at: datetime
