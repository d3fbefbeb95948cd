"""Dispatch outcome reporting."""

from abc import ABC, abstractmethod

from automator.core.logging import get_logger
from automator.models.outcome import DispatchOutcome, DispatchStatus
from automator.observability.metrics import ACTIONS_DISPATCHED

logger = get_logger(__name__)


class OutcomeReporter(ABC):
    """Receives the outcome of every dispatched action."""

    @abstractmethod
    def report(self, outcome: DispatchOutcome) -> None:
        """Record a dispatch outcome."""


class LogOutcomeReporter(OutcomeReporter):
    """Reports outcomes as structured log events and Prometheus counters."""

    def report(self, outcome: DispatchOutcome) -> None:
        ACTIONS_DISPATCHED.labels(action=outcome.action, status=outcome.status.value).inc()

        fields = {
            "rule_id": outcome.rule_id,
            "rule_name": outcome.rule_name,
            "action": outcome.action,
            "event_id": outcome.event_id,
            "status": outcome.status.value,
        }

        if outcome.status == DispatchStatus.SUCCEEDED:
            logger.info("Action succeeded", latency_ms=outcome.latency_ms, **fields)
        elif outcome.status == DispatchStatus.SCHEDULED:
            logger.info(
                "Action scheduled",
                scheduled_action_id=outcome.scheduled_action_id,
                fire_at=outcome.fire_at.isoformat() if outcome.fire_at else None,
                **fields,
            )
        elif outcome.status == DispatchStatus.SKIPPED:
            logger.warning("Action skipped", reason=outcome.reason, **fields)
        elif outcome.status == DispatchStatus.UNSUPPORTED:
            logger.info("Action not implemented", reason=outcome.reason, **fields)
        else:
            logger.error("Action failed", error=outcome.reason, **fields)
