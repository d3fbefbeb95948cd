"""Per-trigger-kind condition evaluation."""

from automator.core.logging import get_logger
from automator.models.event import Event, JobRecord
from automator.models.rule import (
    JobCreatedTrigger,
    JobStatusUpdatedTrigger,
    JobValueBounds,
    TriggerConfig,
)

logger = get_logger(__name__)


def within_job_value_bounds(bounds: JobValueBounds, job: JobRecord) -> bool:
    """Check the job value against configured bounds.

    A bound of zero or absent does not constrain; both bounds are inclusive.
    """
    value = job.value
    if bounds.job_value_min and value < bounds.job_value_min:
        return False
    if bounds.job_value_max and value > bounds.job_value_max:
        return False
    return True


def should_fire(
    trigger: TriggerConfig,
    event: Event,
    check_from_status: bool = False,
) -> bool:
    """Decide whether a trigger configuration fires for an event.

    Kind-specific thresholds such as ``days_overdue`` and ``stock_threshold``
    are applied by the event source before it raises the event, so those
    kinds always fire here.

    ``from_status`` on status-change triggers is not compared unless
    ``check_from_status`` is set, in which case the job's
    ``previous_status`` must equal it.

    Args:
        trigger: Rule trigger configuration
        event: Incoming event
        check_from_status: Enforce ``from_status`` against ``previous_status``

    Returns:
        True if the rule should fire
    """
    if trigger.type != event.trigger:
        return False

    if isinstance(trigger, JobCreatedTrigger):
        return within_job_value_bounds(trigger, event.data)

    if isinstance(trigger, JobStatusUpdatedTrigger):
        job: JobRecord = event.data
        if job.status != trigger.to_status:
            return False
        if check_from_status and trigger.from_status:
            if job.previous_status != trigger.from_status:
                logger.debug(
                    "Previous status does not match from_status",
                    from_status=trigger.from_status,
                    previous_status=job.previous_status,
                )
                return False
        return within_job_value_bounds(trigger, job)

    return True
