"""Rule matching for incoming events."""

from collections.abc import Iterable

from automator.core.logging import get_logger
from automator.engine.conditions import should_fire
from automator.models.event import Event
from automator.models.rule import Rule

logger = get_logger(__name__)


def match_rules(
    event: Event,
    rules: Iterable[Rule],
    check_from_status: bool = False,
) -> list[Rule]:
    """Select the rules that fire for an event.

    A rule matches when it is enabled, listens for the event's trigger kind
    and its trigger conditions hold. Input order is preserved.

    Args:
        event: Incoming event
        rules: Full rule set
        check_from_status: Enforce ``from_status`` on status-change triggers

    Returns:
        Matching rules in rule set order
    """
    matched: list[Rule] = []
    for rule in rules:
        if not rule.is_enabled or not rule.listens_for(event.trigger):
            continue
        if not should_fire(rule.trigger, event, check_from_status=check_from_status):
            continue
        if rule.conditions:
            # Generic conditions are stored with the rule but not evaluated
            logger.debug(
                "Rule conditions not evaluated",
                rule_name=rule.name,
                conditions=len(rule.conditions),
            )
        matched.append(rule)
    return matched
