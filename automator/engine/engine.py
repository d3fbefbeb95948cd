"""Automation engine entry point."""

from collections.abc import Iterable
from typing import Any

from automator.core.config import Settings, get_settings
from automator.core.logging import get_logger
from automator.engine.dispatcher import ActionDispatcher
from automator.engine.matcher import match_rules
from automator.engine.scheduler import DelayedActionScheduler, ScheduledAction
from automator.handlers.base import ActionHandlers
from automator.models.event import Event, EventData, build_event
from automator.models.outcome import DispatchOutcome
from automator.models.rule import Rule, TriggerKind
from automator.observability.metrics import EVENTS_RECEIVED, EVENTS_REJECTED, RULES_MATCHED
from automator.observability.reporter import LogOutcomeReporter, OutcomeReporter
from automator.observability.tracing import event_context

logger = get_logger(__name__)


class AutomationEngine:
    """Matches events against rules and dispatches their actions."""

    def __init__(
        self,
        handlers: ActionHandlers | None = None,
        reporter: OutcomeReporter | None = None,
        scheduler: DelayedActionScheduler | None = None,
        settings: Settings | None = None,
    ):
        """Initialize engine.

        Args:
            handlers: Action handlers; missing ones make their actions skip
            reporter: Outcome reporter, logs and metrics by default
            scheduler: Delayed action scheduler
            settings: Application settings
        """
        self._settings = settings or get_settings()
        self._handlers = handlers or ActionHandlers()
        self._reporter = reporter or LogOutcomeReporter()
        self._scheduler = scheduler or DelayedActionScheduler()
        self._dispatcher = ActionDispatcher(
            handlers=self._handlers,
            scheduler=self._scheduler,
            reporter=self._reporter,
            settings=self._settings,
        )

    @property
    def scheduler(self) -> DelayedActionScheduler:
        return self._scheduler

    @property
    def dispatcher(self) -> ActionDispatcher:
        return self._dispatcher

    async def process_event(
        self,
        trigger: TriggerKind | str,
        data: EventData | dict[str, Any] | None,
        rules: Iterable[Rule],
    ) -> list[DispatchOutcome]:
        """Process one event against a rule set.

        Never raises. Returns once immediate actions have run; delayed
        actions are still pending.

        Args:
            trigger: Event trigger kind
            data: Event payload
            rules: Rule set to evaluate

        Returns:
            Outcomes of the dispatch pass, one per matched rule
        """
        try:
            event = build_event(trigger, data)
        except ValueError as e:
            label = trigger.value if isinstance(trigger, TriggerKind) else str(trigger)
            EVENTS_REJECTED.labels(trigger=label).inc()
            logger.error("Invalid event", trigger=label, error=str(e))
            return []

        return await self.dispatch_event(event, rules)

    def match(self, event: Event, rules: Iterable[Rule]) -> list[Rule]:
        """Rules that fire for an event, without dispatching."""
        return match_rules(
            event,
            rules,
            check_from_status=self._settings.enforce_from_status,
        )

    async def dispatch_event(self, event: Event, rules: Iterable[Rule]) -> list[DispatchOutcome]:
        """Dispatch an already-built event against a rule set.

        Each matched rule is dispatched independently, in rule set order.

        Args:
            event: Event to process
            rules: Rule set to evaluate

        Returns:
            Outcomes of the dispatch pass
        """
        with event_context(event.event_id, event.trigger):
            EVENTS_RECEIVED.labels(trigger=event.trigger).inc()
            rules = list(rules)

            try:
                matched = self.match(event, rules)
            except Exception as e:
                logger.error("Error matching rules", error=str(e), exc_info=True)
                return []

            logger.info(
                "Processing event",
                rule_count=len(rules),
                matched_count=len(matched),
            )

            outcomes: list[DispatchOutcome] = []
            for rule in matched:
                RULES_MATCHED.labels(trigger=event.trigger, action=rule.action_kind.value).inc()
                logger.info("Running automation", rule_id=rule.id, rule_name=rule.name)
                try:
                    outcomes.append(await self._dispatcher.dispatch(rule, event))
                except Exception as e:
                    logger.error(
                        "Error dispatching rule",
                        rule_id=rule.id,
                        rule_name=rule.name,
                        error=str(e),
                        exc_info=True,
                    )

            return outcomes

    def pending_actions(self) -> list[ScheduledAction]:
        """Delayed actions waiting to fire."""
        return self._scheduler.pending()

    def cancel_action(self, action_id: str) -> bool:
        """Cancel a delayed action."""
        return self._scheduler.cancel(action_id)

    def start(self) -> None:
        """Start running delayed actions in the background."""
        self._scheduler.start()

    async def shutdown(self) -> None:
        """Cancel pending delayed actions and release handler resources."""
        await self._scheduler.stop(cancel_pending=True)
        await self._handlers.close()
        logger.info("Automation engine stopped")
