"""Action dispatch for matched rules."""

import time
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from functools import partial

from automator.core.config import Settings, get_settings
from automator.core.logging import get_logger
from automator.engine.placeholders import customer_of, replace_placeholders
from automator.engine.scheduler import DelayedActionScheduler
from automator.handlers.base import ActionHandlers
from automator.models.commands import ScheduleEntry, TaskDraft, WebhookBody
from automator.models.event import Event, JobRecord
from automator.models.outcome import DispatchOutcome, DispatchStatus
from automator.models.rule import (
    AddToScheduleAction,
    AssignTeamAction,
    CreateInvoiceAction,
    CreateTaskAction,
    RecipientType,
    Rule,
    SendEmailAction,
    SendSmsAction,
    UpdateInventoryAction,
    UpdateJobStatusAction,
    WebhookAction,
)
from automator.observability.metrics import ACTION_LATENCY
from automator.observability.reporter import OutcomeReporter
from automator.observability.tracing import event_context

logger = get_logger(__name__)

Result = tuple[DispatchStatus, str]

SCHEDULE_ENTRY_NAME = "[customer_name] - [job_number]"


class ActionDispatcher:
    """Runs, or schedules, the action of a matched rule."""

    def __init__(
        self,
        handlers: ActionHandlers,
        scheduler: DelayedActionScheduler,
        reporter: OutcomeReporter,
        settings: Settings | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize dispatcher.

        Args:
            handlers: Side-effecting action handlers
            scheduler: Scheduler for delayed actions
            reporter: Receives every dispatch outcome
            settings: Application settings
            today: Date source for schedule entries
        """
        self._handlers = handlers
        self._scheduler = scheduler
        self._reporter = reporter
        self._settings = settings or get_settings()
        self._today = today

    async def dispatch(self, rule: Rule, event: Event) -> DispatchOutcome:
        """Dispatch a rule's action for an event.

        Actions without a delay run before this returns. Delayed actions are
        handed to the scheduler and a ``scheduled`` outcome is returned; their
        final outcome is reported when they fire.

        Args:
            rule: Matched rule
            event: Triggering event

        Returns:
            Dispatch outcome
        """
        delay_minutes = rule.delay_minutes
        if delay_minutes > 0:
            return self._schedule(rule, event, delay_minutes)
        return await self.execute(rule, event)

    def _schedule(self, rule: Rule, event: Event, delay_minutes: int) -> DispatchOutcome:
        delay_seconds = delay_minutes * 60
        scheduled = self._scheduler.schedule(
            delay_seconds,
            partial(self.execute, rule, event),
            label=rule.name,
        )
        outcome = self._outcome(
            rule,
            event,
            DispatchStatus.SCHEDULED,
            reason=f"Runs in {delay_minutes} min",
            scheduled_action_id=scheduled.action_id,
            fire_at=datetime.now(timezone.utc) + timedelta(seconds=delay_seconds),
        )
        self._reporter.report(outcome)
        return outcome

    async def execute(self, rule: Rule, event: Event) -> DispatchOutcome:
        """Run a rule's action now.

        Handler errors are caught and reported as ``failed``; nothing is
        raised to the caller.

        Args:
            rule: Matched rule
            event: Triggering event

        Returns:
            Dispatch outcome
        """
        with event_context(event.event_id, event.trigger):
            start = time.perf_counter()
            try:
                status, reason = await self._run(rule, event)
            except Exception as e:
                status, reason = DispatchStatus.FAILED, f"{type(e).__name__}: {e}"

            elapsed = time.perf_counter() - start
            if status in (DispatchStatus.SUCCEEDED, DispatchStatus.FAILED):
                ACTION_LATENCY.labels(action=rule.action_kind.value).observe(elapsed)

            outcome = self._outcome(
                rule,
                event,
                status,
                reason=reason,
                latency_ms=int(elapsed * 1000),
            )
            self._reporter.report(outcome)
            return outcome

    async def _run(self, rule: Rule, event: Event) -> Result:
        action = rule.action

        if isinstance(action, WebhookAction):
            return await self._webhook(rule, action, event)
        if isinstance(action, CreateTaskAction):
            return await self._create_task(action, event)
        if isinstance(action, AddToScheduleAction):
            return await self._add_to_schedule(event)
        if isinstance(action, SendEmailAction):
            return await self._send_email(action, event)
        if isinstance(action, UpdateInventoryAction):
            return await self._update_inventory(event)
        if isinstance(action, SendSmsAction):
            return DispatchStatus.UNSUPPORTED, "send_sms has no handler in this version"
        if isinstance(action, UpdateJobStatusAction):
            return (
                DispatchStatus.UNSUPPORTED,
                f"update_job_status to {action.new_status!r} has no handler in this version",
            )
        if isinstance(action, AssignTeamAction):
            return DispatchStatus.UNSUPPORTED, "assign_team has no handler in this version"
        if isinstance(action, CreateInvoiceAction):
            return DispatchStatus.UNSUPPORTED, "create_invoice has no handler in this version"

        return DispatchStatus.UNSUPPORTED, f"Unknown action kind: {action.type}"

    async def _webhook(self, rule: Rule, action: WebhookAction, event: Event) -> Result:
        if not action.url:
            return DispatchStatus.SKIPPED, "No webhook URL configured"
        if self._handlers.webhook is None:
            return DispatchStatus.SKIPPED, "No webhook handler configured"

        body = WebhookBody(
            automation=rule.name,
            trigger=event.trigger,
            data=event.raw_data(),
        )
        await self._handlers.webhook.post(action.url, body.model_dump(mode="json"))
        return DispatchStatus.SUCCEEDED, ""

    async def _create_task(self, action: CreateTaskAction, event: Event) -> Result:
        title = replace_placeholders(action.task_title, event.data)
        if not title.strip():
            return DispatchStatus.SKIPPED, "Task title is empty"
        if self._handlers.tasks is None:
            return DispatchStatus.SKIPPED, "No task handler configured"

        draft = TaskDraft(
            title=title,
            description=replace_placeholders(action.task_description, event.data),
            assigned_to=[],
        )
        await self._handlers.tasks.create_task(draft)
        return DispatchStatus.SUCCEEDED, ""

    async def _add_to_schedule(self, event: Event) -> Result:
        job = event.data
        if not isinstance(job, JobRecord) or job.customer is None:
            return DispatchStatus.SKIPPED, "add_to_schedule needs a job with a customer"
        if self._handlers.schedule is None:
            return DispatchStatus.SKIPPED, "No schedule handler configured"

        today = self._today()
        entry = ScheduleEntry(
            name=replace_placeholders(SCHEDULE_ENTRY_NAME, job),
            start=today,
            end=today,
            color=self._settings.schedule_color,
            links=[],
        )
        await self._handlers.schedule.add_to_schedule(entry)
        return DispatchStatus.SUCCEEDED, ""

    def _email_recipient(self, action: SendEmailAction, event: Event) -> str:
        if action.email_recipient == RecipientType.CUSTOM:
            return action.custom_email or ""
        if action.email_recipient == RecipientType.TEAM:
            return self._settings.team_email

        customer = customer_of(event.data)
        if customer and customer.email:
            return customer.email
        extra = (event.data.model_extra or {}) if event.data is not None else {}
        return extra.get("email") or ""

    async def _send_email(self, action: SendEmailAction, event: Event) -> Result:
        recipient = self._email_recipient(action, event)
        if not recipient:
            return DispatchStatus.SKIPPED, "No email recipient found"

        if not action.email_subject:
            return DispatchStatus.SKIPPED, "No email subject configured"
        if self._handlers.email is None:
            return DispatchStatus.SKIPPED, "No email handler configured"

        subject = replace_placeholders(action.email_subject, event.data)
        body = replace_placeholders(action.email_body, event.data)
        await self._handlers.email.send(recipient, subject, body)
        return DispatchStatus.SUCCEEDED, ""

    async def _update_inventory(self, event: Event) -> Result:
        if not isinstance(event.data, JobRecord):
            return DispatchStatus.SKIPPED, "update_inventory can only run for job events"
        if self._handlers.inventory is None:
            return DispatchStatus.SKIPPED, "No inventory handler configured"

        await self._handlers.inventory.deduct_for_job(event.data)
        return DispatchStatus.SUCCEEDED, ""

    @staticmethod
    def _outcome(
        rule: Rule,
        event: Event,
        status: DispatchStatus,
        **fields,
    ) -> DispatchOutcome:
        return DispatchOutcome(
            rule_id=rule.id,
            rule_name=rule.name,
            trigger=event.trigger,
            action=rule.action_kind.value,
            event_id=event.event_id,
            status=status,
            **fields,
        )
