"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from automator.core.config import Settings
from automator.engine.clock import ManualClock
from automator.engine.engine import AutomationEngine
from automator.engine.scheduler import DelayedActionScheduler
from automator.handlers.base import (
    ActionHandlers,
    EmailSender,
    InventoryLedger,
    ScheduleWriter,
    TaskCreator,
    WebhookSender,
)
from automator.models.commands import ScheduleEntry, TaskDraft
from automator.models.event import JobRecord
from automator.models.outcome import DispatchOutcome
from automator.models.rule import Rule
from automator.observability.reporter import OutcomeReporter


class FakeTaskCreator(TaskCreator):
    def __init__(self) -> None:
        self.created: list[TaskDraft] = []

    async def create_task(self, draft: TaskDraft) -> Any:
        self.created.append(draft)
        return {"id": len(self.created), **draft.model_dump()}


class FakeScheduleWriter(ScheduleWriter):
    def __init__(self) -> None:
        self.entries: list[ScheduleEntry] = []

    async def add_to_schedule(self, entry: ScheduleEntry) -> Any:
        self.entries.append(entry)
        return entry


class FakeEmailSender(EmailSender):
    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.error = error
        self.closed = False

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.error:
            raise self.error
        self.sent.append((to, subject, body))

    async def close(self) -> None:
        self.closed = True


class FakeInventoryLedger(InventoryLedger):
    def __init__(self) -> None:
        self.jobs: list[JobRecord] = []

    async def deduct_for_job(self, job: JobRecord) -> None:
        self.jobs.append(job)


class FakeWebhookSender(WebhookSender):
    def __init__(self, error: Exception | None = None) -> None:
        self.posts: list[tuple[str, dict]] = []
        self.error = error

    async def post(self, url: str, body: dict) -> None:
        if self.error:
            raise self.error
        self.posts.append((url, body))


class RecordingReporter(OutcomeReporter):
    """Keeps every reported outcome in memory."""

    def __init__(self) -> None:
        self.outcomes: list[DispatchOutcome] = []

    def report(self, outcome: DispatchOutcome) -> None:
        self.outcomes.append(outcome)

    def statuses(self) -> list[str]:
        return [outcome.status.value for outcome in self.outcomes]


def make_rule(
    name: str,
    trigger: dict[str, Any],
    action: dict[str, Any],
    enabled: bool = True,
    **fields: Any,
) -> Rule:
    return Rule(
        name=name,
        trigger=trigger,
        action=action,
        is_enabled=enabled,
        **fields,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, team_email="team@example.com")


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler(clock: ManualClock) -> DelayedActionScheduler:
    return DelayedActionScheduler(clock=clock)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def handlers() -> ActionHandlers:
    return ActionHandlers(
        tasks=FakeTaskCreator(),
        schedule=FakeScheduleWriter(),
        email=FakeEmailSender(),
        inventory=FakeInventoryLedger(),
        webhook=FakeWebhookSender(),
    )


@pytest.fixture
def engine(
    handlers: ActionHandlers,
    reporter: RecordingReporter,
    scheduler: DelayedActionScheduler,
    settings: Settings,
) -> AutomationEngine:
    return AutomationEngine(
        handlers=handlers,
        reporter=reporter,
        scheduler=scheduler,
        settings=settings,
    )


@pytest.fixture
def job_data() -> dict[str, Any]:
    """Job payload as sent by the web client."""
    return {
        "id": 7,
        "estimateNumber": "1042",
        "status": "sold",
        "calcData": {
            "customer": {
                "name": "Acme",
                "address": "1 Main St",
                "email": "acme@example.com",
            },
        },
        "costsData": {"finalQuote": 1250.5},
    }


@pytest.fixture
def customer_data() -> dict[str, Any]:
    return {
        "id": 3,
        "name": "Jane Doe",
        "address": "22 Oak Ave",
        "email": "jane@example.com",
        "phone": "555-0100",
    }
