"""Action handler contracts.

Handlers perform the side effects of actions. The dispatcher catches and
reports anything they raise; timeouts are the handler's responsibility.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from automator.models.commands import ScheduleEntry, TaskDraft
from automator.models.event import JobRecord


class ActionHandler(ABC):
    """Base class for action handlers."""

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
        pass


class TaskCreator(ActionHandler):
    @abstractmethod
    async def create_task(self, draft: TaskDraft) -> Any:
        """Create a task and return the created record."""


class ScheduleWriter(ActionHandler):
    @abstractmethod
    async def add_to_schedule(self, entry: ScheduleEntry) -> Any:
        """Add an entry to the job schedule and return it."""


class EmailSender(ActionHandler):
    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> None:
        """Send an email. Raises on transport failure."""


class InventoryLedger(ActionHandler):
    @abstractmethod
    async def deduct_for_job(self, job: JobRecord) -> None:
        """Deduct the materials used by a job from inventory."""


class WebhookSender(ActionHandler):
    @abstractmethod
    async def post(self, url: str, body: dict[str, Any]) -> None:
        """POST a JSON body. Raises on network failure or error status."""


@dataclass
class ActionHandlers:
    """Handlers wired into the dispatcher; None means not available."""

    tasks: TaskCreator | None = None
    schedule: ScheduleWriter | None = None
    email: EmailSender | None = None
    inventory: InventoryLedger | None = None
    webhook: WebhookSender | None = None

    def all(self) -> list[ActionHandler]:
        return [
            handler
            for handler in (self.tasks, self.schedule, self.email, self.inventory, self.webhook)
            if handler is not None
        ]

    async def close(self) -> None:
        for handler in self.all():
            await handler.close()
