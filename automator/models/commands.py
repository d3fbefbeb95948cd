"""Commands passed from the dispatcher to action handlers."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field


class TaskDraft(BaseModel):
    """Task to be created by the task handler."""

    title: str = Field(..., min_length=1)
    description: str = ""
    assigned_to: list[int] = Field(default_factory=list, description="Empty means unassigned")


class ScheduleEntry(BaseModel):
    """Entry to be added to the job schedule."""

    name: str
    start: date
    end: date
    color: str
    links: list[str] = Field(default_factory=list)


class WebhookBody(BaseModel):
    """JSON body posted to webhook URLs."""

    automation: str
    trigger: str
    data: dict[str, Any] | None = None
