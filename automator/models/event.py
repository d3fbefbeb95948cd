"""Event domain models.

Each trigger kind carries exactly one payload shape. Payload records accept
camelCase keys as sent by the web client and keep unknown fields, so the raw
record can be forwarded to webhooks as received.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from automator.models.rule import TriggerKind


class Record(BaseModel):
    """Base for business records carried by events."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class CustomerRecord(Record):
    id: int | str | None = None
    name: str | None = None
    address: str | None = None
    email: str | None = None
    phone: str | None = None


class CalcData(Record):
    customer: CustomerRecord | None = None


class CostsData(Record):
    final_quote: float | None = None


class JobRecord(Record):
    """Job/estimate record."""

    id: int | str | None = None
    estimate_number: str | int | None = None
    status: str | None = None
    previous_status: str | None = Field(
        default=None,
        description="Status before the change, when the event source knows it",
    )
    calc_data: CalcData | None = None
    costs_data: CostsData | None = None

    @property
    def customer(self) -> CustomerRecord | None:
        return self.calc_data.customer if self.calc_data else None

    @property
    def value(self) -> float:
        """Final quoted value, 0 when absent."""
        if self.costs_data and self.costs_data.final_quote is not None:
            return self.costs_data.final_quote
        return 0.0


class TaskRecord(Record):
    id: int | str | None = None
    title: str | None = None
    description: str | None = None
    completed: bool = True
    assigned_to: list[int] = Field(default_factory=list)


class InvoiceRecord(Record):
    id: int | str | None = None
    invoice_number: str | int | None = None
    estimate_number: str | int | None = None
    customer: CustomerRecord | None = None
    amount: float | None = None
    days_overdue: int | None = None


class InventoryItem(Record):
    id: int | str | None = None
    name: str | None = None
    quantity: float | None = None
    stock_threshold: float | None = None


EventData = CustomerRecord | JobRecord | TaskRecord | InvoiceRecord | InventoryItem


def _new_event_id() -> str:
    return f"evt_{uuid.uuid4().hex[:12]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _EventBase(BaseModel):
    event_id: str = Field(default_factory=_new_event_id, description="Event identifier")
    occurred_at: datetime = Field(default_factory=_utcnow)

    _raw: dict[str, Any] | None = PrivateAttr(default=None)

    def raw_data(self) -> dict[str, Any] | None:
        """Event data in the shape it was received.

        Events built from a mapping return a copy of that mapping. Events
        built from a record return only the fields that were set on it.
        """
        if self._raw is not None:
            return copy.deepcopy(self._raw)
        data = getattr(self, "data", None)
        if data is None:
            return None
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)


class NewCustomerEvent(_EventBase):
    trigger: Literal["new_customer"] = "new_customer"
    data: CustomerRecord


class JobCreatedEvent(_EventBase):
    trigger: Literal["job_created"] = "job_created"
    data: JobRecord


class JobStatusUpdatedEvent(_EventBase):
    trigger: Literal["job_status_updated"] = "job_status_updated"
    data: JobRecord


class TaskCompletedEvent(_EventBase):
    trigger: Literal["task_completed"] = "task_completed"
    data: TaskRecord


class InvoiceOverdueEvent(_EventBase):
    trigger: Literal["invoice_overdue"] = "invoice_overdue"
    data: InvoiceRecord


class ScheduledTimeEvent(_EventBase):
    trigger: Literal["scheduled_time"] = "scheduled_time"
    data: None = None

    @field_validator("data", mode="before")
    @classmethod
    def empty_mapping_is_none(cls, value: Any) -> Any:
        """Clock sources may send ``{}`` for an event without a payload."""
        if isinstance(value, dict) and not value:
            return None
        return value


class InventoryLowEvent(_EventBase):
    trigger: Literal["inventory_low"] = "inventory_low"
    data: InventoryItem


Event = Annotated[
    Union[
        NewCustomerEvent,
        JobCreatedEvent,
        JobStatusUpdatedEvent,
        TaskCompletedEvent,
        InvoiceOverdueEvent,
        ScheduledTimeEvent,
        InventoryLowEvent,
    ],
    Field(discriminator="trigger"),
]

_event_adapter: TypeAdapter[Event] = TypeAdapter(Event)


def build_event(
    trigger: TriggerKind | str,
    data: EventData | dict[str, Any] | None = None,
    **extra: Any,
) -> Event:
    """Build a typed event from a trigger kind and its payload.

    Args:
        trigger: Trigger kind
        data: Payload record or its dict form
        **extra: Additional event fields (event_id, occurred_at)

    Returns:
        Event of the matching kind

    Raises:
        ValueError: If trigger is unknown
        pydantic.ValidationError: If data does not fit the trigger's payload shape
    """
    kind = TriggerKind(trigger)
    event = _event_adapter.validate_python({"trigger": kind.value, "data": data, **extra})
    if isinstance(data, dict) and event.data is not None:
        event._raw = copy.deepcopy(data)
    return event
