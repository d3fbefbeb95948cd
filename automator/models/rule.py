"""Rule (automation) domain models."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TriggerKind(str, Enum):
    """Event kinds a rule can listen for."""

    NEW_CUSTOMER = "new_customer"
    JOB_CREATED = "job_created"
    JOB_STATUS_UPDATED = "job_status_updated"
    TASK_COMPLETED = "task_completed"
    INVOICE_OVERDUE = "invoice_overdue"
    SCHEDULED_TIME = "scheduled_time"
    INVENTORY_LOW = "inventory_low"


class ActionKind(str, Enum):
    """Effects a rule can produce."""

    WEBHOOK = "webhook"
    CREATE_TASK = "create_task"
    ADD_TO_SCHEDULE = "add_to_schedule"
    SEND_EMAIL = "send_email"
    UPDATE_INVENTORY = "update_inventory"
    SEND_SMS = "send_sms"
    UPDATE_JOB_STATUS = "update_job_status"
    ASSIGN_TEAM = "assign_team"
    CREATE_INVOICE = "create_invoice"


class RecipientType(str, Enum):
    """Who receives an email or SMS."""

    CUSTOMER = "customer"
    TEAM = "team"
    CUSTOM = "custom"


class TaskPriority(str, Enum):
    """Priority of a created task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConditionOperator(str, Enum):
    """Operators for generic rule conditions."""

    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"


class _KindConfig(BaseModel):
    """Kind-specific configuration; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


# --- Triggers ---


class JobValueBounds(_KindConfig):
    """Optional job value bounds for job-related triggers."""

    job_value_min: float | None = Field(default=None, description="Minimum job value (inclusive)")
    job_value_max: float | None = Field(default=None, description="Maximum job value (inclusive)")


class NewCustomerTrigger(_KindConfig):
    type: Literal["new_customer"] = "new_customer"


class JobCreatedTrigger(JobValueBounds):
    type: Literal["job_created"] = "job_created"


class JobStatusUpdatedTrigger(JobValueBounds):
    type: Literal["job_status_updated"] = "job_status_updated"
    to_status: str = Field(..., min_length=1, description="Status the job moved to")
    from_status: str | None = Field(default=None, description="Status the job moved from")


class TaskCompletedTrigger(_KindConfig):
    type: Literal["task_completed"] = "task_completed"


class InvoiceOverdueTrigger(_KindConfig):
    type: Literal["invoice_overdue"] = "invoice_overdue"
    days_overdue: int | None = Field(
        default=None,
        ge=0,
        description="Days overdue before the event source raises the event",
    )


class ScheduledTimeTrigger(_KindConfig):
    type: Literal["scheduled_time"] = "scheduled_time"
    time: str | None = Field(
        default=None,
        pattern=r"^([01]\d|2[0-3]):[0-5]\d$",
        description="Daily time of day, HH:MM",
    )


class InventoryLowTrigger(_KindConfig):
    type: Literal["inventory_low"] = "inventory_low"
    item_name: str | None = Field(default=None, description="Watched inventory item")
    stock_threshold: float | None = Field(default=None, ge=0, description="Low stock threshold")


TriggerConfig = Annotated[
    Union[
        NewCustomerTrigger,
        JobCreatedTrigger,
        JobStatusUpdatedTrigger,
        TaskCompletedTrigger,
        InvoiceOverdueTrigger,
        ScheduledTimeTrigger,
        InventoryLowTrigger,
    ],
    Field(discriminator="type"),
]


# --- Actions ---


class _ActionBase(_KindConfig):
    delay_minutes: int | None = Field(
        default=None,
        ge=0,
        description="Minutes to wait before running the action (0 or absent = immediate)",
    )


class WebhookAction(_ActionBase):
    type: Literal["webhook"] = "webhook"
    url: str | None = Field(default=None, description="Webhook URL")


class CreateTaskAction(_ActionBase):
    type: Literal["create_task"] = "create_task"
    task_title: str | None = Field(default=None, description="Task title template")
    task_description: str | None = Field(default=None, description="Task description template")
    task_priority: TaskPriority | None = None


class AddToScheduleAction(_ActionBase):
    type: Literal["add_to_schedule"] = "add_to_schedule"


class SendEmailAction(_ActionBase):
    type: Literal["send_email"] = "send_email"
    email_recipient: RecipientType = RecipientType.CUSTOMER
    custom_email: str | None = None
    email_subject: str | None = Field(default=None, description="Subject template")
    email_body: str | None = Field(default=None, description="Body template")


class UpdateInventoryAction(_ActionBase):
    type: Literal["update_inventory"] = "update_inventory"


class SendSmsAction(_ActionBase):
    type: Literal["send_sms"] = "send_sms"
    sms_message: str | None = None
    sms_recipient: RecipientType = RecipientType.CUSTOMER
    custom_phone: str | None = None


class UpdateJobStatusAction(_ActionBase):
    type: Literal["update_job_status"] = "update_job_status"
    new_status: str | None = None


class AssignTeamAction(_ActionBase):
    type: Literal["assign_team"] = "assign_team"
    team_ids: list[int] = Field(default_factory=list)


class CreateInvoiceAction(_ActionBase):
    type: Literal["create_invoice"] = "create_invoice"


ActionConfig = Annotated[
    Union[
        WebhookAction,
        CreateTaskAction,
        AddToScheduleAction,
        SendEmailAction,
        UpdateInventoryAction,
        SendSmsAction,
        UpdateJobStatusAction,
        AssignTeamAction,
        CreateInvoiceAction,
    ],
    Field(discriminator="type"),
]


class Condition(BaseModel):
    """Generic field/operator/value predicate.

    Stored with the rule but not consulted during matching.
    """

    field: str | None = None
    operator: ConditionOperator | None = None
    value: Any = None


class Rule(BaseModel):
    """An automation: trigger, optional conditions and an action."""

    id: int | str | None = Field(default=None, description="Absent for rules not yet created")
    name: str = Field(..., min_length=1, description="Rule name")
    description: str | None = Field(default=None, description="Rule description")
    trigger: TriggerConfig
    action: ActionConfig
    conditions: list[Condition] = Field(default_factory=list)
    is_enabled: bool = Field(default=True, description="Whether rule is enabled")

    @model_validator(mode="before")
    @classmethod
    def fold_flat_shape(cls, data: Any) -> Any:
        """Accept the flat ``trigger_type``/``trigger_config`` storage shape."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        for prefix in ("trigger", "action"):
            kind = data.pop(f"{prefix}_type", None)
            config = data.pop(f"{prefix}_config", None) or {}
            if prefix in data or kind is None:
                continue
            data[prefix] = {
                "type": kind,
                **{key: value for key, value in config.items() if value is not None},
            }
        return data

    @property
    def trigger_kind(self) -> TriggerKind:
        return TriggerKind(self.trigger.type)

    @property
    def action_kind(self) -> ActionKind:
        return ActionKind(self.action.type)

    @property
    def delay_minutes(self) -> int:
        """Configured delay, 0 when absent."""
        return self.action.delay_minutes or 0

    def listens_for(self, trigger: TriggerKind | str) -> bool:
        """Check if rule listens for the given trigger kind."""
        return self.trigger.type == TriggerKind(trigger).value
