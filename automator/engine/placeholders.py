"""Placeholder substitution over event data."""

import re

from automator.models.event import (
    CustomerRecord,
    EventData,
    InvoiceRecord,
    JobRecord,
)

PLACEHOLDER_PATTERN = re.compile(r"\[(customer_name|customer_address|job_number|job_value)\]")


def customer_of(data: EventData | None) -> CustomerRecord | None:
    """Customer attached to the record, or the record itself."""
    if isinstance(data, JobRecord):
        return data.customer
    if isinstance(data, InvoiceRecord):
        return data.customer
    if isinstance(data, CustomerRecord):
        return data
    return None


def _text(value: object) -> str:
    return "" if value is None else str(value)


def placeholder_values(data: EventData | None) -> dict[str, str]:
    """Extract placeholder values from event data.

    Missing fields resolve to the empty string.

    Args:
        data: Event payload record

    Returns:
        Mapping of placeholder name to substitution text
    """
    customer = customer_of(data)
    extra = (data.model_extra or {}) if data is not None else {}
    values = {
        "customer_name": _text((customer.name if customer else None) or extra.get("name")),
        "customer_address": _text((customer.address if customer else None) or extra.get("address")),
        "job_number": "",
        "job_value": "",
    }

    if isinstance(data, (JobRecord, InvoiceRecord)):
        values["job_number"] = _text(data.estimate_number)

    if isinstance(data, JobRecord) and data.costs_data and data.costs_data.final_quote is not None:
        values["job_value"] = f"{data.costs_data.final_quote:.2f}"

    return values


def replace_placeholders(text: str | None, data: EventData | None) -> str:
    """Replace ``[customer_name]``-style tokens in text.

    Only the fixed placeholder set is replaced; other bracketed tokens are
    left as written.

    Args:
        text: Template text
        data: Event payload record

    Returns:
        Text with placeholders substituted
    """
    if not text:
        return ""

    values = placeholder_values(data)
    return PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], text)
