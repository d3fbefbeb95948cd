"""Tests for condition evaluation and rule matching."""

import pytest

from automator.engine.conditions import should_fire
from automator.engine.matcher import match_rules
from automator.models.event import build_event
from automator.models.rule import Rule

from conftest import make_rule

TASK_ACTION = {"type": "create_task", "task_title": "Follow up"}


def job_event(trigger: str, value: float | None = None, status: str = "estimate", **fields):
    data = {"estimateNumber": "1", "status": status, **fields}
    if value is not None:
        data["costsData"] = {"finalQuote": value}
    return build_event(trigger, data)


def test_job_value_min_boundary_is_inclusive() -> None:
    rule = make_rule("Big jobs", {"type": "job_created", "job_value_min": 500}, TASK_ACTION)

    assert not should_fire(rule.trigger, job_event("job_created", 499.99))
    assert should_fire(rule.trigger, job_event("job_created", 500.00))


def test_job_value_max_boundary_is_inclusive() -> None:
    rule = make_rule("Small jobs", {"type": "job_created", "job_value_max": 1000}, TASK_ACTION)

    assert should_fire(rule.trigger, job_event("job_created", 1000))
    assert not should_fire(rule.trigger, job_event("job_created", 1000.01))


def test_missing_job_value_counts_as_zero() -> None:
    with_min = make_rule("Min", {"type": "job_created", "job_value_min": 1}, TASK_ACTION)
    with_max = make_rule("Max", {"type": "job_created", "job_value_max": 10}, TASK_ACTION)

    assert not should_fire(with_min.trigger, job_event("job_created"))
    assert should_fire(with_max.trigger, job_event("job_created"))


def test_zero_bounds_do_not_filter() -> None:
    rule = make_rule(
        "Unbounded",
        {"type": "job_created", "job_value_min": 0, "job_value_max": 0},
        TASK_ACTION,
    )

    assert should_fire(rule.trigger, job_event("job_created", 12345))


def test_status_update_requires_to_status() -> None:
    rule = make_rule("Sold", {"type": "job_status_updated", "to_status": "sold"}, TASK_ACTION)

    assert should_fire(rule.trigger, job_event("job_status_updated", status="sold"))
    assert not should_fire(rule.trigger, job_event("job_status_updated", status="invoiced"))


def test_from_status_is_not_checked_by_default() -> None:
    rule = make_rule(
        "Estimate to sold",
        {"type": "job_status_updated", "to_status": "sold", "from_status": "estimate"},
        TASK_ACTION,
    )

    assert should_fire(rule.trigger, job_event("job_status_updated", status="sold", previousStatus="paid"))
    assert should_fire(rule.trigger, job_event("job_status_updated", status="sold"))


def test_from_status_enforced_when_enabled() -> None:
    rule = make_rule(
        "Estimate to sold",
        {"type": "job_status_updated", "to_status": "sold", "from_status": "estimate"},
        TASK_ACTION,
    )

    matching = job_event("job_status_updated", status="sold", previousStatus="estimate")
    other = job_event("job_status_updated", status="sold", previousStatus="invoiced")
    unknown = job_event("job_status_updated", status="sold")

    assert should_fire(rule.trigger, matching, check_from_status=True)
    assert not should_fire(rule.trigger, other, check_from_status=True)
    assert not should_fire(rule.trigger, unknown, check_from_status=True)


def test_status_update_applies_value_bounds_after_status() -> None:
    rule = make_rule(
        "Big sale",
        {"type": "job_status_updated", "to_status": "sold", "job_value_min": 500},
        TASK_ACTION,
    )

    assert not should_fire(rule.trigger, job_event("job_status_updated", 100, status="sold"))
    assert should_fire(rule.trigger, job_event("job_status_updated", 600, status="sold"))


@pytest.mark.parametrize(
    ("trigger", "data"),
    [
        ({"type": "new_customer"}, {"name": "A"}),
        ({"type": "task_completed"}, {"title": "T"}),
        ({"type": "invoice_overdue", "days_overdue": 30}, {"daysOverdue": 1}),
        ({"type": "scheduled_time", "time": "08:00"}, None),
        ({"type": "inventory_low", "item_name": "Shingles", "stock_threshold": 5}, {"name": "Nails"}),
    ],
)
def test_unnarrowed_triggers_always_fire(trigger: dict, data: dict | None) -> None:
    rule = make_rule("Any", trigger, TASK_ACTION)
    event = build_event(trigger["type"], data)

    assert should_fire(rule.trigger, event)


def test_trigger_of_other_kind_never_fires() -> None:
    rule = make_rule("Customers", {"type": "new_customer"}, TASK_ACTION)

    assert not should_fire(rule.trigger, job_event("job_created", 10))


def test_matcher_filters_and_preserves_order() -> None:
    rules: list[Rule] = [
        make_rule("first", {"type": "job_created"}, TASK_ACTION),
        make_rule("disabled", {"type": "job_created"}, TASK_ACTION, enabled=False),
        make_rule("other kind", {"type": "new_customer"}, TASK_ACTION),
        make_rule("too small", {"type": "job_created", "job_value_min": 5000}, TASK_ACTION),
        make_rule("second", {"type": "job_created", "job_value_max": 2000}, TASK_ACTION),
        make_rule("third", {"type": "job_created"}, TASK_ACTION),
    ]

    matched = match_rules(job_event("job_created", 1500), rules)

    assert [rule.name for rule in matched] == ["first", "second", "third"]


def test_matcher_ignores_generic_conditions() -> None:
    rule = make_rule(
        "With conditions",
        {"type": "new_customer"},
        TASK_ACTION,
        conditions=[{"field": "name", "operator": "equals", "value": "Nobody"}],
    )

    matched = match_rules(build_event("new_customer", {"name": "Somebody"}), [rule])

    assert matched == [rule]


def test_matcher_on_empty_rule_set() -> None:
    assert match_rules(build_event("scheduled_time"), []) == []
