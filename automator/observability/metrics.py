"""Prometheus metrics definitions."""

from prometheus_client import Counter, Gauge, Histogram

# Event metrics
EVENTS_RECEIVED = Counter(
    "automator_events_received_total",
    "Total number of events received",
    ["trigger"],
)

EVENTS_REJECTED = Counter(
    "automator_events_rejected_total",
    "Events whose payload did not fit the trigger kind",
    ["trigger"],
)

# Rule metrics
RULES_MATCHED = Counter(
    "automator_rules_matched_total",
    "Total number of rule matches",
    ["trigger", "action"],
)

# Action metrics
ACTIONS_DISPATCHED = Counter(
    "automator_actions_dispatched_total",
    "Action dispatch outcomes",
    ["action", "status"],
)

ACTION_LATENCY = Histogram(
    "automator_action_latency_seconds",
    "Action handler latency in seconds",
    ["action"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Scheduler metrics
DELAYED_ACTIONS_PENDING = Gauge(
    "automator_delayed_actions_pending",
    "Number of delayed actions waiting to fire",
)
