"""Per-event log context."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog


@contextmanager
def event_context(event_id: str, trigger: str) -> Iterator[None]:
    """Bind event identifiers to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(event_id=event_id, trigger=trigger):
        yield
