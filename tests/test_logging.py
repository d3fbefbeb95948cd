"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from automator.core.config import Settings
from automator.core.logging import service_context, setup_logging


@pytest.fixture
def restore_logging():
    yield
    structlog.reset_defaults()
    for name in ("httpx", "httpcore", "aiosmtplib"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_service_context_stamps_name_and_version() -> None:
    settings = Settings(_env_file=None, app_name="Automator", app_version="2.1.0")
    add_service = service_context(settings)

    event_dict = add_service(None, "info", {"event": "Rule matched"})

    assert event_dict == {
        "event": "Rule matched",
        "service": "Automator",
        "service_version": "2.1.0",
    }


def test_service_context_keeps_bound_values() -> None:
    add_service = service_context(Settings(_env_file=None))

    event_dict = add_service(None, "info", {"event": "x", "service": "worker"})

    assert event_dict["service"] == "worker"


def test_setup_logging_renders_json_with_service_fields(restore_logging, capsys) -> None:
    settings = Settings(_env_file=None, app_name="Automator", app_version="2.1.0", log_level="INFO")

    setup_logging(settings)
    structlog.get_logger("automator.tests").info("Action dispatched", rule="Welcome")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["event"] == "Action dispatched"
    assert record["rule"] == "Welcome"
    assert record["level"] == "info"
    assert record["service"] == "Automator"
    assert record["service_version"] == "2.1.0"


def test_setup_logging_filters_below_level(restore_logging, capsys) -> None:
    setup_logging(Settings(_env_file=None, log_level="WARNING"))

    structlog.get_logger("automator.tests").info("Rule matched")

    assert capsys.readouterr().out == ""


def test_setup_logging_quiets_transport_loggers(restore_logging) -> None:
    setup_logging(Settings(_env_file=None, log_level="INFO"))

    assert logging.getLogger("httpx").level == logging.WARNING
