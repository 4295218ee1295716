import io
import json
import logging
from decimal import Decimal

import pytest

import ledger_insight.logging_config as logging_config


@pytest.fixture(autouse=True)
def _reset_logging():
    logging_config.reset_logging()
    yield
    logging_config.reset_logging()


def test_json_format_emits_one_object_per_line() -> None:
    stream = io.StringIO()
    logging_config.configure_logging(level="INFO", fmt="json", stream=stream)

    logger = logging_config.get_logger("engine")
    logger.info("Dashboard computed", extra={"version": 3, "balance": Decimal("10.5")})
    logger.debug("not emitted")

    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["level"] == "INFO"
    assert payload["logger"] == "ledger_insight.engine"
    assert payload["message"] == "Dashboard computed"
    assert payload["version"] == 3
    assert payload["balance"] == "10.5"


def test_text_format_and_module_loggers() -> None:
    stream = io.StringIO()
    logging_config.configure_logging(level=logging.DEBUG, stream=stream)

    logging.getLogger("ledger_insight.io").debug("Loaded %d rows", 4)

    assert "DEBUG" in stream.getvalue()
    assert "ledger_insight.io: Loaded 4 rows" in stream.getvalue()


def test_configure_logging_is_idempotent() -> None:
    first, second = io.StringIO(), io.StringIO()
    logging_config.configure_logging(level="INFO", stream=first)
    logging_config.configure_logging(level="DEBUG", stream=second)

    root = logging.getLogger("ledger_insight")
    assert len(root.handlers) == 1
    assert root.level == logging.INFO


def test_get_logger_keeps_namespaced_names() -> None:
    assert logging_config.get_logger("ledger_insight.cli").name == "ledger_insight.cli"
    assert logging_config.get_logger("ledger_insight").name == "ledger_insight"


@pytest.mark.parametrize("kwargs", [{"level": "LOUD"}, {"fmt": "yaml"}])
def test_invalid_options_raise(kwargs) -> None:
    with pytest.raises(ValueError):
        logging_config.configure_logging(**kwargs)
