"""Unit tests for catalog.core.logging module."""

import json
import logging
from typing import Any

import pytest
import pytest_check
from loguru import logger
from pytest_mock import MockerFixture

from catalog.core import logging as catalog_logging
from catalog.core.config import Settings
from catalog.core.logging import (
    InterceptHandler,
    format_console_with_context,
    serialize_for_json,
    setup_logging,
)


@pytest.mark.unit
class TestSerializeForJson:
    """Tests for the JSON line formatter."""

    def test_includes_extra_fields(self, log_records: list[dict[str, Any]]) -> None:
        logger.bind(cache_key="products-cache", reason="timeout").warning(
            "Cache backend unavailable"
        )

        entry = json.loads(serialize_for_json(log_records[-1]))

        pytest_check.equal(entry["level"], "WARNING")
        pytest_check.equal(entry["message"], "Cache backend unavailable")
        pytest_check.equal(entry["cache_key"], "products-cache")
        pytest_check.equal(entry["reason"], "timeout")

    def test_includes_exception_type(self, log_records: list[dict[str, Any]]) -> None:
        try:
            raise ConnectionRefusedError("refused")
        except ConnectionRefusedError:
            logger.exception("Failed")

        entry = json.loads(serialize_for_json(log_records[-1]))

        assert entry["exception"]["type"] == "ConnectionRefusedError"


@pytest.mark.unit
class TestFormatConsoleWithContext:
    """Tests for the console formatter."""

    def test_priority_fields_first(self, log_records: list[dict[str, Any]]) -> None:
        logger.bind(
            rows=3, cache_key="products-cache", correlation_id="0123456789abcdef"
        ).info("Cached")

        line = format_console_with_context(log_records[-1])

        pytest_check.is_in("[<yellow>01234567</yellow>]", line)
        pytest_check.less(
            line.index("cache_key=products-cache"), line.index("rows=3")
        )

    def test_sensitive_fields_redacted(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        logger.bind(password="hunter2").info("Connecting")

        line = format_console_with_context(log_records[-1])

        pytest_check.is_in("password=[REDACTED]", line)
        pytest_check.is_not_in("hunter2", line)

    def test_braces_in_message_are_escaped(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        logger.info("Payload {}", "{not-a-field}")

        line = format_console_with_context(log_records[-1])

        assert "{{not-a-field}}" in line


@pytest.mark.unit
class TestInterceptHandler:
    """Tests for routing standard logging into Loguru."""

    def test_forwards_message_and_extras(
        self, log_records: list[dict[str, Any]]
    ) -> None:
        std_logger = logging.getLogger("catalog.tests.intercept")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(logging.DEBUG)

        std_logger.warning("redis reconnecting", extra={"attempt": 2})

        record = log_records[-1]
        pytest_check.equal(record["message"], "redis reconnecting")
        pytest_check.equal(record["level"].name, "WARNING")
        pytest_check.equal(record["extra"]["attempt"], 2)
        pytest_check.is_not_in("levelname", record["extra"])


@pytest.mark.unit
class TestSetupLogging:
    """Tests for one-time Loguru configuration."""

    def test_json_formatter_adds_enqueued_sink(
        self, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(catalog_logging._state, "configured", False)
        mock_logger = mocker.patch("catalog.core.logging.logger")
        mocker.patch("catalog.core.logging.logging.basicConfig")

        setup_logging(Settings(environment="production"))

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()
        pytest_check.is_true(mock_logger.add.call_args.kwargs["enqueue"])
        pytest_check.is_true(catalog_logging._state.configured)

    def test_console_formatter_uses_context_format(
        self, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(catalog_logging._state, "configured", False)
        mock_logger = mocker.patch("catalog.core.logging.logger")
        mocker.patch("catalog.core.logging.logging.basicConfig")

        setup_logging(Settings(environment="development"))

        kwargs = mock_logger.add.call_args.kwargs
        assert kwargs["format"] is format_console_with_context

    def test_configures_once(
        self, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(catalog_logging._state, "configured", True)
        mock_logger = mocker.patch("catalog.core.logging.logger")

        setup_logging(Settings())

        mock_logger.remove.assert_not_called()
