"""Unit tests for the structured logging setup."""

import json
import logging

import pytest

from listing_hub.utils.logging import bind_context, get_logger, set_log_level


@pytest.mark.unit
def test_get_logger_returns_bound_logger() -> None:
    logger = get_logger("test_module")

    assert hasattr(logger, "bind")
    assert hasattr(logger, "info")
    assert hasattr(logger, "error")


@pytest.mark.unit
def test_events_are_rendered_as_json(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    get_logger("listing_hub.tests").info("site.page.written", kind="city", count=3)

    log_data = json.loads(caplog.records[-1].message)
    assert log_data["event"] == "site.page.written"
    assert log_data["kind"] == "city"
    assert log_data["count"] == 3
    assert log_data["level"] == "info"
    assert log_data["logger"] == "listing_hub.tests"
    assert "timestamp" in log_data


@pytest.mark.unit
def test_bind_context_carries_fields(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    bind_context(stage="render").info("site.pages.progress", pages=100)

    log_data = json.loads(caplog.records[-1].message)
    assert log_data["stage"] == "render"
    assert log_data["pages"] == 100


@pytest.mark.unit
def test_set_log_level_updates_root() -> None:
    original = logging.root.level
    try:
        set_log_level("error")
        assert logging.root.level == logging.ERROR
        set_log_level("not-a-level")
        assert logging.root.level == logging.INFO
    finally:
        logging.root.setLevel(original)
