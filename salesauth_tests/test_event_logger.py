"""
Unit tests for event logger utility.
"""
import logging

import pytest

from salesauth.auth_service.utils.event_logger import configure_logging, log_auth_event


def test_log_auth_event_writes_line(caplog):
    with caplog.at_level(logging.INFO):
        log_auth_event("login_success", user_id="u-1", email="ann@x.com")

    assert "AUTH login_success user_id=u-1 email=ann@x.com" in caplog.text


def test_failures_are_warnings(caplog):
    with caplog.at_level(logging.INFO):
        log_auth_event("login_failure", email="ann@x.com")

    assert caplog.records[-1].levelno == logging.WARNING


def test_metadata_is_appended(caplog):
    with caplog.at_level(logging.INFO):
        log_auth_event("token_rejected", token_type="refresh", reason="TokenExpired")

    assert "reason=TokenExpired token_type=refresh" in caplog.text


def test_invalid_event_type_raises():
    with pytest.raises(ValueError):
        log_auth_event("password_reset")


def test_service_logs_registration(service, caplog):
    with caplog.at_level(logging.INFO):
        result = service.register("Ann", "ann@x.com", "secret123")

    assert f"AUTH register_success user_id={result.user.id}" in caplog.text
    assert "secret123" not in caplog.text


def test_configure_logging_adds_file_handler(tmp_path):
    root = logging.getLogger()
    saved = root.handlers[:]
    saved_level = root.level
    try:
        configure_logging("DEBUG", str(tmp_path / "logs"))
        assert (tmp_path / "logs" / "auth_events.log").exists()
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers:
            if handler not in saved:
                handler.close()
        root.handlers = saved
        root.setLevel(saved_level)
