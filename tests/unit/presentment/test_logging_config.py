import json
import logging

import pytest

from identity_presentment import ConfigurationError, PresentmentSettings
from identity_presentment.logging_config import (
    PresentmentJSONFormatter,
    ServiceNameFilter,
    TraceContextFilter,
    build_formatter,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_includes_service_and_error_code():
    record = logging.LogRecord(
        "identity_presentment.verifier", logging.WARNING, __file__, 1, "rejected", None, None
    )
    ServiceNameFilter("verifier").filter(record)
    TraceContextFilter().filter(record)
    record.error_code = "BINDING_ERROR"

    entry = json.loads(PresentmentJSONFormatter().format(record))

    assert entry["service"] == "verifier"
    assert entry["message"] == "rejected"
    assert entry["error_code"] == "BINDING_ERROR"
    assert "trace_id" not in entry


def test_build_formatter_accepts_custom_format():
    formatter = build_formatter("%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(record) == "INFO hello"


def test_setup_logging_uses_settings(settings):
    setup_logging(settings.model_copy(update={"log_level": "DEBUG", "log_format": "json"}), "verifier")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, PresentmentJSONFormatter)


def test_yaml_log_level_reaches_root_logger(tmp_path):
    config_file = tmp_path / "presentment.yaml"
    config_file.write_text(
        "presentment:\n"
        "  merchant_id: merchant.example\n"
        "  team_id: TEAM123456\n"
        "  log_level: debug\n"
    )

    setup_logging(PresentmentSettings.from_yaml(config_file))

    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_off(settings):
    setup_logging(settings.model_copy(update={"log_level": "OFF"}))

    root = logging.getLogger()
    assert root.level > logging.CRITICAL
    assert root.handlers == []


def test_unknown_log_level_is_configuration_error(tmp_path):
    config_file = tmp_path / "presentment.yaml"
    config_file.write_text("merchant_id: m\nteam_id: t\nlog_level: LOUD\n")

    with pytest.raises(ConfigurationError):
        PresentmentSettings.from_yaml(config_file)
