import json
import logging

import pytest
from pydantic import ValidationError

from gearx.core.config import Settings
from gearx.core.logging import JsonFormatter, correlation_context, get_logger


def _record(logger_name: str, message: str, structured=None) -> logging.LogRecord:
    record = logging.LogRecord(logger_name, logging.INFO, __file__, 1, message, None, None)
    if structured is not None:
        record.structured_data = structured
    return record


def test_json_formatter_merges_structured_data_and_correlation_id():
    formatter = JsonFormatter()

    with correlation_context("cid-42"):
        line = formatter.format(_record("gearx.test", "percentile_table_built", {"anchors": 3}))

    payload = json.loads(line)
    assert payload["event"] == "percentile_table_built"
    assert payload["service"] == "gearx"
    assert payload["anchors"] == 3
    assert payload["correlation_id"] == "cid-42"


def test_structured_adapter_merges_defaults():
    adapter = get_logger("gearx.test.adapter", component="engine")

    msg, kwargs = adapter.process("evt", {"extra": {"structured_data": {"test_id": "t1"}}})

    assert msg == "evt"
    assert kwargs["extra"]["structured_data"] == {"component": "engine", "test_id": "t1"}


def test_admin_allowlist_parses_comma_separated_emails():
    config = Settings(_env_file=None, admin_emails=" A@GearX.dev , b@gearx.dev ,")

    assert config.admin_allowlist == ["a@gearx.dev", "b@gearx.dev"]


def test_admin_allowlist_accepts_list_values():
    config = Settings(_env_file=None, admin_emails=["x@gearx.dev", "y@gearx.dev"])

    assert config.admin_allowlist == ["x@gearx.dev", "y@gearx.dev"]


def test_settings_reject_out_of_range_fallback_weight():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, fallback_score_weight=1.5)
