from __future__ import annotations

import json
import logging

from paygen.utils.logging import JsonFormatter, _json_formatter

EXPECTED_ROWS = 10
EXPECTED_ATTEMPT = 2


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record("[THREAD DONE] 1")
    record.rows = EXPECTED_ROWS
    record.job_id = "job_abc_3"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "[THREAD DONE] 1"
    assert payload["rows"] == EXPECTED_ROWS
    assert payload["job_id"] == "job_abc_3"


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"attempt": EXPECTED_ATTEMPT}

    payload = json.loads(_json_formatter(record))

    assert payload["attempt"] == EXPECTED_ATTEMPT


def test_json_formatter_serializes_non_json_values() -> None:
    from datetime import date

    record = _record()
    record.partition_date = date(2024, 6, 9)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["partition_date"] == "2024-06-09"


def test_logger_extra_reaches_formatter(caplog) -> None:
    log = logging.getLogger("paygen.test")
    with caplog.at_level(logging.INFO, logger="paygen.test"):
        log.info("[JOB START] job_abc_3", extra={"job_index": 3})
    record = caplog.records[-1]
    assert json.loads(_json_formatter(record))["job_index"] == 3
