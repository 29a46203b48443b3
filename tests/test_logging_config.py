"""
============================================================================
FILE: test_logging_config.py
LOCATION: tests/test_logging_config.py
============================================================================

PURPOSE:
    Tests for the JSON formatter and the child logger hierarchy.

USAGE:
    pytest tests/test_logging_config.py -v
============================================================================
"""

import json
import logging

from api.logging_config import ROOT_LOGGER_NAME, StructuredFormatter, get_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="chirp.posts",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Post %s created",
        args=("p1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_merges_extra_data() -> None:
    line = StructuredFormatter().format(
        _record(extra_data={"post_id": "p1", "author_id": "alice"}),
    )

    data = json.loads(line)
    assert data["message"] == "Post p1 created"
    assert data["level"] == "INFO"
    assert data["logger"] == "chirp.posts"
    assert data["post_id"] == "p1"
    assert data["author_id"] == "alice"


def test_structured_formatter_without_extra_data() -> None:
    data = json.loads(StructuredFormatter().format(_record()))

    assert "post_id" not in data
    assert "timestamp" in data


def test_get_logger_returns_app_children() -> None:
    assert get_logger("posts").name == f"{ROOT_LOGGER_NAME}.posts"
    assert get_logger().name == ROOT_LOGGER_NAME
    assert logging.getLogger(ROOT_LOGGER_NAME).propagate is False
