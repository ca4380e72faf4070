from __future__ import annotations

import json
import logging

from admission.core.logging import JSONFormatter, configure_logging


def test_json_formatter_emits_one_object_per_record():
    record = logging.LogRecord(
        name="admission.security.rate_limiter",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="state for key %r evicted",
        args=("user-1",),
        exc_info=None,
    )
    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "admission.security.rate_limiter"
    assert payload["msg"] == "state for key 'user-1' evicted"
    assert "exception" not in payload


def test_configure_logging_installs_single_handler():
    configure_logging("DEBUG")
    configure_logging("INFO")
    logger = logging.getLogger("admission")

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)
    assert logger.level == logging.INFO
