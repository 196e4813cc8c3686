"""Unit tests for structured JSON logging."""

import json
import logging

from feeding_kernel.utils.logging import JSONFormatter, get_logger, log_duration


def test_json_formatter_includes_context_fields() -> None:
    record = logging.LogRecord("feeding_kernel.test", logging.WARNING, __file__, 1, "fit failed", None, None)
    record.species_id = "cod"
    record.status = "FAILED"
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "fit failed"
    assert payload["species_id"] == "cod"
    assert payload["status"] == "FAILED"
    assert payload["level"] == "WARNING"


def test_get_logger_adds_component(caplog) -> None:
    logger = get_logger("feeding_kernel.tests.component", component="fitter")
    with caplog.at_level(logging.INFO, logger="feeding_kernel.tests.component"):
        logger.info("hello")
    assert caplog.records[-1].component == "fitter"


def test_log_duration_records_elapsed_ms(caplog) -> None:
    logger = logging.getLogger("feeding_kernel.tests.duration")
    with caplog.at_level(logging.INFO, logger="feeding_kernel.tests.duration"):
        with log_duration(logger, "done", species_id="cod") as fields:
            fields["status"] = "ok"
    record = caplog.records[-1]
    assert record.getMessage() == "done"
    assert record.duration_ms >= 0
    assert record.status == "ok"
