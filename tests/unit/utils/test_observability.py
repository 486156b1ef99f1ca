"""
Tests for the logging and metrics helpers.
"""

import json
import logging
import threading
from unittest.mock import MagicMock

import pytest

from serviceagent.utils.logging import (
    JsonFormatter,
    LogContext,
    get_logger,
    log_execution_time,
    set_log_level,
)
from serviceagent.utils.metrics import (
    LEADS_SCORED,
    MetricsTimer,
    get_score_range,
    record_metric,
)


def make_record(logger, msg="hello", **extra):
    return logger.makeRecord(
        logger.name, logging.INFO, __file__, 10, msg, (), None, extra=extra
    )


class TestJsonFormatter:
    def test_extra_fields_included(self):
        logger = get_logger("serviceagent.tests.json")
        record = make_record(logger, lead_id="abc", score=42)
        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["lead_id"] == "abc"
        assert payload["score"] == 42

    def test_log_context_merged(self):
        logger = get_logger("serviceagent.tests.context")
        with LogContext(logger, lead_id="ctx-1"):
            record = make_record(logger)
        payload = json.loads(JsonFormatter().format(record))

        assert payload["lead_id"] == "ctx-1"
        assert "context" not in payload

    def test_context_removed_on_exit(self):
        logger = get_logger("serviceagent.tests.context_exit")
        with LogContext(logger, lead_id="ctx-1"):
            pass
        record = make_record(logger)

        assert not getattr(record, "context", None)

    def test_nested_contexts_merge(self):
        logger = get_logger("serviceagent.tests.context_nested")
        with LogContext(logger, lead_id="outer", batch="b1"):
            with LogContext(logger, lead_id="inner"):
                inner = make_record(logger)
            outer = make_record(logger)

        assert inner.context == {"lead_id": "inner", "batch": "b1"}
        assert outer.context == {"lead_id": "outer", "batch": "b1"}

    def test_context_stays_in_its_thread(self):
        logger = get_logger("serviceagent.tests.context_thread")
        entered = threading.Event()
        release = threading.Event()

        def worker():
            with LogContext(logger, lead_id="worker-lead"):
                entered.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=worker)
        thread.start()
        try:
            assert entered.wait(timeout=5)
            record = make_record(logger)
        finally:
            release.set()
            thread.join()

        assert not getattr(record, "context", None)


class TestLoggerSetup:
    def test_no_duplicate_handlers(self):
        get_logger("serviceagent.tests.handlers")
        logger = get_logger("serviceagent.tests.handlers")

        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_set_log_level(self):
        logger = get_logger("serviceagent.tests.level", level="INFO")
        other = logging.getLogger("other.package.level")
        other.setLevel(logging.INFO)

        set_log_level("ERROR")

        assert logger.level == logging.ERROR
        assert other.level == logging.INFO

    def test_log_execution_time_reraises(self):
        @log_execution_time
        def broken():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            broken()
        assert broken.__name__ == "broken"


class TestMetrics:
    @pytest.mark.parametrize(
        "score,expected",
        [(95, "high"), (80, "high"), (60, "medium"), (30, "low"), (5, "very_low")],
    )
    def test_score_range(self, score, expected):
        assert get_score_range(score) == expected

    def test_record_metric_with_labels(self):
        metric = MagicMock()
        record_metric(metric, 2, result="granted")

        metric.labels.assert_called_once_with(result="granted")
        metric.labels.return_value.inc.assert_called_once_with(2)

    def test_record_metric_without_labels(self):
        metric = MagicMock()
        record_metric(metric)

        metric.inc.assert_called_once_with(1)

    def test_record_metric_bad_labels_does_not_raise(self):
        record_metric(LEADS_SCORED, 1, wrong_label="x")

    def test_metrics_timer_success(self):
        metric = MagicMock()
        with MetricsTimer(metric, operation="score_lead"):
            pass

        metric.labels.assert_called_once_with(operation="score_lead", status="success")
        metric.labels.return_value.observe.assert_called_once()

    def test_metrics_timer_error(self):
        metric = MagicMock()
        with pytest.raises(RuntimeError):
            with MetricsTimer(metric, operation="score_lead"):
                raise RuntimeError("boom")

        metric.labels.assert_called_once_with(operation="score_lead", status="error")
