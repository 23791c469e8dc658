"""
Tests for audit, performance and metrics decorators.
"""
import logging

import pytest

from invoice_worker.core.models import Invoice
from invoice_worker.processing.processor import ProcessingResult
from invoice_worker.utils.decorators import (
    MetricsCollector,
    audit_log,
    collect_metric,
    measure_performance,
    metrics,
)


class TestAuditLog:

    def test_logs_call_and_status(self, caplog):
        @audit_log
        def process(invoice):
            return ProcessingResult.FAILED

        with caplog.at_level(logging.INFO, logger='invoice_worker.audit'):
            process(Invoice(invoice_number="INV-42"))

        assert "CALL" in caplog.text
        assert "Invoice: INV-42" in caplog.text
        assert "Status: FAILED" in caplog.text

    def test_logs_and_reraises_failures(self, caplog):
        @audit_log
        def process(invoice):
            raise AttributeError("no discount")

        with caplog.at_level(logging.INFO, logger='invoice_worker.audit'):
            with pytest.raises(AttributeError):
                process(invoice=Invoice(invoice_number="INV-7"))

        assert "FAILURE" in caplog.text
        assert "INV-7" in caplog.text

    def test_takes_invoice_number_from_result(self, caplog):
        @audit_log
        def load(path):
            return Invoice(invoice_number="INV-9")

        with caplog.at_level(logging.INFO, logger='invoice_worker.audit'):
            load("somewhere.json")

        assert "SUCCESS | " in caplog.text
        assert "Invoice: INV-9 | Status: INVALID" in caplog.text


class TestMeasurePerformance:

    def test_passes_result_through(self, caplog):
        @measure_performance
        def compute():
            return 7

        with caplog.at_level(logging.DEBUG, logger='invoice_worker.performance'):
            assert compute() == 7

        assert "completed in" in caplog.text

    def test_warns_on_failure(self, caplog):
        @measure_performance
        def explode():
            raise ValueError("bad")

        with caplog.at_level(logging.DEBUG, logger='invoice_worker.performance'):
            with pytest.raises(ValueError):
                explode()

        assert "failed after" in caplog.text


class TestMetrics:

    def test_collector_stats(self):
        collector = MetricsCollector()
        for value in (1.0, 2.0, 3.0):
            collector.record("latency", value)

        assert collector.get_stats("latency") == {
            'count': 3, 'avg': 2.0, 'min': 1.0, 'max': 3.0
        }
        assert collector.get_stats("unknown") == {}

    def test_collector_keeps_aggregates_only(self):
        collector = MetricsCollector()
        for value in range(1000):
            collector.record("latency", float(value))

        assert collector.get_stats("latency") == {
            'count': 1000, 'avg': 499.5, 'min': 0.0, 'max': 999.0
        }
        assert len(collector.metrics["latency"]) == 4

    def test_collect_metric_records_even_on_failure(self):
        @collect_metric('test.metric')
        def explode():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            explode()

        assert metrics.get_stats('test.metric')['count'] == 1
