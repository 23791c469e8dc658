"""
Decorators for audit logging, performance monitoring and metrics.
"""
import functools
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict

# Configure audit logger separately from main app logger
audit_logger = logging.getLogger('invoice_worker.audit')
perf_logger = logging.getLogger('invoice_worker.performance')


def _find_invoice_number(args: tuple, kwargs: dict) -> str:
    """Pick the invoice number out of call arguments, if any carries one"""
    candidates = list(args) + list(kwargs.values())
    for candidate in candidates:
        number = getattr(candidate, 'invoice_number', None)
        if number is not None:
            return number
    return "N/A"


def _describe_status(result: Any) -> str:
    if hasattr(result, 'is_success'):
        return "SUCCEEDED" if result.is_success else "FAILED"
    if hasattr(result, 'is_valid'):
        return "VALID" if result.is_valid else "INVALID"
    return "PROCESSED"


def audit_log(func: Callable) -> Callable:
    """
    Decorator that logs every call with the invoice it concerns and its outcome.

    Usage:
        @audit_log
        def process(self, invoice):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        func_name = func.__qualname__
        invoice_id = _find_invoice_number(args, kwargs)

        audit_logger.info(
            f"CALL | {func_name} | Invoice: {invoice_id} | "
            f"Timestamp: {datetime.now().isoformat()}"
        )

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            audit_logger.error(
                f"FAILURE | {func_name} | Invoice: {invoice_id} | "
                f"Error: {type(e).__name__}: {str(e)}"
            )
            raise

        # Parsers return the invoice itself
        if invoice_id == "N/A":
            invoice_id = _find_invoice_number((result,), {})

        audit_logger.info(
            f"SUCCESS | {func_name} | Invoice: {invoice_id} | "
            f"Status: {_describe_status(result)}"
        )
        return result

    return wrapper


def measure_performance(func: Callable) -> Callable:
    """
    Decorator to measure and log function execution time.

    Usage:
        @measure_performance
        def process(self, invoice):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            perf_logger.warning(
                f"{func.__qualname__} failed after {elapsed_ms:.2f}ms: {str(e)}"
            )
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        perf_logger.debug(f"{func.__qualname__} completed in {elapsed_ms:.2f}ms")
        return result

    return wrapper


class MetricsCollector:
    """
    In-process timing aggregates.

    Each metric keeps a running count, total, minimum and maximum, so the
    collector's size does not grow with the number of samples.
    """
    def __init__(self):
        self.metrics: Dict[str, Dict[str, float]] = {}

    def record(self, metric_name: str, value: float):
        """Fold a sample into the metric's aggregate"""
        summary = self.metrics.get(metric_name)
        if summary is None:
            self.metrics[metric_name] = {
                'count': 1, 'total': value, 'min': value, 'max': value
            }
            return

        summary['count'] += 1
        summary['total'] += value
        summary['min'] = min(summary['min'], value)
        summary['max'] = max(summary['max'], value)

    def get_stats(self, metric_name: str) -> dict:
        """Get statistics for a metric"""
        summary = self.metrics.get(metric_name)
        if not summary:
            return {}

        return {
            'count': int(summary['count']),
            'avg': summary['total'] / summary['count'],
            'min': summary['min'],
            'max': summary['max']
        }

    def reset(self):
        self.metrics.clear()


# Global metrics instance
metrics = MetricsCollector()


def collect_metric(metric_name: str):
    """
    Decorator to automatically collect execution time metrics.

    Usage:
        @collect_metric('worker.job_time_ms')
        def do_job(self):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()

            try:
                return func(*args, **kwargs)
            finally:
                elapsed = (time.perf_counter() - start) * 1000
                metrics.record(metric_name, elapsed)

        return wrapper

    return decorator
