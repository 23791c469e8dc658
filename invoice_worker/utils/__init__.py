"""Invoice Worker - Utilities Package"""

from invoice_worker.utils.decorators import (
    audit_log,
    measure_performance,
    collect_metric,
    metrics
)

__all__ = [
    'audit_log',
    'measure_performance',
    'collect_metric',
    'metrics',
]
