"""Invoice Worker - Reports Package"""

from invoice_worker.reports.generator import (
    generate_summary_report,
    generate_csv_report,
    generate_json_report
)

__all__ = [
    'generate_summary_report',
    'generate_csv_report',
    'generate_json_report',
]
