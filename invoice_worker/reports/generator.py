"""
Report generation utilities.
Creates human-readable and machine-readable batch reports.
"""
import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Union

from invoice_worker.core.money import Money
from invoice_worker.processing.batch import BatchResult


def _percent(part: int, total: int) -> str:
    return f"{part / total * 100:.1f}%" if total else "0.0%"


def generate_summary_report(batch_result: BatchResult) -> str:
    """
    Generate text summary report from batch results.

    Args:
        batch_result: Batch processing results

    Returns:
        Formatted text report
    """
    lines = []

    # Header
    lines.append("=" * 70)
    lines.append("INVOICE PROCESSING REPORT")
    lines.append("=" * 70)
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    # Summary statistics
    total = batch_result.total
    lines.append("SUMMARY STATISTICS")
    lines.append("-" * 70)
    lines.append(f"Total Invoices Processed:  {total}")
    lines.append(f"Succeeded:                 {batch_result.succeeded_count} "
                 f"({_percent(batch_result.succeeded_count, total)})")
    lines.append(f"Failed Validation:         {batch_result.failed_count} "
                 f"({_percent(batch_result.failed_count, total)})")
    lines.append(f"Faulted:                   {batch_result.faulted_count} "
                 f"({_percent(batch_result.faulted_count, total)})")
    lines.append(f"Processing Time:           {batch_result.processing_time_seconds:.2f} seconds")
    lines.append("")

    # Product totals
    lines.append("PRODUCT TOTALS")
    lines.append("-" * 70)
    if batch_result.products:
        width = max(len(name) for name in batch_result.products)
        for name in sorted(batch_result.products):
            lines.append(f"{name.ljust(width)}  {batch_result.products[name]}")
    else:
        lines.append("(no products accumulated)")
    lines.append("")

    # Footer
    lines.append("=" * 70)
    lines.append("END OF REPORT")
    lines.append("=" * 70)

    return "\n".join(lines)


def generate_csv_report(products: Dict[str, Money], output_path: Union[str, Path]):
    """
    Write product totals as CSV (Product, Amount, Currency), sorted by product.

    Args:
        products: Accumulated totals by product name
        output_path: Path to output CSV file
    """
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['Product', 'Amount', 'Currency'])

        for name in sorted(products):
            money = products[name]
            writer.writerow([name, money.amount, money.currency or ''])


def generate_json_report(batch_result: BatchResult, output_path: Union[str, Path]):
    """
    Generate JSON report.

    Args:
        batch_result: Batch results
        output_path: Output file path
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(batch_result.model_dump(mode='json'), f, indent=2)
