"""
Invoice Worker - Main Entry Point
Command-line interface for processing and validating invoices.
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from invoice_worker.config import get_settings
from invoice_worker.processing.batch import BatchRunner
from invoice_worker.reports.generator import (
    generate_csv_report,
    generate_json_report,
    generate_summary_report,
)


# Configure logging
def setup_logging(verbose: bool = False, level: str = 'INFO',
                  log_file: Optional[str] = None):
    """Configure application logging"""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def run_directory(args):
    """Handle the directory processing command"""
    input_dir = Path(args.input)
    output_dir = Path(args.output) if args.output else None

    if not input_dir.exists():
        logging.error(f"Input directory not found: {input_dir}")
        return 1

    logging.info(f"Starting processing: {input_dir}")
    logging.info(f"Pattern: {args.pattern}")

    runner = BatchRunner(get_settings())
    result = runner.process_directory(input_dir, args.pattern)

    report = generate_summary_report(result)
    print(report)

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime('%Y%m%d_%H%M%S')

        report_path = output_dir / f"summary_{stamp}.txt"
        report_path.write_text(report, encoding='utf-8')
        generate_csv_report(result.products, output_dir / f"products_{stamp}.csv")
        generate_json_report(result, output_dir / f"batch_{stamp}.json")

        logging.info(f"Reports saved to: {output_dir}")

    # Exit code 0 only if every invoice succeeded
    return 0 if result.all_succeeded else 1


def validate_single(args):
    """Handle single file validation command"""
    file_path = Path(args.file)

    if not file_path.exists():
        logging.error(f"File not found: {file_path}")
        return 1

    from invoice_worker.core.parsers import load_invoice

    logging.info(f"Validating: {file_path}")
    invoice = load_invoice(file_path)
    violations = invoice.violations()

    print("\n" + "=" * 60)
    print(f"Invoice: {invoice.invoice_number}")
    print("=" * 60)

    if not violations:
        print("VALID")
        for line in invoice.lines:
            print(f"  - {line}")
    else:
        print("INVALID")
        print(f"\nFound {len(violations)} violation(s):\n")
        for i, rule in enumerate(violations, 1):
            print(f"{i}. [{rule.name}] {rule.description}")

    print("=" * 60)

    return 0 if not violations else 1


def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Invoice Worker - validate invoices and accumulate product revenue'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    run_parser = subparsers.add_parser('run', help='Process all invoices in a directory')
    run_parser.add_argument('--input', '-i', required=True, help='Input directory path')
    run_parser.add_argument('--output', '-o', help='Output directory for reports')
    run_parser.add_argument('--pattern', '-p', default='*', help='File pattern (default: *)')
    run_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    file_parser = subparsers.add_parser('validate', help='Validate a single invoice file')
    file_parser.add_argument('file', help='Path to invoice file (.json or .xml)')
    file_parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(args.verbose, settings.log_level, settings.log_file)

    try:
        if args.command == 'run':
            return run_directory(args)
        elif args.command == 'validate':
            return validate_single(args)
    except KeyboardInterrupt:
        logging.info("Operation cancelled by user")
        return 130
    except Exception as e:
        logging.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
