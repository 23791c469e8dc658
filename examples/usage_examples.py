"""
Example usage of Invoice Worker.
Demonstrates various use cases and patterns.
"""
from pathlib import Path

from invoice_worker import AccumulatingInvoiceProcessor, BatchRunner, Invoice, InvoiceLine, Money
from invoice_worker.config import WorkerSettings
from invoice_worker.core.models import Address, Recipient
from invoice_worker.processing import (
    InMemoryMessagingFacility,
    LoggingExceptionHandler,
    Metadata,
    Worker,
)


def build_invoice(number: str, *lines: InvoiceLine, discount=None) -> Invoice:
    address = Address(address_line1="123 Main St", city="New York", state="NY", zip_code="10001")
    return Invoice(
        invoice_number=number,
        recipient=Recipient(name="John Doe", address=address),
        bill_to_address=address,
        lines=list(lines),
        discount=discount
    )


def example_validate_invoice():
    """Example: List the business rules an invoice violates"""
    print("Example 1: Validation")
    print("-" * 50)

    invoice = Invoice(invoice_number="", discount=Money(5, ""))

    for rule in invoice.violations():
        print(f"  - [{rule.name}] {rule.description}")

    print()


def example_accumulate_products():
    """Example: Accumulate product totals with a repeat-purchase discount"""
    print("Example 2: Accumulation")
    print("-" * 50)

    processor = AccumulatingInvoiceProcessor()
    invoice = build_invoice(
        "INV-001",
        InvoiceLine("Widget", Money(50)),
        InvoiceLine("Widget", Money(40)),
        InvoiceLine("Gadget", Money(25)),
        discount=Money(10)
    )

    result = processor.process(invoice)

    print(f"Result: {result.value}")
    for name, total in processor.products.items():
        print(f"  {name}: {total}")

    print()


def example_worker_loop():
    """Example: Drive the worker directly over in-memory channels"""
    print("Example 3: Worker Loop")
    print("-" * 50)

    messaging = InMemoryMessagingFacility()
    worker = Worker(
        WorkerSettings(),
        messaging,
        LoggingExceptionHandler(),
        AccumulatingInvoiceProcessor()
    )

    worker.start()
    messaging.publish(build_invoice("INV-1", InvoiceLine("Widget", Money(5))),
                      Metadata.from_string("request-1"))
    messaging.publish(build_invoice("INV-2"), Metadata.from_string("request-2"))
    worker.run()

    for message in messaging.drain_output():
        print(f"  {message.metadata.correlation_id}: {message.data.value}")

    worker.stop()
    print()


def example_process_directory():
    """Example: Process a directory of JSON/XML invoices"""
    print("Example 4: Directory Processing")
    print("-" * 50)

    runner = BatchRunner(WorkerSettings())
    result = runner.process_directory(Path('sample_invoices/'))

    print(f"Processed: {result.total} invoices")
    print(f"Succeeded: {result.succeeded_count}")
    print(f"Failed:    {result.failed_count}")
    print(f"Faulted:   {result.faulted_count}")
    print()


if __name__ == '__main__':
    print("Invoice Worker - Usage Examples")
    print("=" * 50)
    print()

    example_validate_invoice()
    example_accumulate_products()
    example_worker_loop()

    # Needs a sample_invoices/ directory
    # example_process_directory()
