"""
Invoice processing: validation gate plus per-product revenue accumulation.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict

from invoice_worker.core.exceptions import MissingDiscountError
from invoice_worker.core.models import Invoice
from invoice_worker.core.money import Money
from invoice_worker.utils.decorators import audit_log, measure_performance


logger = logging.getLogger(__name__)


class ProcessingResult(Enum):
    """Outcome of processing one invoice"""
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'

    @classmethod
    def succeeded(cls) -> 'ProcessingResult':
        return cls.SUCCEEDED

    @classmethod
    def failed(cls) -> 'ProcessingResult':
        return cls.FAILED

    @property
    def is_success(self) -> bool:
        return self is ProcessingResult.SUCCEEDED


class InvoiceProcessor(ABC):
    """Processes one invoice at a time"""

    @abstractmethod
    def process(self, invoice: Invoice) -> ProcessingResult:
        """Process an invoice and report the outcome"""


class AccumulatingInvoiceProcessor(InvoiceProcessor):
    """
    Accumulates revenue per product name across all invoices it sees.

    The first line ever seen for a product sets its baseline at full price.
    Every later line for that product adds its amount net of the invoice
    discount, floored at zero.

    Not thread-safe: one processor per worker.
    """

    def __init__(self):
        self.products: Dict[str, Money] = {}

    @measure_performance
    @audit_log
    def process(self, invoice: Invoice) -> ProcessingResult:
        """
        Validate an invoice and fold its lines into the product totals.

        Args:
            invoice: Invoice to process

        Returns:
            FAILED if the invoice is invalid (totals untouched), else SUCCEEDED

        Raises:
            MissingDiscountError: a product repeats and the invoice has no discount
            CurrencyMismatchError: a line's currency differs from the running total
        """
        violations = invoice.violations()
        if violations:
            logger.info(
                f"Rejected invoice {invoice.invoice_number}: "
                f"{', '.join(rule.name for rule in violations)}"
            )
            return ProcessingResult.FAILED

        # Work on a copy so a fault halfway through leaves totals unchanged
        staged = dict(self.products)

        for line in invoice.lines:
            current = staged.get(line.product_name)

            if current is None:
                staged[line.product_name] = line.money
                continue

            if invoice.discount is None:
                raise MissingDiscountError(invoice.invoice_number, line.product_name)

            staged[line.product_name] = current + (line.money - invoice.discount)

        self.products.update(staged)

        logger.debug(
            f"Invoice {invoice.invoice_number} accumulated "
            f"{len(invoice.lines)} line(s); tracking {len(self.products)} product(s)"
        )
        return ProcessingResult.SUCCEEDED
