"""
Invoice Worker

Validates invoices against business rules and accumulates per-product
revenue from a stream of invoice messages.
"""

__version__ = '1.0.0'
__license__ = 'MIT'

from invoice_worker.core import (
    Invoice,
    InvoiceLine,
    Money,
    load_invoice,
)

from invoice_worker.processing import (
    AccumulatingInvoiceProcessor,
    BatchRunner,
    ProcessingResult,
    Worker,
)

__all__ = [
    'Invoice',
    'InvoiceLine',
    'Money',
    'load_invoice',
    'AccumulatingInvoiceProcessor',
    'BatchRunner',
    'ProcessingResult',
    'Worker',
]
