"""Invoice Worker - Core Package"""

from invoice_worker.core.models import Address, Invoice, InvoiceLine, Recipient
from invoice_worker.core.money import (
    DEFAULT_CURRENCY,
    CurrencyConverter,
    IdentityCurrencyConverter,
    Money,
)
from invoice_worker.core.parsers import load_invoice, invoice_generator
from invoice_worker.core.rules import RuleSet, ValidationRule

__all__ = [
    'Address',
    'CurrencyConverter',
    'DEFAULT_CURRENCY',
    'IdentityCurrencyConverter',
    'Invoice',
    'InvoiceLine',
    'Money',
    'Recipient',
    'RuleSet',
    'ValidationRule',
    'load_invoice',
    'invoice_generator',
]
