"""Shared fixtures: valid invoice aggregates and a builder"""
import pytest

from invoice_worker.core.models import Address, Invoice, InvoiceLine, Recipient
from invoice_worker.core.money import Money
from invoice_worker.utils.decorators import metrics


@pytest.fixture
def valid_address():
    return Address(
        address_line1="123 Main St",
        city="New York",
        state="NY",
        zip_code="10001"
    )


@pytest.fixture
def valid_recipient(valid_address):
    return Recipient(name="John Doe", address=valid_address)


@pytest.fixture
def valid_discount():
    return Money(10, "USD")


@pytest.fixture
def valid_invoice(valid_recipient, valid_address, valid_discount):
    """Two distinct products, discount 10"""
    return Invoice(
        invoice_number="INV-001",
        recipient=valid_recipient,
        bill_to_address=valid_address,
        lines=[
            InvoiceLine("Widget A", Money(100, "USD")),
            InvoiceLine("Widget B", Money(200, "USD")),
        ],
        discount=valid_discount
    )


@pytest.fixture
def make_invoice(valid_recipient, valid_address, valid_discount):
    """Build a valid invoice, overriding lines and/or discount"""
    _missing = object()

    def build(lines=None, discount=_missing, invoice_number="INV-1"):
        return Invoice(
            invoice_number=invoice_number,
            recipient=valid_recipient,
            bill_to_address=valid_address,
            lines=lines if lines is not None else [InvoiceLine("Widget", Money(100))],
            discount=valid_discount if discount is _missing else discount
        )

    return build


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()
