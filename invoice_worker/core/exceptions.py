"""
Exception hierarchy for the invoice worker.
Validation problems are reported as violations, never raised;
everything below is a fault.
"""


class InvoiceWorkerError(Exception):
    """Base class for all invoice worker faults"""
    pass


class CurrencyMismatchError(InvoiceWorkerError, ValueError):
    """Raised when Money arithmetic or comparison mixes currencies"""

    def __init__(self, left: str, right: str, operation: str):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(
            f"Cannot apply '{operation}' to {left!r} and {right!r} amounts"
        )


class MissingDiscountError(InvoiceWorkerError, AttributeError):
    """
    Raised when a repeated product needs the invoice discount
    but the invoice carries none.
    """

    def __init__(self, invoice_number: str, product_name: str):
        self.invoice_number = invoice_number
        self.product_name = product_name
        super().__init__(
            f"Invoice {invoice_number}: product {product_name!r} repeats "
            f"but the invoice has no discount"
        )


class ParserError(InvoiceWorkerError):
    """Raised when invoice parsing fails"""
    pass


class ChannelError(InvoiceWorkerError):
    """Raised by messaging facilities on channel faults"""
    pass


class ChannelNotInitializedError(ChannelError):
    """Raised when a channel is used before initialization"""
    pass


class ChannelEmptyError(ChannelError):
    """Raised when reading from a channel with no messages"""
    pass


class SettingNotFoundError(InvoiceWorkerError, KeyError):
    """Raised when a configuration key is unknown"""
    pass
