"""
Invoice aggregate: Address, Recipient, InvoiceLine, Invoice.
Using Pydantic for construction and rule sets for business validity.
"""
import weakref
from typing import Any, ClassVar, List, Optional

from pydantic import Field, PrivateAttr

from invoice_worker.core.money import Money
from invoice_worker.core.rules import RuleSet, ValidatableModel, ValidationRule, is_specified


class Address(ValidatableModel):
    """Postal address"""
    address_line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    rules: ClassVar[RuleSet] = RuleSet(
        ValidationRule(
            name='address_line1',
            description='AddressLine1 should be specified',
            predicate=lambda a: is_specified(a.address_line1),
        ),
        ValidationRule(
            name='city',
            description='City should be specified',
            predicate=lambda a: is_specified(a.city),
        ),
        ValidationRule(
            name='state',
            description='State should be properly specified',
            predicate=lambda a: is_specified(a.state),
        ),
        ValidationRule(
            name='zip_code',
            description='Zip code should be specified',
            predicate=lambda a: is_specified(a.zip_code),
        ),
    )


class Recipient(ValidatableModel):
    """Party the invoice is addressed to"""
    name: Optional[str] = None
    address: Optional[Address] = None

    rules: ClassVar[RuleSet] = RuleSet(
        ValidationRule(
            name='name',
            description='Recipient name should be specified',
            predicate=lambda r: is_specified(r.name),
        ),
        ValidationRule(
            name='address',
            description='Address should be valid',
            predicate=lambda r: r.address is not None and r.address.is_valid,
        ),
    )


class InvoiceLine(ValidatableModel):
    """
    Single product line.
    Holds a weak back-reference to the invoice it was attached to.
    """
    product_name: Optional[str] = None
    money: Optional[Money] = None

    _invoice_ref: Optional[weakref.ref] = PrivateAttr(default=None)

    rules: ClassVar[RuleSet] = RuleSet(
        ValidationRule(
            name='product_name',
            description='Product name should be specified',
            predicate=lambda line: is_specified(line.product_name),
        ),
        ValidationRule(
            name='money',
            description='Money should be valid',
            predicate=lambda line: line.money is not None and line.money.is_valid,
        ),
    )

    def __init__(self, product_name: Optional[str] = None,
                 money: Optional[Money] = None, **data: Any):
        super().__init__(product_name=product_name, money=money, **data)

    @property
    def invoice(self) -> Optional['Invoice']:
        """Owning invoice, or None if the line is detached"""
        if self._invoice_ref is None:
            return None
        return self._invoice_ref()

    def _attach_to(self, invoice: 'Invoice') -> None:
        self._invoice_ref = weakref.ref(invoice)

    def __eq__(self, other: object) -> bool:
        # The back-reference is not part of the value
        if not isinstance(other, InvoiceLine):
            return NotImplemented
        return (self.product_name, self.money) == (other.product_name, other.money)

    def __str__(self) -> str:
        return f"{self.product_name} for {self.money}"


class Invoice(ValidatableModel):
    """Complete invoice representation"""
    invoice_number: Optional[str] = None
    recipient: Optional[Recipient] = None
    bill_to_address: Optional[Address] = None
    lines: List[InvoiceLine] = Field(default_factory=list)
    discount: Optional[Money] = None

    rules: ClassVar[RuleSet] = RuleSet(
        ValidationRule(
            name='invoice_number',
            description='Invoice number should be specified',
            predicate=lambda inv: is_specified(inv.invoice_number),
        ),
        ValidationRule(
            name='recipient',
            description='Recipient should be valid',
            predicate=lambda inv: inv.recipient is not None and inv.recipient.is_valid,
        ),
        ValidationRule(
            name='billing_address',
            description='Billing address should be valid',
            predicate=lambda inv: (inv.bill_to_address is not None
                                   and inv.bill_to_address.is_valid),
        ),
        ValidationRule(
            name='lines',
            description='Invoice lines should all be valid',
            predicate=lambda inv: bool(inv.lines) and all(line.is_valid for line in inv.lines),
        ),
        ValidationRule(
            name='discount',
            description='Discount should be valid',
            # Discount is optional
            predicate=lambda inv: inv.discount is None or inv.discount.is_valid,
        ),
    )

    def model_post_init(self, context: Any, /) -> None:
        for line in self.lines:
            line._attach_to(self)

    def __deepcopy__(self, memo: Optional[dict] = None) -> 'Invoice':
        # Copied lines still point at the original until re-attached
        copied = super().__deepcopy__(memo)
        for line in copied.lines:
            line._attach_to(copied)
        return copied

    def attach_invoice_line(self, line: InvoiceLine) -> None:
        """Append a line and point its back-reference at this invoice"""
        self.lines.append(line)
        line._attach_to(self)

    @property
    def product_names(self) -> List[str]:
        return [line.product_name for line in self.lines]
