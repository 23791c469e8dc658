"""
Money value type and currency conversion hook.
Amounts are unsigned 64-bit integers in minor units of their currency.
"""
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from pydantic import ConfigDict, Field

from invoice_worker.core.exceptions import CurrencyMismatchError
from invoice_worker.core.rules import RuleSet, ValidatableModel, ValidationRule, is_specified


DEFAULT_CURRENCY = 'USD'
MAX_AMOUNT = 2 ** 64 - 1


class CurrencyConverter(ABC):
    """External exchange-rate source"""

    @abstractmethod
    def convert(self, source_currency: Optional[str],
                target_currency: Optional[str], amount: int) -> int:
        """Convert an amount between two currencies"""


class IdentityCurrencyConverter(CurrencyConverter):
    """
    Placeholder rate source: every pair converts at 1:1.
    Replace with a real rate lookup via ``set_default_converter``.
    """

    def convert(self, source_currency: Optional[str],
                target_currency: Optional[str], amount: int) -> int:
        return amount


_default_converter: CurrencyConverter = IdentityCurrencyConverter()


def get_default_converter() -> CurrencyConverter:
    return _default_converter


def set_default_converter(converter: CurrencyConverter) -> None:
    """Install the converter used by ``Money.to_currency`` when none is passed"""
    global _default_converter
    _default_converter = converter


class Money(ValidatableModel):
    """Immutable amount + currency"""
    model_config = ConfigDict(frozen=True)

    amount: int = Field(default=0, ge=0, le=MAX_AMOUNT)
    currency: Optional[str] = DEFAULT_CURRENCY

    rules: ClassVar[RuleSet] = RuleSet(
        ValidationRule(
            name='currency',
            description='Currency should be specified',
            predicate=lambda m: is_specified(m.currency),
        ),
    )

    ZERO: ClassVar['Money']

    def __init__(self, amount: int = 0,
                 currency: Optional[str] = DEFAULT_CURRENCY, **data: Any):
        super().__init__(amount=amount, currency=currency, **data)

    def _require_same_currency(self, other: 'Money', operation: str):
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency, operation)

    def __add__(self, other: object) -> 'Money':
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, '+')
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: object) -> 'Money':
        """Saturating subtraction: never goes below zero"""
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, '-')
        return Money(max(0, self.amount - other.amount), self.currency)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, '<')
        return self.amount < other.amount

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, '<=')
        return self.amount <= other.amount

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, '>')
        return self.amount > other.amount

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._require_same_currency(other, '>=')
        return self.amount >= other.amount

    def to_currency(self, target_currency: Optional[str],
                    converter: Optional[CurrencyConverter] = None) -> 'Money':
        """
        Express this amount in another currency.

        The converter is consulted for any target that differs from the
        current currency, including an empty or missing one, and the
        result carries the target exactly as given.

        Args:
            target_currency: Currency code to convert into
            converter: Rate source (default: the module-level converter)

        Returns:
            Converted Money (possibly invalid if the target is empty)
        """
        if target_currency == self.currency:
            return self

        converter = converter or get_default_converter()
        converted = converter.convert(self.currency, target_currency, self.amount)
        return Money(converted, target_currency)

    def __str__(self) -> str:
        return f"{self.amount}{self.currency if self.currency is not None else ''}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


Money.ZERO = Money(0, DEFAULT_CURRENCY)
