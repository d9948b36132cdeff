from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
import re

from goalplanner.domain.errors import (
    CurrencyMismatch,
    InsufficientAmount,
    InvalidAmount,
    InvalidCurrency,
    InvalidFactor,
    InvalidFormat,
)

DEFAULT_CURRENCY = "BRL"

_QUANT = Decimal("0.01")
_ZERO = Decimal("0.00")

_SYMBOLS = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
    "GBP": "£",
}

_NOT_NUMERIC = re.compile(r"[^\d.,-]")


def _to_decimal(value: object) -> Decimal:
    # bool est un int en Python: on le refuse explicitement
    if isinstance(value, bool):
        raise InvalidAmount("Amount must be a valid number")

    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, (int, float)):
        dec = Decimal(str(value))
    elif isinstance(value, str):
        try:
            dec = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidAmount("Amount must be a valid number") from exc
    else:
        raise InvalidAmount("Amount must be a valid number")

    if not dec.is_finite():
        raise InvalidAmount("Amount must be a valid number")
    return dec


def _parse_decimal(value: str) -> Decimal:
    """
    Parse tolérant depuis une saisie utilisateur.
    Accepte "1234.56", "1234,56", "1.234,56", "1,234.56", "R$ 10,00".
    """
    if not isinstance(value, str):
        raise InvalidFormat("Invalid money string format")

    raw = _NOT_NUMERIC.sub("", value)
    if raw in ("", "-", ".", ","):
        raise InvalidFormat("Invalid money string format")

    if "," in raw and "." in raw:
        # les deux séparateurs: le dernier est le séparateur décimal
        if raw.rfind(",") > raw.rfind("."):
            raw = raw.replace(".", "").replace(",", ".")
        else:
            raw = raw.replace(",", "")
    elif "," in raw:
        # format pt-BR: virgule décimale
        raw = raw.replace(",", ".")

    try:
        dec = Decimal(raw)
    except InvalidOperation as exc:
        raise InvalidFormat(f"Invalid money string format: {value!r}") from exc

    if not dec.is_finite():
        raise InvalidFormat(f"Invalid money string format: {value!r}")
    return dec


def _quantize_money(amount: Decimal) -> Decimal:
    # Arrondi comptable classique
    # quantize exige assez de précision pour tous les chiffres entiers + 2 décimales
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(_QUANT, rounding=ROUND_HALF_UP)


def _normalize_currency(currency: object) -> str:
    if not isinstance(currency, str) or not currency.strip():
        raise InvalidCurrency("Currency must be a valid string")
    code = currency.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise InvalidCurrency("Currency must be a 3-letter code (e.g., BRL, USD)")
    return code


@dataclass(frozen=True)
class Money:
    """
    Money = quantité d'argent non négative, étiquetée par une devise ISO (3 lettres).
    Toute opération retourne une nouvelle instance.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        dec = _to_decimal(self.amount)
        if dec < 0:
            raise InvalidAmount("Amount cannot be negative")
        if dec == 0:
            dec = _ZERO

        object.__setattr__(self, "amount", _quantize_money(dec))
        object.__setattr__(self, "currency", _normalize_currency(self.currency))

    # -------- factories --------

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(amount=_ZERO, currency=currency)

    @classmethod
    def from_str(cls, value: str, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(amount=_parse_decimal(value), currency=currency)

    # -------- arithmetic --------

    def add(self, other: "Money") -> "Money":
        self._check_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise InsufficientAmount("Cannot subtract more than available amount")
        return Money(result, self.currency)

    def multiply(self, factor: int | float | Decimal) -> "Money":
        dec = _to_decimal(factor) if not isinstance(factor, Decimal) else factor
        if dec < 0:
            raise InvalidFactor("Multiplication factor cannot be negative")
        return Money(self.amount * dec, self.currency)

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: int | float | Decimal) -> "Money":
        if isinstance(factor, Money):
            return NotImplemented
        return self.multiply(factor)

    __rmul__ = __mul__

    # -------- comparisons --------

    def is_greater_than(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.amount > other.amount

    def is_less_than(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.amount < other.amount

    def is_zero(self) -> bool:
        return self.amount == _ZERO

    def _check_same_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatch(f"Currency mismatch: {self.currency} vs {other.currency}")

    # -------- formatting --------

    def format(self) -> str:
        """Format pt-BR: "R$ 1.234,56"."""
        integer, _, cents = f"{self.amount:,.2f}".partition(".")
        integer = integer.replace(",", ".")
        symbol = _SYMBOLS.get(self.currency, self.currency)
        return f"{symbol} {integer},{cents}"

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
