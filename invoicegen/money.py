# invoicegen/money.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, ClassVar, Literal, Union

from invoicegen.errors import ComputationError, ValidationError

log = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# widest number (integer digits + decimals) the formatters will print
MAX_DISPLAY_DIGITS = 120


def _clean(s: Any) -> str:
    return str(s if s is not None else "").replace("\u00a0", " ").strip()


def parse_decimal(value: Any) -> Decimal:
    """
    Strict parse. Raises InvalidOperation (via Decimal) or ValueError.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through repr so 0.1 stays 0.1 instead of the binary expansion
        return Decimal(repr(value))
    t = _clean(value)
    if not t:
        raise ValueError("empty decimal")
    d = Decimal(t)
    if not d.is_finite():
        raise ValueError(f"non-finite decimal {t!r}")
    return d


def decimal_or_zero(value: Any, *, field: str = "value") -> Decimal:
    """
    Lenient parse for item unit cost / quantity: anything unparseable counts as 0.
    """
    try:
        return parse_decimal(value)
    except (InvalidOperation, ValueError):
        log.warning("Could not parse %s=%r as a decimal, using 0", field, value)
        return ZERO


# =========================
# Adjustments (discounts and taxes)
# =========================

AdjustmentKind = Literal["percent", "amount"]


@dataclass(frozen=True)
class Percent:
    value: Decimal

    kind: ClassVar[AdjustmentKind] = "percent"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", parse_decimal(self.value))

    def of(self, base: Decimal) -> Decimal:
        return base * self.value / HUNDRED


@dataclass(frozen=True)
class Amount:
    value: Decimal

    kind: ClassVar[AdjustmentKind] = "amount"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", parse_decimal(self.value))

    def of(self, base: Decimal) -> Decimal:
        return self.value


Adjustment = Union[Percent, Amount]

# Same shape, different role.
Discount = Adjustment
Tax = Adjustment


def apply_discount(base: Decimal, discount: Adjustment | None) -> Decimal:
    if discount is None:
        return base
    return base - discount.of(base)


def adjustment_from_fields(percent: Any = None, amount: Any = None, *, field: str = "adjustment") -> Adjustment:
    """
    Resolve the two-field wire shape ({"percent": "20"} or {"amount": "89"}) into
    exactly one arm.
    """
    has_percent = _clean(percent) != ""
    has_amount = _clean(amount) != ""

    if has_percent == has_amount:
        raise ValidationError([f"{field}: exactly one of percent or amount must be set"])

    raw = percent if has_percent else amount
    try:
        value = parse_decimal(raw)
    except (InvalidOperation, ValueError):
        raise ValidationError([f"{field}: {raw!r} is not a decimal number"]) from None

    return Percent(value) if has_percent else Amount(value)


def adjustment_to_fields(adj: Adjustment) -> dict:
    return {adj.kind: str(adj.value)}


# =========================
# Formatting
# =========================

def round_half_up(value: Decimal, places: int) -> Decimal:
    """
    Quantize to `places` decimals in a context wide enough for the whole number,
    so large amounts do not overflow the default 28-digit precision.
    """
    digits = max(value.adjusted(), 0) + places + 2
    if digits > MAX_DISPLAY_DIGITS:
        raise ComputationError(f"{value} is too large to display with {places} decimals")

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class MoneyFormatter:
    symbol: str = "€ "
    precision: int = 2
    thousand: str = " "
    decimal: str = "."

    def number(self, value: Decimal, precision: int | None = None) -> str:
        places = self.precision if precision is None else precision
        v = round_half_up(abs(value), places)

        whole, _, frac = f"{v:f}".partition(".")
        groups = []
        while len(whole) > 3:
            groups.insert(0, whole[-3:])
            whole = whole[:-3]
        groups.insert(0, whole)

        out = self.thousand.join(groups)
        if places > 0:
            out += self.decimal + frac
        return out

    def format(self, value: Decimal) -> str:
        text = self.symbol + self.number(value)
        return "-" + text if round_half_up(value, self.precision) < 0 else text


def fixed(value: Decimal, places: int = 2) -> str:
    return f"{round_half_up(value, places):f}"
