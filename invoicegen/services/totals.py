# invoicegen/services/totals.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from invoicegen.errors import ComputationError
from invoicegen.models import Item
from invoicegen.money import HUNDRED, ZERO, Adjustment, Amount, MoneyFormatter, Percent, apply_discount, fixed


@dataclass(frozen=True)
class ItemTotals:
    unit_cost: Decimal
    quantity: Decimal
    total_without_tax: Decimal
    total_after_discount: Decimal
    tax: Decimal
    total_with_tax: Decimal
    effective_tax: Optional[Adjustment] = None


@dataclass(frozen=True)
class DocumentTotals:
    items: Tuple[ItemTotals, ...]
    grand_total: Decimal
    total_tax: Decimal
    final_total: Decimal
    discount: Optional[Adjustment] = None
    total_with_discount: Optional[Decimal] = None
    discount_percent: Optional[Decimal] = None

    @property
    def discount_amount(self) -> Decimal:
        if self.total_with_discount is None:
            return ZERO
        return self.grand_total - self.total_with_discount


def resolve_effective_tax(item: Item, default_tax: Optional[Adjustment]) -> Optional[Adjustment]:
    return item.tax if item.tax is not None else default_tax


def compute_item_totals(item: Item, tax: Optional[Adjustment] = None) -> ItemTotals:
    """
    unit cost x quantity -> item discount -> item tax. `tax` is the already
    resolved tax (see resolve_effective_tax); the item itself is not read for it.
    """
    unit_cost = item.unit_cost_value()
    quantity = item.quantity_value()

    total_without_tax = unit_cost * quantity
    total_after_discount = apply_discount(total_without_tax, item.discount)
    item_tax = tax.of(total_after_discount) if tax is not None else ZERO

    return ItemTotals(
        unit_cost=unit_cost,
        quantity=quantity,
        total_without_tax=total_without_tax,
        total_after_discount=total_after_discount,
        tax=item_tax,
        total_with_tax=total_after_discount + item_tax,
        effective_tax=tax,
    )


def discount_equivalent_percent(discount: Adjustment, total_with_discount: Decimal) -> Decimal:
    """
    A fixed document discount is re-expressed as a percent of the already
    discounted total.
    """
    if isinstance(discount, Percent):
        return discount.value
    if total_with_discount <= ZERO:
        raise ComputationError(
            f"Document discount {discount.value} leaves a total of {total_with_discount}; "
            "cannot derive the discount percent"
        )
    return discount.value * HUNDRED / total_with_discount


def compute_document_totals(
    items: Sequence[Item],
    discount: Optional[Adjustment] = None,
    default_tax: Optional[Adjustment] = None,
) -> DocumentTotals:
    lines: List[ItemTotals] = [
        compute_item_totals(it, resolve_effective_tax(it, default_tax)) for it in items
    ]

    grand_total = sum((x.total_after_discount for x in lines), ZERO)

    if discount is None:
        total_tax = sum((x.tax for x in lines), ZERO)
        return DocumentTotals(
            items=tuple(lines),
            grand_total=grand_total,
            total_tax=total_tax,
            final_total=grand_total + total_tax,
        )

    total_with_discount = apply_discount(grand_total, discount)
    p = discount_equivalent_percent(discount, total_with_discount)

    total_tax = ZERO
    for x in lines:
        tax = x.effective_tax
        if tax is None:
            continue
        if isinstance(tax, Amount):
            # fixed taxes are never touched by the document discount
            total_tax += tax.value
            continue
        base = x.total_after_discount
        reduced_base = base - base * p / HUNDRED
        total_tax += tax.of(reduced_base)

    return DocumentTotals(
        items=tuple(lines),
        grand_total=grand_total,
        total_tax=total_tax,
        final_total=total_with_discount + total_tax,
        discount=discount,
        total_with_discount=total_with_discount,
        discount_percent=p,
    )


# =========================
# Display details (small grey lines under the tax/discount columns)
# =========================

def _ratio_percent(amount: Decimal, base: Decimal) -> str:
    if base == ZERO:
        return fixed(ZERO)
    return fixed(amount * HUNDRED / base)


def item_discount_detail(item: Item, line: ItemTotals, money: MoneyFormatter) -> Tuple[str, str]:
    d = item.discount
    if d is None:
        return "--", ""
    if isinstance(d, Percent):
        return f"{d.value} %", "-" + money.format(d.of(line.total_without_tax))
    return f"{money.format(d.value)}", f"-{_ratio_percent(d.value, line.total_without_tax)} %"


def item_tax_detail(line: ItemTotals, money: MoneyFormatter) -> Tuple[str, str]:
    t = line.effective_tax
    if t is None:
        return "--", ""
    if isinstance(t, Percent):
        return f"{t.value} %", money.format(line.tax)
    return f"{money.format(t.value)}", f"{_ratio_percent(t.value, line.total_after_discount)} %"


def document_discount_detail(totals: DocumentTotals, money: MoneyFormatter) -> str:
    d = totals.discount
    if d is None:
        return ""
    if isinstance(d, Percent):
        return f"-{d.value} % / -{money.format(totals.discount_amount)}"
    return f"-{money.format(d.value)} / -{_ratio_percent(d.value, totals.grand_total)} %"


def totals_to_json(totals: DocumentTotals) -> dict:
    def s(v: Optional[Decimal]) -> Optional[str]:
        return None if v is None else str(v)

    return {
        "items": [
            {
                "total_without_tax": s(x.total_without_tax),
                "total_after_discount": s(x.total_after_discount),
                "tax": s(x.tax),
                "total_with_tax": s(x.total_with_tax),
            }
            for x in totals.items
        ],
        "grand_total": s(totals.grand_total),
        "total_with_discount": s(totals.total_with_discount),
        "discount_percent": s(totals.discount_percent),
        "total_tax": s(totals.total_tax),
        "final_total": s(totals.final_total),
    }
