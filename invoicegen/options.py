# invoicegen/options.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Tuple

from invoicegen.money import MoneyFormatter

RGB = Tuple[int, int, int]


@dataclass
class Options:
    """
    Presentation settings. Every field has a default and none depends on another,
    so callers only pass what they want to change.
    """

    currency_symbol: str = "€ "
    currency_precision: int = 2
    currency_decimal: str = "."
    currency_thousand: str = " "

    text_type_invoice: str = "INVOICE"
    text_type_quotation: str = "QUOTATION"
    text_type_delivery_note: str = "DELIVERY NOTE"

    text_ref_title: str = "Ref."
    text_version_title: str = "Version"
    text_date_title: str = "Date"
    text_client_ref_title: str = "Client ref."
    text_validity_date_title: str = "Valid until"
    text_payment_term_title: str = "Payment term"

    text_items_name_title: str = "Name"
    text_items_unit_cost_title: str = "Unit price"
    text_items_quantity_title: str = "Quantity"
    text_items_total_ht_title: str = "Total no tax"
    text_items_tax_title: str = "Tax"
    text_items_discount_title: str = "Discount"
    text_items_total_ttc_title: str = "Total with tax"

    text_total_no_tax: str = "TOTAL NO TAX"
    text_total_discounted: str = "TOTAL DISCOUNTED"
    text_total_tax: str = "TAX"
    text_total_with_tax: str = "TOTAL WITH TAX"

    base_text_color: RGB = (35, 35, 35)
    grey_text_color: RGB = (82, 82, 82)
    grey_bg_color: RGB = (232, 232, 232)
    dark_bg_color: RGB = (212, 212, 212)

    font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"

    money: MoneyFormatter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("base_text_color", "grey_text_color", "grey_bg_color", "dark_bg_color"):
            setattr(self, name, tuple(int(c) for c in getattr(self, name)))
        self.money = MoneyFormatter(
            symbol=self.currency_symbol,
            precision=int(self.currency_precision),
            thousand=self.currency_thousand,
            decimal=self.currency_decimal,
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "Options":
        known = {f.name for f in fields(cls) if f.init}
        # zero values mean "use the default", like an omitted field
        return cls(**{k: v for k, v in (d or {}).items() if k in known and v not in (None, "")})

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            if not f.init:
                continue
            v = getattr(self, f.name)
            out[f.name] = list(v) if isinstance(v, tuple) else v
        return out
