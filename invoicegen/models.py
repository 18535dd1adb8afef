# invoicegen/models.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Literal, Optional

from invoicegen.money import Adjustment, decimal_or_zero

DocType = Literal["INVOICE", "QUOTATION", "DELIVERY_NOTE"]

INVOICE: DocType = "INVOICE"
QUOTATION: DocType = "QUOTATION"
DELIVERY_NOTE: DocType = "DELIVERY_NOTE"

DOC_TYPES = (INVOICE, QUOTATION, DELIVERY_NOTE)


@dataclass
class Address:
    address: str = ""
    address_2: str = ""
    postal_code: str = ""
    city: str = ""
    country: str = ""
    business_id: str = ""
    tax_id: str = ""
    vat: str = ""
    iban: str = ""
    bank_name: str = ""

    def lines(self) -> List[str]:
        """
        Display lines, top to bottom. Empty fields are skipped; the city only
        shows up next to a postal code.
        """
        res = [self.address]
        if self.address_2:
            res.append(self.address_2)
        if self.postal_code:
            res.append(f"{self.postal_code} {self.city}")
        for extra in (self.country, self.business_id, self.tax_id, self.vat, self.iban, self.bank_name):
            if extra:
                res.append(extra)
        return res


@dataclass
class Contact:
    name: str
    logo: Optional[bytes] = None
    address: Optional[Address] = None


@dataclass
class Item:
    name: str
    unit_cost: str = "0"
    quantity: str = "0"
    description: str = ""
    tax: Optional[Adjustment] = None
    discount: Optional[Adjustment] = None

    def unit_cost_value(self) -> Decimal:
        return decimal_or_zero(self.unit_cost, field=f"{self.name!r} unit_cost")

    def quantity_value(self) -> Decimal:
        return decimal_or_zero(self.quantity, field=f"{self.name!r} quantity")


@dataclass
class HeaderFooter:
    """
    Text repeated at the top or bottom of every page. Only the first two wrapped
    lines are printed.
    """

    text: str = ""
    font_size: float = 7
    pagination: bool = False
