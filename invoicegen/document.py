# invoicegen/document.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date as _date
from typing import List, Optional

from invoicegen.config import Settings
from invoicegen.models import Contact, DocType, HeaderFooter, Item
from invoicegen.money import Adjustment
from invoicegen.options import Options
from invoicegen.services.totals import DocumentTotals, compute_document_totals
from invoicegen.services.validation import validate_document
from invoicegen.styling.layout import LayoutPlan, compose_layout
from invoicegen.styling.renderer import create_pdf_canvas, render_plan

log = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"


@dataclass
class Document:
    """
    An invoice, quotation or delivery note.

    Fill it through the set_* methods (each returns the document so calls can be
    chained) and call build() for the PDF bytes. build() only reads the
    document, so the same instance can be built any number of times.
    """

    type: DocType
    options: Options = field(default_factory=Options)

    ref: str = ""
    version: str = ""
    client_ref: str = ""
    description: str = ""
    notes: str = ""
    date: str = ""
    validity_date: str = ""
    payment_term: str = ""

    company: Optional[Contact] = None
    customer: Optional[Contact] = None
    items: List[Item] = field(default_factory=list)

    discount: Optional[Adjustment] = None
    default_tax: Optional[Adjustment] = None

    header: Optional[HeaderFooter] = None
    footer: Optional[HeaderFooter] = None

    def __post_init__(self) -> None:
        if self.options is None:
            self.options = Options()

    # =========================
    # Setters
    # =========================

    def set_header(self, header: Optional[HeaderFooter]) -> "Document":
        self.header = header
        return self

    def set_footer(self, footer: Optional[HeaderFooter]) -> "Document":
        self.footer = footer
        return self

    def set_ref(self, ref: str) -> "Document":
        self.ref = ref
        return self

    def set_version(self, version: str) -> "Document":
        self.version = version
        return self

    def set_client_ref(self, client_ref: str) -> "Document":
        self.client_ref = client_ref
        return self

    def set_description(self, description: str) -> "Document":
        self.description = description
        return self

    def set_notes(self, notes: str) -> "Document":
        self.notes = notes
        return self

    def set_date(self, date: str) -> "Document":
        self.date = date
        return self

    def set_validity_date(self, validity_date: str) -> "Document":
        self.validity_date = validity_date
        return self

    def set_payment_term(self, payment_term: str) -> "Document":
        self.payment_term = payment_term
        return self

    def set_discount(self, discount: Optional[Adjustment]) -> "Document":
        self.discount = discount
        return self

    def set_default_tax(self, tax: Optional[Adjustment]) -> "Document":
        self.default_tax = tax
        return self

    def set_company(self, company: Contact) -> "Document":
        self.company = company
        return self

    def set_customer(self, customer: Contact) -> "Document":
        self.customer = customer
        return self

    def append_item(self, item: Item) -> "Document":
        self.items.append(item)
        return self

    # =========================
    # Build
    # =========================

    def validate(self) -> None:
        validate_document(self)

    def totals(self) -> DocumentTotals:
        return compute_document_totals(self.items, self.discount, self.default_tax)

    def display_date(self) -> str:
        return self.date or _date.today().strftime(DATE_FORMAT)

    def layout(self, canvas, totals: Optional[DocumentTotals] = None) -> LayoutPlan:
        return compose_layout(self, totals or self.totals(), canvas, self.display_date(), self.options)

    def build(self, settings: Optional[Settings] = None) -> bytes:
        """
        Validate, compute totals, lay out and render. Raises ValidationError,
        ComputationError or ImageDecodeError; nothing is drawn when validation
        or the totals fail.
        """
        self.validate()
        totals = self.totals()

        canvas = create_pdf_canvas(self.options, settings)
        plan = self.layout(canvas, totals)
        pdf = render_plan(plan, canvas, self.options)

        log.debug(
            "Built %s %r: %d item(s), %d page(s), %d bytes",
            self.type,
            self.ref,
            len(self.items),
            plan.page_count,
            len(pdf),
        )
        return pdf
