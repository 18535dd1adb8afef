# invoicegen/styling/layout.py
"""
Page layout and pagination.

LayoutEngine walks the document top to bottom with a cursor (x, y, page) and
turns it into a LayoutPlan: for every page, the blocks to draw and where. It
never draws; the renderer replays the plan on a canvas.

Page break rules:
  - the description is placed line by line; lines below MAX_PAGE_HEIGHT
    continue at the top margin of the next page;
  - before the item table, a fixed worst-case estimate (header row plus one
    tall row) decides whether the table starts on a fresh page;
  - inside the table, the check runs after each row against the real cursor
    position; the next row then starts on a new page under a repeated header;
  - before notes/totals, the fixed totals height (taller with a document
    discount) or the notes height, whichever is larger, must fit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, List, Optional

from invoicegen.options import Options
from invoicegen.services.totals import DocumentTotals
from invoicegen.styling.base import Canvas
from invoicegen.styling.blocks import (
    Block,
    compose_contact,
    compose_description,
    compose_header_footer,
    compose_item_row,
    compose_metas,
    compose_notes,
    compose_payment_term,
    compose_table_header,
    compose_title,
    compose_totals,
)
from invoicegen.styling.geometry import (
    BASE_MARGIN,
    BASE_MARGIN_TOP,
    COLUMN_WIDTH,
    CUSTOMER_OFFSET_TOP,
    DESCRIPTION_GAP,
    FOOTER_MARGIN_BOTTOM,
    HEADER_MARGIN_TOP,
    ITEM_ROW_GAP,
    ITEMS_PADDING_TOP,
    MAX_PAGE_HEIGHT,
    NOTES_GAP,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    PAYMENT_TERM_GAP,
    TABLE_START_ESTIMATE,
    TITLE_FONT_SIZE,
    TITLE_MARGIN,
    TOTALS_BLOCK_HEIGHT,
    TOTALS_DISCOUNT_EXTRA,
)

if TYPE_CHECKING:
    from invoicegen.document import Document

log = logging.getLogger(__name__)


@dataclass
class Cursor:
    x: float
    y: float
    page: int = 0


@dataclass(frozen=True)
class Placement:
    block: Block
    x: float
    y: float


@dataclass
class PagePlan:
    index: int
    placements: List[Placement] = field(default_factory=list)


@dataclass
class LayoutPlan:
    pages: List[PagePlan]
    table_header_count: int = 0
    item_page_breaks: int = 0
    item_pages: List[int] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def blocks_of(self, kind: type) -> List[Placement]:
        return [p for page in self.pages for p in page.placements if isinstance(p.block, kind)]


def document_title(doc: "Document") -> str:
    o = doc.options
    if doc.type == "INVOICE":
        return o.text_type_invoice
    if doc.type == "QUOTATION":
        return o.text_type_quotation
    return o.text_type_delivery_note


class LayoutEngine:
    def __init__(self, canvas: Canvas, options: Options):
        self.canvas = canvas
        self.options = options
        self.cursor = Cursor(BASE_MARGIN, BASE_MARGIN_TOP)
        self.pages: List[PagePlan] = [PagePlan(index=0)]
        self.table_header_count = 0
        self.item_page_breaks = 0
        self.item_pages: List[int] = []
        self.heading_bottom = float(BASE_MARGIN_TOP)

    # =========================
    # Cursor / pages
    # =========================

    def place(self, block: Block, x: float, y: float) -> Placement:
        p = Placement(block=block, x=x, y=y)
        self.pages[self.cursor.page].placements.append(p)
        return p

    def new_page(self) -> None:
        self.pages.append(PagePlan(index=len(self.pages)))
        self.cursor = Cursor(BASE_MARGIN, BASE_MARGIN_TOP, page=len(self.pages) - 1)
        log.debug("Page break -> page %d", self.cursor.page + 1)

    def fits(self, height: float) -> bool:
        return self.cursor.y + height <= MAX_PAGE_HEIGHT

    # =========================
    # Sections
    # =========================

    def layout_heading(self, doc: "Document", date: str) -> None:
        col_x = PAGE_WIDTH - BASE_MARGIN - COLUMN_WIDTH
        self.place(compose_title(document_title(doc)), col_x, BASE_MARGIN_TOP)

        metas = compose_metas(self.options, doc.ref, doc.version, date, doc.client_ref, doc.validity_date)
        metas_y = BASE_MARGIN_TOP + TITLE_FONT_SIZE + TITLE_MARGIN + 1
        self.place(metas, col_x, metas_y)
        self.heading_bottom = metas_y + metas.height

    def layout_contacts(self, doc: "Document") -> None:
        company = compose_contact(doc.company, self.canvas, self.options)
        customer = compose_contact(doc.customer, self.canvas, self.options)

        company_y = BASE_MARGIN_TOP
        # the customer card never starts above the bottom of the metas
        customer_y = max(BASE_MARGIN_TOP + CUSTOMER_OFFSET_TOP, self.heading_bottom)
        self.place(company, BASE_MARGIN, company_y)
        self.place(customer, PAGE_WIDTH - BASE_MARGIN - COLUMN_WIDTH, customer_y)

        self.cursor.x = BASE_MARGIN
        self.cursor.y = max(company_y + company.height, customer_y + customer.height)

    def layout_description(self, description: str) -> None:
        """
        Places the description under the contacts. Lines that do not fit above
        MAX_PAGE_HEIGHT continue at the top of the next page.
        """
        if not description:
            return
        block = compose_description(description, self.canvas, self.options)
        self.cursor.y += DESCRIPTION_GAP

        lines = block.lines
        while lines:
            room = int((MAX_PAGE_HEIGHT - self.cursor.y) // block.line_height)
            if room <= 0:
                self.new_page()
                continue

            part = replace(block, lines=lines[:room])
            self.place(part, BASE_MARGIN, self.cursor.y)
            self.cursor.y += part.height
            lines = lines[room:]
            if lines:
                self.new_page()

    def _table_header(self) -> None:
        block = compose_table_header(self.options)
        self.place(block, BASE_MARGIN, self.cursor.y)
        self.cursor.y += block.height
        self.table_header_count += 1

    def layout_items(self, doc: "Document", totals: DocumentTotals) -> None:
        if not self.fits(TABLE_START_ESTIMATE):
            self.new_page()
        else:
            self.cursor.y += ITEMS_PADDING_TOP

        self._table_header()

        count = len(doc.items)
        for i, (item, line) in enumerate(zip(doc.items, totals.items)):
            row = compose_item_row(i, item, line, self.canvas, self.options)
            self.place(row, BASE_MARGIN, self.cursor.y)
            self.item_pages.append(self.cursor.page)
            self.cursor.y += row.height

            if self.cursor.y > MAX_PAGE_HEIGHT and i < count - 1:
                self.item_page_breaks += 1
                self.new_page()
                self._table_header()

            self.cursor.y += ITEM_ROW_GAP

    def layout_closing(self, doc: "Document", totals: DocumentTotals) -> None:
        totals_block = compose_totals(totals, self.options)
        notes = compose_notes(doc.notes, self.canvas, self.options) if doc.notes else None

        needed = TOTALS_BLOCK_HEIGHT + (TOTALS_DISCOUNT_EXTRA if totals.discount is not None else 0)
        if notes is not None:
            needed = max(needed, NOTES_GAP + notes.height)
        if not self.fits(needed):
            self.new_page()

        if notes is not None:
            # notes sit left of the totals and do not move the cursor
            self.place(notes, BASE_MARGIN, self.cursor.y + NOTES_GAP)

        col_x = PAGE_WIDTH - BASE_MARGIN - COLUMN_WIDTH
        self.place(totals_block, col_x, self.cursor.y)
        self.cursor.y += totals_block.height

        if doc.payment_term:
            self.cursor.y += PAYMENT_TERM_GAP
            term = compose_payment_term(self.options, doc.payment_term)
            self.place(term, col_x, self.cursor.y)
            self.cursor.y += term.height

    def layout_header_footer(self, doc: "Document") -> None:
        total = len(self.pages)
        for page in self.pages:
            if doc.header is not None:
                b = compose_header_footer("header", doc.header, self.canvas, self.options, page.index + 1, total)
                page.placements.append(Placement(b, BASE_MARGIN, HEADER_MARGIN_TOP))
            if doc.footer is not None:
                b = compose_header_footer("footer", doc.footer, self.canvas, self.options, page.index + 1, total)
                page.placements.append(Placement(b, BASE_MARGIN, PAGE_HEIGHT - FOOTER_MARGIN_BOTTOM - b.height))

    # =========================
    # Entry point
    # =========================

    def run(self, doc: "Document", totals: DocumentTotals, date: str) -> LayoutPlan:
        self.layout_heading(doc, date)
        self.layout_contacts(doc)
        self.layout_description(doc.description)
        self.layout_items(doc, totals)
        self.layout_closing(doc, totals)
        self.layout_header_footer(doc)

        log.debug(
            "Layout done: %d page(s), %d item row(s), %d table header(s)",
            len(self.pages),
            len(self.item_pages),
            self.table_header_count,
        )
        return LayoutPlan(
            pages=self.pages,
            table_header_count=self.table_header_count,
            item_page_breaks=self.item_page_breaks,
            item_pages=self.item_pages,
        )


def compose_layout(
    doc: "Document",
    totals: DocumentTotals,
    canvas: Canvas,
    date: str,
    options: Optional[Options] = None,
) -> LayoutPlan:
    return LayoutEngine(canvas, options or doc.options).run(doc, totals, date)
