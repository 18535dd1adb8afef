# invoicegen/styling/renderer.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from invoicegen.config import Settings, get_settings
from invoicegen.options import Options
from invoicegen.styling.base import BOLD, REGULAR, Box, Canvas, FontSpec
from invoicegen.styling.blocks import (
    ContactBlock,
    HeaderFooterBlock,
    ItemRowBlock,
    MetasBlock,
    PaymentTermBlock,
    TableHeaderBlock,
    TextBlock,
    TitleBlock,
    TotalsBlock,
)
from invoicegen.styling.geometry import (
    BASE_MARGIN,
    BASE_TEXT_FONT_SIZE,
    COLUMN_WIDTH,
    CONTACT_MARGIN,
    ITEM_COL_DISCOUNT_OFFSET,
    ITEM_COL_QUANTITY_OFFSET,
    ITEM_COL_TAX_OFFSET,
    ITEM_COL_TOTAL_HT_OFFSET,
    ITEM_COL_TOTAL_TTC_OFFSET,
    ITEM_COL_UNIT_PRICE_OFFSET,
    ITEM_FONT_SIZE,
    ITEM_NAME_WIDTH,
    ITEM_TITLE_MARGIN,
    LARGE_TEXT_FONT_SIZE,
    LOGO_GAP,
    METAS_FONT_SIZE,
    PAGE_WIDTH,
    SMALL_TEXT_FONT_SIZE,
    TITLE_FONT_SIZE,
    TITLE_MARGIN,
    TOTAL_MARGIN,
    TOTALS_GAP_TOP,
)
from invoicegen.styling.layout import LayoutPlan, Placement
from invoicegen.styling.pdf_canvas import PdfCanvas, register_ttf
from invoicegen.styling.render_state import RenderState

log = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def create_pdf_canvas(options: Options, settings: Optional[Settings] = None) -> PdfCanvas:
    """
    A4 reportlab canvas with the document font family registered. TTF files from
    the settings replace the built-in faces when they exist.
    """
    settings = settings or get_settings()
    c = PdfCanvas()

    regular, bold = options.font, options.bold_font
    if register_ttf("InvoiceGen-Regular", settings.font_regular_path):
        regular = "InvoiceGen-Regular"
    if register_ttf("InvoiceGen-Bold", settings.font_bold_path):
        bold = "InvoiceGen-Bold"

    c.register_font_family(options.font, regular, bold)
    return c


class DocumentRenderer:
    """
    Replays a LayoutPlan on a canvas, page by page, in placement order.
    """

    def __init__(self, canvas: Canvas, options: Options):
        self.canvas = canvas
        self.options = options
        self.state = RenderState(
            canvas,
            FontSpec(options.font, REGULAR, LARGE_TEXT_FONT_SIZE),
            options.base_text_color,
        )
        self._draw: Dict[type, Callable[[Placement], None]] = {
            TitleBlock: self.draw_title,
            MetasBlock: self.draw_metas,
            ContactBlock: self.draw_contact,
            TextBlock: self.draw_text,
            TableHeaderBlock: self.draw_table_header,
            ItemRowBlock: self.draw_item_row,
            TotalsBlock: self.draw_totals,
            PaymentTermBlock: self.draw_payment_term,
            HeaderFooterBlock: self.draw_header_footer,
        }

    def render(self, plan: LayoutPlan) -> None:
        for page in plan.pages:
            if page.index > 0:
                self.canvas.new_page()
                self.state.reapply()
            for p in page.placements:
                self._draw[type(p.block)](p)

    # =========================
    # Heading
    # =========================

    def draw_title(self, p: Placement) -> None:
        b: TitleBlock = p.block  # type: ignore[assignment]
        self.canvas.draw_rect(p.x, p.y, p.x + COLUMN_WIDTH, p.y + b.height, self.options.dark_bg_color)
        with self.state.scoped(size=TITLE_FONT_SIZE):
            self.canvas.draw_cell(Box(p.x, p.y + TITLE_MARGIN / 2, COLUMN_WIDTH, TITLE_FONT_SIZE), b.text, "center")

    def draw_metas(self, p: Placement) -> None:
        b: MetasBlock = p.block  # type: ignore[assignment]
        with self.state.scoped(size=METAS_FONT_SIZE):
            for i, line in enumerate(b.lines):
                self.canvas.draw_cell(Box(p.x, p.y + METAS_FONT_SIZE * i, COLUMN_WIDTH, METAS_FONT_SIZE), line, "right")

    # =========================
    # Contacts
    # =========================

    def draw_contact(self, p: Placement) -> None:
        b: ContactBlock = p.block  # type: ignore[assignment]
        y = p.y

        if b.logo and b.logo_size:
            w, h = b.logo_size
            self.canvas.draw_image(Box(p.x, y, w, h), b.logo)
            y += h + LOGO_GAP

        fill = self.options.grey_bg_color if b.fill else WHITE
        self.canvas.draw_rect(p.x, y, p.x + COLUMN_WIDTH, y + LARGE_TEXT_FONT_SIZE, fill)
        with self.state.scoped(size=LARGE_TEXT_FONT_SIZE, weight=BOLD):
            self.canvas.draw_cell(Box(p.x + CONTACT_MARGIN, y, 0, LARGE_TEXT_FONT_SIZE), b.name)

        if not b.has_address:
            return

        top = y + LARGE_TEXT_FONT_SIZE + CONTACT_MARGIN
        bottom = y + b.address_height + CONTACT_MARGIN * 2
        self.canvas.draw_rect(p.x, top, p.x + COLUMN_WIDTH, bottom, self.options.grey_bg_color)

        with self.state.scoped(size=LARGE_TEXT_FONT_SIZE, weight=REGULAR):
            line_y = top + CONTACT_MARGIN
            for line in b.address_lines:
                self.canvas.draw_cell(Box(p.x + CONTACT_MARGIN, line_y, COLUMN_WIDTH, b.line_height), line)
                line_y += b.line_height

    # =========================
    # Free text
    # =========================

    def draw_text(self, p: Placement) -> None:
        b: TextBlock = p.block  # type: ignore[assignment]
        with self.state.scoped(size=b.font_size, weight=REGULAR):
            y = p.y
            for line in b.lines:
                self.canvas.draw_cell(Box(p.x, y, b.width, b.line_height), line)
                y += b.line_height

    # =========================
    # Item table
    # =========================

    def draw_table_header(self, p: Placement) -> None:
        b: TableHeaderBlock = p.block  # type: ignore[assignment]
        self.canvas.draw_rect(
            BASE_MARGIN,
            p.y,
            PAGE_WIDTH - BASE_MARGIN,
            p.y + ITEM_FONT_SIZE + ITEM_TITLE_MARGIN,
            self.options.grey_bg_color,
        )

        name, unit_cost, quantity, total_ht, discount, tax, total_ttc = b.titles
        y = p.y + ITEM_TITLE_MARGIN / 2
        h = ITEM_FONT_SIZE
        with self.state.scoped(size=ITEM_FONT_SIZE, weight=BOLD):
            self.canvas.draw_cell(Box(BASE_MARGIN + ITEM_TITLE_MARGIN, y, 0, h), name)
            self.canvas.draw_cell(Box(ITEM_COL_UNIT_PRICE_OFFSET, y, 0, h), unit_cost)
            self.canvas.draw_cell(Box(ITEM_COL_QUANTITY_OFFSET, y, 0, h), quantity)
            self.canvas.draw_cell(Box(ITEM_COL_TOTAL_HT_OFFSET, y, 0, h), total_ht)
            self.canvas.draw_cell(Box(ITEM_COL_DISCOUNT_OFFSET, y, 0, h), discount)
            self.canvas.draw_cell(Box(ITEM_COL_TAX_OFFSET, y, 0, h), tax)
            self.canvas.draw_cell(Box(ITEM_COL_TOTAL_TTC_OFFSET, y, 0, h), total_ttc)

    def _two_line_cell(self, x: float, w: float, y: float, height: float, title: str, detail: str) -> None:
        if not detail:
            self.canvas.draw_cell(Box(x, y, w, height), title)
            return
        self.canvas.draw_cell(Box(x, y, w, height / 2), title)
        with self.state.scoped(size=SMALL_TEXT_FONT_SIZE, color=self.options.grey_text_color):
            self.canvas.draw_cell(Box(x, y + BASE_TEXT_FONT_SIZE, w, height / 2), detail)

    def draw_item_row(self, p: Placement) -> None:
        b: ItemRowBlock = p.block  # type: ignore[assignment]
        y = p.y
        x_name = BASE_MARGIN + ITEM_TITLE_MARGIN

        with self.state.scoped(size=ITEM_FONT_SIZE, weight=REGULAR):
            line_y = y
            for line in b.name_lines:
                self.canvas.draw_cell(Box(x_name, line_y, ITEM_NAME_WIDTH, b.name_line_height), line)
                line_y += b.name_line_height

            if b.description_lines:
                with self.state.scoped(size=SMALL_TEXT_FONT_SIZE, color=self.options.grey_text_color):
                    for line in b.description_lines:
                        self.canvas.draw_cell(Box(x_name, line_y, ITEM_NAME_WIDTH, b.description_line_height), line)
                        line_y += b.description_line_height

            h = b.height
            self.canvas.draw_cell(
                Box(ITEM_COL_UNIT_PRICE_OFFSET, y, ITEM_COL_QUANTITY_OFFSET - ITEM_COL_UNIT_PRICE_OFFSET, h), b.unit_cost
            )
            self.canvas.draw_cell(
                Box(ITEM_COL_QUANTITY_OFFSET, y, ITEM_COL_TOTAL_HT_OFFSET - ITEM_COL_QUANTITY_OFFSET, h), b.quantity
            )
            self.canvas.draw_cell(
                Box(ITEM_COL_TOTAL_HT_OFFSET, y, ITEM_COL_DISCOUNT_OFFSET - ITEM_COL_TOTAL_HT_OFFSET, h),
                b.total_without_tax,
            )
            self._two_line_cell(
                ITEM_COL_DISCOUNT_OFFSET, ITEM_COL_TAX_OFFSET - ITEM_COL_DISCOUNT_OFFSET, y, h, *b.discount
            )
            self._two_line_cell(
                ITEM_COL_TAX_OFFSET, ITEM_COL_TOTAL_TTC_OFFSET - ITEM_COL_TAX_OFFSET, y, h, *b.tax
            )
            self.canvas.draw_cell(
                Box(ITEM_COL_TOTAL_TTC_OFFSET, y, PAGE_WIDTH - BASE_MARGIN - ITEM_COL_TOTAL_TTC_OFFSET, h),
                b.total_with_tax,
            )

    # =========================
    # Totals
    # =========================

    def draw_totals(self, p: Placement) -> None:
        b: TotalsBlock = p.block  # type: ignore[assignment]
        split = p.x + COLUMN_WIDTH / 2
        right = p.x + COLUMN_WIDTH
        cell_w = COLUMN_WIDTH / 2 - TOTAL_MARGIN

        y = p.y + TOTALS_GAP_TOP
        with self.state.scoped(size=LARGE_TEXT_FONT_SIZE, weight=REGULAR, color=self.options.base_text_color):
            for row in b.rows:
                self.canvas.draw_rect(p.x, y, split, y + row.height, self.options.dark_bg_color)
                self.canvas.draw_rect(split, y, right, y + row.height, self.options.grey_bg_color)

                if row.detail:
                    self.canvas.draw_cell(Box(p.x, y + TOTAL_MARGIN, cell_w, LARGE_TEXT_FONT_SIZE), row.label, "right")
                    with self.state.scoped(size=BASE_TEXT_FONT_SIZE, color=self.options.grey_text_color):
                        self.canvas.draw_cell(
                            Box(p.x, y + TOTAL_MARGIN + LARGE_TEXT_FONT_SIZE + 1, cell_w, BASE_TEXT_FONT_SIZE + 2),
                            row.detail,
                            "right",
                        )
                else:
                    self.canvas.draw_cell(Box(p.x, y, cell_w, row.height), row.label, "right", middle=True)

                self.canvas.draw_cell(Box(split + TOTAL_MARGIN, y, cell_w, row.height), row.value, middle=True)
                y += row.height

    def draw_payment_term(self, p: Placement) -> None:
        b: PaymentTermBlock = p.block  # type: ignore[assignment]
        with self.state.scoped(size=LARGE_TEXT_FONT_SIZE, weight=BOLD):
            self.canvas.draw_cell(Box(p.x, p.y, COLUMN_WIDTH, LARGE_TEXT_FONT_SIZE), b.text, "right")

    # =========================
    # Header / footer
    # =========================

    def draw_header_footer(self, p: Placement) -> None:
        b: HeaderFooterBlock = p.block  # type: ignore[assignment]
        width = PAGE_WIDTH - BASE_MARGIN * 2
        with self.state.scoped(size=b.font_size, weight=REGULAR, color=self.options.grey_text_color):
            y = p.y
            for line in b.lines:
                self.canvas.draw_cell(Box(p.x, y, width, b.font_size), line, "center")
                y += b.font_size
            if b.page_label:
                self.canvas.draw_cell(Box(p.x, p.y, width, b.font_size), b.page_label, "right")


def render_plan(plan: LayoutPlan, canvas: Canvas, options: Options) -> bytes:
    DocumentRenderer(canvas, options).render(plan)
    log.debug("Rendered %d page(s)", plan.page_count)
    return canvas.serialize()
