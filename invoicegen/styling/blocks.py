# invoicegen/styling/blocks.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from invoicegen.models import Contact, HeaderFooter, Item
from invoicegen.options import Options
from invoicegen.services.totals import (
    DocumentTotals,
    ItemTotals,
    document_discount_detail,
    item_discount_detail,
    item_tax_detail,
)
from invoicegen.styling.base import Canvas, FontSpec
from invoicegen.styling.geometry import (
    BASE_MARGIN,
    BASE_TEXT_FONT_SIZE,
    CONTACT_MARGIN,
    DESCRIPTION_FONT_SIZE,
    DESCRIPTION_WIDTH,
    IMAGE_HEIGHT,
    ITEM_FONT_SIZE,
    ITEM_NAME_WIDTH,
    ITEM_TEXT_MAX_HEIGHT,
    LARGE_TEXT_FONT_SIZE,
    LOGO_GAP,
    METAS_FONT_SIZE,
    NOTES_FONT_SIZE,
    NOTES_MAX_HEIGHT,
    NOTES_WIDTH,
    PAGE_WIDTH,
    SMALL_TEXT_FONT_SIZE,
    TABLE_HEADER_HEIGHT,
    TITLE_FONT_SIZE,
    TITLE_MARGIN,
    TOTAL_DISCOUNT_ROW_HEIGHT,
    TOTAL_ROW_HEIGHT,
    TOTALS_GAP_TOP,
)

log = logging.getLogger(__name__)

HEADER_FOOTER_MAX_LINES = 2


# =========================
# Blocks
# =========================

@dataclass(frozen=True)
class TitleBlock:
    text: str
    height: float = TITLE_FONT_SIZE + TITLE_MARGIN


@dataclass(frozen=True)
class MetasBlock:
    lines: Tuple[str, ...]

    @property
    def height(self) -> float:
        return METAS_FONT_SIZE * len(self.lines)


@dataclass(frozen=True)
class ContactBlock:
    name: str
    fill: bool
    logo: Optional[bytes]
    logo_size: Optional[Tuple[float, float]]
    address_lines: Tuple[str, ...]
    line_height: float
    has_address: bool

    @property
    def logo_offset(self) -> float:
        return self.logo_size[1] + LOGO_GAP if self.logo_size else 0.0

    @property
    def address_height(self) -> float:
        return address_block_height(len(self.address_lines), self.line_height)

    @property
    def height(self) -> float:
        if not self.has_address:
            return self.logo_offset + self.line_height
        return self.logo_offset + self.address_height + CONTACT_MARGIN * 2


@dataclass(frozen=True)
class TextBlock:
    """Wrapped free text: the document description or the notes."""

    kind: str
    lines: Tuple[str, ...]
    width: float
    font_size: float
    line_height: float

    @property
    def height(self) -> float:
        return self.line_height * len(self.lines)


@dataclass(frozen=True)
class TableHeaderBlock:
    titles: Tuple[str, ...]
    height: float = TABLE_HEADER_HEIGHT


@dataclass(frozen=True)
class ItemRowBlock:
    index: int
    name_lines: Tuple[str, ...]
    description_lines: Tuple[str, ...]
    name_line_height: float
    description_line_height: float
    unit_cost: str
    quantity: str
    total_without_tax: str
    discount: Tuple[str, str]
    tax: Tuple[str, str]
    total_with_tax: str
    height: float


@dataclass(frozen=True)
class TotalsRow:
    label: str
    value: str
    detail: str = ""
    height: float = TOTAL_ROW_HEIGHT


@dataclass(frozen=True)
class TotalsBlock:
    rows: Tuple[TotalsRow, ...]

    @property
    def height(self) -> float:
        return TOTALS_GAP_TOP + sum(r.height for r in self.rows)


@dataclass(frozen=True)
class PaymentTermBlock:
    text: str
    height: float = LARGE_TEXT_FONT_SIZE


@dataclass(frozen=True)
class HeaderFooterBlock:
    kind: str  # "header" | "footer"
    lines: Tuple[str, ...]
    font_size: float
    page_label: str = ""

    @property
    def height(self) -> float:
        return self.font_size * max(1, len(self.lines))


Block = Union[
    TitleBlock,
    MetasBlock,
    ContactBlock,
    TextBlock,
    TableHeaderBlock,
    ItemRowBlock,
    TotalsBlock,
    PaymentTermBlock,
    HeaderFooterBlock,
]


# =========================
# Measuring
# =========================

def address_block_height(line_count: int, line_height: float) -> float:
    # one extra line for the contact name sitting on top of the address box
    return line_height * (line_count + 1)


def _capped(lines: List[str], line_height: float, max_height: float) -> List[str]:
    keep = int(max_height // line_height) if line_height > 0 else len(lines)
    return lines[:keep]


def compose_title(title: str) -> TitleBlock:
    return TitleBlock(text=title)


def compose_metas(
    options: Options,
    ref: str,
    version: str,
    date: str,
    client_ref: str = "",
    validity_date: str = "",
) -> MetasBlock:
    lines = [f"{options.text_ref_title}: {ref}"]
    if version:
        lines.append(f"{options.text_version_title}: {version}")
    if client_ref:
        lines.append(f"{options.text_client_ref_title}: {client_ref}")
    lines.append(f"{options.text_date_title}: {date}")
    if validity_date:
        lines.append(f"{options.text_validity_date_title}: {validity_date}")
    return MetasBlock(lines=tuple(lines))


def compose_contact(contact: Contact, canvas: Canvas, options: Options, *, fill: bool = True) -> ContactBlock:
    """
    Decodes the logo (ImageDecodeError on bad bytes) so a broken image fails the
    build before anything is drawn.
    """
    logo_size = None
    if contact.logo:
        iw, ih = canvas.image_size(contact.logo)
        logo_size = (IMAGE_HEIGHT * iw / ih, float(IMAGE_HEIGHT))

    font = FontSpec(options.font, "", LARGE_TEXT_FONT_SIZE)
    return ContactBlock(
        name=contact.name,
        fill=fill,
        logo=contact.logo,
        logo_size=logo_size,
        address_lines=tuple(contact.address.lines()) if contact.address else (),
        line_height=canvas.line_height(font),
        has_address=contact.address is not None,
    )


def compose_description(text: str, canvas: Canvas, options: Options) -> TextBlock:
    font = FontSpec(options.font, "", DESCRIPTION_FONT_SIZE)
    return TextBlock(
        kind="description",
        lines=tuple(canvas.wrap_text(text, DESCRIPTION_WIDTH, font)),
        width=DESCRIPTION_WIDTH,
        font_size=DESCRIPTION_FONT_SIZE,
        line_height=canvas.line_height(font),
    )


def compose_notes(text: str, canvas: Canvas, options: Options) -> TextBlock:
    font = FontSpec(options.font, "", NOTES_FONT_SIZE)
    lh = canvas.line_height(font)
    return TextBlock(
        kind="notes",
        lines=tuple(_capped(canvas.wrap_text(text, NOTES_WIDTH, font), lh, NOTES_MAX_HEIGHT)),
        width=NOTES_WIDTH,
        font_size=NOTES_FONT_SIZE,
        line_height=lh,
    )


def compose_table_header(options: Options) -> TableHeaderBlock:
    return TableHeaderBlock(
        titles=(
            options.text_items_name_title,
            options.text_items_unit_cost_title,
            options.text_items_quantity_title,
            options.text_items_total_ht_title,
            options.text_items_discount_title,
            options.text_items_tax_title,
            options.text_items_total_ttc_title,
        )
    )


def compose_item_row(index: int, item: Item, line: ItemTotals, canvas: Canvas, options: Options) -> ItemRowBlock:
    """
    Name and description are stacked in the first column, each wrapped to the
    column width and capped at three item-font lines. The tax and discount
    columns always use two lines (value, then a smaller detail).
    """
    name_font = FontSpec(options.font, "", ITEM_FONT_SIZE)
    desc_font = FontSpec(options.font, "", SMALL_TEXT_FONT_SIZE)
    name_lh = canvas.line_height(name_font)
    desc_lh = canvas.line_height(desc_font)

    name_lines = _capped(canvas.wrap_text(item.name, ITEM_NAME_WIDTH, name_font), name_lh, ITEM_TEXT_MAX_HEIGHT)
    desc_lines: List[str] = []
    if item.description:
        desc_lines = _capped(
            canvas.wrap_text(item.description, ITEM_NAME_WIDTH, desc_font), desc_lh, ITEM_TEXT_MAX_HEIGHT
        )

    height = name_lh * len(name_lines) + desc_lh * len(desc_lines)
    if item.discount is not None or line.effective_tax is not None:
        height = max(height, BASE_TEXT_FONT_SIZE + SMALL_TEXT_FONT_SIZE)
    height = max(height, name_lh)

    money = options.money
    return ItemRowBlock(
        index=index,
        name_lines=tuple(name_lines),
        description_lines=tuple(desc_lines),
        name_line_height=name_lh,
        description_line_height=desc_lh,
        unit_cost=money.format(line.unit_cost),
        quantity=str(line.quantity),
        total_without_tax=money.format(line.total_without_tax),
        discount=item_discount_detail(item, line, money),
        tax=item_tax_detail(line, money),
        total_with_tax=money.format(line.total_with_tax),
        height=height,
    )


def compose_totals(totals: DocumentTotals, options: Options) -> TotalsBlock:
    money = options.money
    rows = [TotalsRow(options.text_total_no_tax, money.format(totals.grand_total))]
    if totals.discount is not None:
        rows.append(
            TotalsRow(
                options.text_total_discounted,
                money.format(totals.total_with_discount),
                detail=document_discount_detail(totals, money),
                height=TOTAL_DISCOUNT_ROW_HEIGHT,
            )
        )
    rows.append(TotalsRow(options.text_total_tax, money.format(totals.total_tax)))
    rows.append(TotalsRow(options.text_total_with_tax, money.format(totals.final_total)))
    return TotalsBlock(rows=tuple(rows))


def compose_payment_term(options: Options, payment_term: str) -> PaymentTermBlock:
    return PaymentTermBlock(text=f"{options.text_payment_term_title}: {payment_term}")


def compose_header_footer(
    kind: str,
    hf: HeaderFooter,
    canvas: Canvas,
    options: Options,
    page_no: int,
    total_pages: int,
) -> HeaderFooterBlock:
    font = FontSpec(options.font, "", hf.font_size)
    lines = canvas.wrap_text(hf.text, PAGE_WIDTH - BASE_MARGIN * 2, font)
    if len(lines) > HEADER_FOOTER_MAX_LINES:
        log.debug(
            "%s text wraps to %d lines, keeping the first %d", kind, len(lines), HEADER_FOOTER_MAX_LINES
        )
        lines = lines[:HEADER_FOOTER_MAX_LINES]
    return HeaderFooterBlock(
        kind=kind,
        lines=tuple(lines),
        font_size=hf.font_size,
        page_label=f"{page_no}/{total_pages}" if hf.pagination else "",
    )
