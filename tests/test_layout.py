# tests/test_layout.py
from __future__ import annotations

import pytest

from invoicegen.models import HeaderFooter
from invoicegen.money import Percent
from invoicegen.styling.blocks import (
    ContactBlock,
    HeaderFooterBlock,
    ItemRowBlock,
    MetasBlock,
    PaymentTermBlock,
    TableHeaderBlock,
    TextBlock,
    TotalsBlock,
)
from invoicegen.styling.geometry import BASE_MARGIN_TOP, FOOTER_MARGIN_BOTTOM, MAX_PAGE_HEIGHT, PAGE_HEIGHT

LONG_DESCRIPTION = "Labour, parts and travel for the quarterly maintenance visit on site. " * 2


def _layout(doc, canvas):
    return doc.layout(canvas)


def _rows_by_page(plan):
    return {page.index: [p.block.index for p in page.placements if isinstance(p.block, ItemRowBlock)] for page in plan.pages}


def test_single_item_fits_on_one_page(document_factory, recording_canvas):
    plan = _layout(document_factory(1), recording_canvas)
    assert plan.page_count == 1
    assert plan.table_header_count == 1
    assert plan.item_page_breaks == 0
    assert len(plan.blocks_of(TotalsBlock)) == 1


def test_contacts_are_anchored_and_cursor_takes_the_taller(document_factory, recording_canvas):
    plan = _layout(document_factory(1), recording_canvas)
    company, customer = plan.blocks_of(ContactBlock)
    assert (company.x, company.y) == (30, 40)
    assert (customer.x, customer.y) == (312, 85)

    header = plan.blocks_of(TableHeaderBlock)[0]
    customer_bottom = customer.y + customer.block.height
    assert header.y == customer_bottom + 40


def test_description_sits_under_contacts(document_factory, recording_canvas):
    doc = document_factory(1).set_description("A short description")
    plan = _layout(doc, recording_canvas)
    (desc,) = plan.blocks_of(TextBlock)
    customer = plan.blocks_of(ContactBlock)[1]
    assert desc.block.kind == "description"
    assert desc.y == customer.y + customer.block.height + 10


def test_scenario_twenty_five_items_repeat_the_header(document_factory, recording_canvas):
    doc = document_factory(25, description=LONG_DESCRIPTION, tax=Percent("20"))
    plan = _layout(doc, recording_canvas)

    assert plan.page_count >= 2
    header_pages = [p.y for p in plan.blocks_of(TableHeaderBlock)]
    assert len(header_pages) == plan.table_header_count == 1 + plan.item_page_breaks

    pages_with_header = {
        page.index for page in plan.pages if any(isinstance(p.block, TableHeaderBlock) for p in page.placements)
    }
    assert {0, 1} <= pages_with_header

    # continuation header goes to the top margin
    second_page_header = [p for p in plan.pages[1].placements if isinstance(p.block, TableHeaderBlock)][0]
    assert second_page_header.y == BASE_MARGIN_TOP

    rows = plan.blocks_of(ItemRowBlock)
    assert rows[-1].block.index == 24


@pytest.mark.parametrize("count", [0, 1, 5, 17, 18, 19, 25, 40, 60])
def test_every_item_on_exactly_one_page(document_factory, recording_canvas, count):
    doc = document_factory(count, description=LONG_DESCRIPTION)
    plan = _layout(doc, recording_canvas)

    indexes = [p.block.index for p in plan.blocks_of(ItemRowBlock)]
    assert indexes == list(range(count))
    assert plan.item_pages == sorted(plan.item_pages)
    assert plan.table_header_count == 1 + plan.item_page_breaks

    # a repeated header always has rows under it
    by_page = _rows_by_page(plan)
    for page in plan.pages:
        if any(isinstance(p.block, TableHeaderBlock) for p in page.placements) and page.index > 0:
            assert by_page[page.index]


def test_rows_stay_on_the_page(document_factory, recording_canvas):
    plan = _layout(document_factory(40, description=LONG_DESCRIPTION), recording_canvas)
    for p in plan.blocks_of(ItemRowBlock):
        assert p.y + p.block.height < PAGE_HEIGHT - FOOTER_MARGIN_BOTTOM


def test_totals_move_to_a_new_page_when_they_do_not_fit(document_factory, recording_canvas):
    doc = document_factory(18, description=LONG_DESCRIPTION).set_payment_term("30 days")
    plan = _layout(doc, recording_canvas)

    assert plan.table_header_count == 1
    assert plan.page_count == 2
    totals_page = [page.index for page in plan.pages if any(isinstance(p.block, TotalsBlock) for p in page.placements)]
    assert totals_page == [1]

    (term,) = plan.blocks_of(PaymentTermBlock)
    (totals,) = plan.blocks_of(TotalsBlock)
    assert totals.y == BASE_MARGIN_TOP
    assert term.y == totals.y + totals.block.height + 5


def test_notes_do_not_move_the_cursor(document_factory, recording_canvas):
    doc = document_factory(1).set_notes("Bank transfer only").set_payment_term("30 days")
    plan = _layout(doc, recording_canvas)

    notes = [p for p in plan.blocks_of(TextBlock) if p.block.kind == "notes"][0]
    (totals,) = plan.blocks_of(TotalsBlock)
    assert notes.x == 30
    assert notes.y == totals.y + 10
    assert totals.x == 312


def test_header_and_footer_on_every_page(document_factory, recording_canvas):
    doc = document_factory(40, description=LONG_DESCRIPTION)
    doc.set_header(HeaderFooter(text="Acme")).set_footer(HeaderFooter(text="Thanks", pagination=True))
    plan = _layout(doc, recording_canvas)

    hf = plan.blocks_of(HeaderFooterBlock)
    assert len(hf) == 2 * plan.page_count
    labels = [p.block.page_label for p in hf if p.block.kind == "footer"]
    assert labels == [f"{i}/{plan.page_count}" for i in range(1, plan.page_count + 1)]
    assert all(p.block.page_label == "" for p in hf if p.block.kind == "header")


def test_layout_does_not_touch_the_document(document_factory, recording_canvas):
    doc = document_factory(3, tax=None)
    doc.set_default_tax(Percent("20"))
    _layout(doc, recording_canvas)
    assert all(it.tax is None for it in doc.items)


def test_long_description_continues_on_the_next_page(document_factory, recording_canvas):
    doc = document_factory(2).set_description("line\n" * 200)
    doc.validate()
    plan = _layout(doc, recording_canvas)

    parts = [
        (page.index, p)
        for page in plan.pages
        for p in page.placements
        if isinstance(p.block, TextBlock) and p.block.kind == "description"
    ]
    assert len(parts) >= 3
    assert [index for index, _ in parts] == list(range(len(parts)))
    assert sum(len(p.block.lines) for _, p in parts) == 200
    for _, p in parts:
        assert p.y + p.block.height <= MAX_PAGE_HEIGHT
    assert all(p.y == BASE_MARGIN_TOP for _, p in parts[1:])

    # the item table still follows the description
    rows = plan.blocks_of(ItemRowBlock)
    assert [p.block.index for p in rows] == [0, 1]
    assert plan.item_pages[0] >= parts[-1][0]


def test_description_keeps_blank_lines(document_factory, recording_canvas):
    doc = document_factory(1).set_description("First paragraph\n\nSecond paragraph\n")
    (desc,) = _layout(doc, recording_canvas).blocks_of(TextBlock)
    assert desc.block.lines == ("First paragraph", "", "Second paragraph")


def test_extra_metas_push_the_customer_down(document_factory, recording_canvas):
    doc = document_factory(1).set_version("2").set_client_ref("PO-9").set_validity_date("31/12/2024")
    plan = _layout(doc, recording_canvas)

    (metas,) = plan.blocks_of(MetasBlock)
    assert len(metas.block.lines) == 5
    customer = plan.blocks_of(ContactBlock)[1]
    assert customer.y == metas.y + metas.block.height
    assert customer.y > 85
