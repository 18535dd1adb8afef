# tests/test_blocks.py
from __future__ import annotations

import pytest

from invoicegen.errors import ImageDecodeError
from invoicegen.models import Address, Contact, HeaderFooter, Item
from invoicegen.money import Amount, Percent
from invoicegen.options import Options
from invoicegen.services.totals import compute_document_totals, compute_item_totals
from invoicegen.styling.blocks import (
    address_block_height,
    compose_contact,
    compose_header_footer,
    compose_item_row,
    compose_metas,
    compose_notes,
    compose_totals,
)
from invoicegen.styling.geometry import NOTES_MAX_HEIGHT


def test_address_block_height():
    assert address_block_height(3, 10) == 40
    assert address_block_height(0, 10) == 10


def test_contact_with_logo(recording_canvas):
    c = Contact(name="Acme", logo=b"IMG-data", address=Address(address="1 Main St", country="FR"))
    b = compose_contact(c, recording_canvas, Options())

    assert b.logo_size == (160.0, 80.0)
    assert b.logo_offset == 83
    assert b.address_lines == ("1 Main St", "FR")
    assert b.height == 83 + address_block_height(2, 10) + 6


def test_contact_without_address(recording_canvas):
    b = compose_contact(Contact(name="Acme"), recording_canvas, Options())
    assert b.height == 10


def test_contact_with_broken_logo(recording_canvas):
    with pytest.raises(ImageDecodeError):
        compose_contact(Contact(name="Acme", logo=b"garbage"), recording_canvas, Options())


def test_item_row_height_follows_text(recording_canvas):
    opts = Options()
    plain = Item("Short name", unit_cost="1", quantity="1")
    row = compose_item_row(0, plain, compute_item_totals(plain), recording_canvas, opts)
    assert row.name_lines == ("Short name",)
    assert row.height == 8
    assert row.discount == ("--", "")

    taxed = Item("Short name", unit_cost="1", quantity="1", tax=Percent("20"))
    row = compose_item_row(0, taxed, compute_item_totals(taxed, taxed.tax), recording_canvas, opts)
    # two half-height lines in the tax column
    assert row.height == 15

    described = Item("Short name", unit_cost="1", quantity="1", description="word " * 40)
    row = compose_item_row(0, described, compute_item_totals(described), recording_canvas, opts)
    assert len(row.description_lines) == 3
    assert row.height == 8 + 3 * 7


def test_item_row_text_is_capped(recording_canvas):
    item = Item("name " * 200, unit_cost="1", quantity="1", description="desc " * 200)
    row = compose_item_row(0, item, compute_item_totals(item), recording_canvas, Options())
    assert len(row.name_lines) == 3
    assert len(row.description_lines) == 3


def test_item_row_cells_are_formatted(recording_canvas):
    item = Item("Widget", unit_cost="1234.5", quantity="2", discount=Amount("100"))
    row = compose_item_row(4, item, compute_item_totals(item), recording_canvas, Options())
    assert row.index == 4
    assert row.unit_cost == "€ 1 234.50"
    assert row.quantity == "2"
    assert row.total_without_tax == "€ 2 469.00"
    assert row.discount == ("€ 100.00", "-4.05 %")
    assert row.total_with_tax == "€ 2 369.00"


def test_totals_rows():
    items = [Item("a", unit_cost="100", quantity="1", tax=Percent("20"))]
    opts = Options()

    plain = compose_totals(compute_document_totals(items), opts)
    assert [r.label for r in plain.rows] == ["TOTAL NO TAX", "TAX", "TOTAL WITH TAX"]
    assert plain.height == 10 + 3 * 20

    discounted = compose_totals(compute_document_totals(items, discount=Percent("10")), opts)
    assert [r.label for r in discounted.rows] == ["TOTAL NO TAX", "TOTAL DISCOUNTED", "TAX", "TOTAL WITH TAX"]
    assert discounted.rows[1].detail == "-10 % / -€ 10.00"
    assert discounted.height == 10 + 3 * 20 + 25


def test_metas_skip_empty_version():
    assert compose_metas(Options(), "R1", "", "01/01/2024").lines == ("Ref.: R1", "Date: 01/01/2024")
    assert len(compose_metas(Options(), "R1", "2", "01/01/2024").lines) == 3


def test_notes_are_capped(recording_canvas):
    notes = compose_notes("line\n" * 100, recording_canvas, Options())
    assert notes.height <= NOTES_MAX_HEIGHT
    assert len(notes.lines) == int(NOTES_MAX_HEIGHT // 9)


def test_header_footer_page_label(recording_canvas):
    hf = HeaderFooter(text="Acme", pagination=True)
    b = compose_header_footer("footer", hf, recording_canvas, Options(), 2, 3)
    assert b.lines == ("Acme",)
    assert b.page_label == "2/3"

    b = compose_header_footer("header", HeaderFooter(text="Acme"), recording_canvas, Options(), 1, 3)
    assert b.page_label == ""


def test_header_footer_keeps_two_lines(recording_canvas, caplog):
    hf = HeaderFooter(text="one\ntwo\nthree\nfour")
    with caplog.at_level("DEBUG", logger="invoicegen.styling.blocks"):
        b = compose_header_footer("header", hf, recording_canvas, Options(), 1, 1)
    assert b.lines == ("one", "two")
    assert "keeping the first 2" in caplog.text


def test_metas_with_client_ref_and_validity_date():
    lines = compose_metas(Options(), "R1", "", "01/01/2024", client_ref="PO-9", validity_date="31/01/2024").lines
    assert lines == ("Ref.: R1", "Client ref.: PO-9", "Date: 01/01/2024", "Valid until: 31/01/2024")
