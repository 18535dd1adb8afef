# scripts/render_sample_document.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pypdf import PdfReader

from invoicegen.config import get_settings
from invoicegen.document import Document
from invoicegen.models import INVOICE, Address, Contact, HeaderFooter, Item
from invoicegen.money import Amount, Percent
from invoicegen.services.document_json import document_from_json
from invoicegen.services.totals import totals_to_json


def sample_document() -> Document:
    doc = (
        Document(INVOICE)
        .set_ref("INV-0001")
        .set_version("1")
        .set_description(
            "This is a sample invoice description to help visually test wrapping and spacing. "
            "Add more words here to see how it breaks into lines."
        )
        .set_notes("Payment by bank transfer. Please quote the invoice reference.")
        .set_payment_term("30 days")
        .set_default_tax(Percent("20"))
        .set_discount(Percent("5"))
        .set_header(HeaderFooter(text="Sample Company Ltd.", pagination=True))
        .set_footer(HeaderFooter(text="Thank you for your business.", pagination=True))
        .set_company(
            Contact(
                name="Sample Company Ltd.",
                address=Address(address="1 Main Street", postal_code="75000", city="Paris", country="France"),
            )
        )
        .set_customer(
            Contact(
                name="Client Name",
                address=Address(address="Address", postal_code="XXX XXX", city="City"),
            )
        )
    )

    for i in range(25):
        doc.append_item(
            Item(
                name=f"Service line {i + 1}",
                description="Labour and materials",
                unit_cost="99.876",
                quantity="2",
                discount=Amount("10") if i % 5 == 0 else None,
            )
        )
    return doc


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    ap = argparse.ArgumentParser(description="Render an invoice/quotation/delivery note to PDF")
    ap.add_argument("input", nargs="?", help="Document JSON file (default: built-in sample)")
    ap.add_argument("-o", "--output", help="Output PDF path (default: <output dir>/<ref>.pdf)")
    args = ap.parse_args()

    if args.input:
        print("Input  :", Path(args.input).resolve())
        doc = document_from_json(json.loads(Path(args.input).read_text(encoding="utf-8")))
    else:
        print("Input  : (built-in sample)")
        doc = sample_document()

    out_path = Path(args.output) if args.output else settings.output_dir / f"{doc.ref or 'document'}.pdf"
    out_path.parent.mkdir(parents=True, exist_ok=True)

    out_bytes = doc.build()
    out_path.write_bytes(out_bytes)

    print("Output :", out_path.resolve())
    print("Pages  :", len(PdfReader(str(out_path)).pages))
    print("Totals :", json.dumps(totals_to_json(doc.totals()), indent=2))


if __name__ == "__main__":
    main()
