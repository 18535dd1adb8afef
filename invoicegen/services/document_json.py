# invoicegen/services/document_json.py
from __future__ import annotations

import base64
import binascii
from typing import Any, Optional

from invoicegen.document import Document
from invoicegen.errors import ValidationError
from invoicegen.models import Address, Contact, HeaderFooter, Item
from invoicegen.money import Adjustment, adjustment_from_fields, adjustment_to_fields
from invoicegen.options import Options

ADDRESS_FIELDS = (
    "address",
    "address_2",
    "postal_code",
    "city",
    "country",
    "business_id",
    "tax_id",
    "vat",
    "iban",
    "bank_name",
)

TEXT_FIELDS = (
    "ref",
    "version",
    "client_ref",
    "description",
    "notes",
    "date",
    "validity_date",
    "payment_term",
)


def _s(v: Any) -> str:
    return "" if v is None else str(v)


def _adjustment_or_none(j: Any, field: str) -> Optional[Adjustment]:
    if not j:
        return None
    return adjustment_from_fields(j.get("percent"), j.get("amount"), field=field)


def _logo_from_json(v: Any, field: str) -> Optional[bytes]:
    if not v:
        return None
    try:
        return base64.b64decode(str(v), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError([f"{field}: logo is not valid base64"]) from None


def _address_from_json(j: Any) -> Optional[Address]:
    if not j:
        return None
    return Address(**{k: _s(j.get(k)) for k in ADDRESS_FIELDS})


def _contact_from_json(j: Any, field: str) -> Optional[Contact]:
    if not j:
        return None
    return Contact(
        name=_s(j.get("name")),
        logo=_logo_from_json(j.get("logo"), field),
        address=_address_from_json(j.get("address")),
    )


def _header_footer_from_json(j: Any) -> Optional[HeaderFooter]:
    if not j:
        return None
    hf = HeaderFooter(text=_s(j.get("text")), pagination=bool(j.get("pagination")))
    if j.get("font_size"):
        hf.font_size = float(j["font_size"])
    return hf


def document_from_json(j: dict) -> Document:
    """
    Build a Document from the snake_case JSON shape used by the API and the CLI.
    Adjustments are {"percent": "..."} or {"amount": "..."}; logos are base64.
    """
    doc = Document(_s(j.get("type")), Options.from_dict(j.get("options")))  # type: ignore[arg-type]

    for name in TEXT_FIELDS:
        setattr(doc, name, _s(j.get(name)))

    doc.set_company(_contact_from_json(j.get("company"), "company"))  # type: ignore[arg-type]
    doc.set_customer(_contact_from_json(j.get("customer"), "customer"))  # type: ignore[arg-type]
    doc.set_header(_header_footer_from_json(j.get("header")))
    doc.set_footer(_header_footer_from_json(j.get("footer")))
    doc.set_discount(_adjustment_or_none(j.get("discount"), "discount"))
    doc.set_default_tax(_adjustment_or_none(j.get("default_tax"), "default_tax"))

    for i, x in enumerate(j.get("items") or []):
        doc.append_item(
            Item(
                name=_s(x.get("name")),
                description=_s(x.get("description")),
                unit_cost=_s(x.get("unit_cost")) or "0",
                quantity=_s(x.get("quantity")) or "0",
                tax=_adjustment_or_none(x.get("tax"), f"items[{i}].tax"),
                discount=_adjustment_or_none(x.get("discount"), f"items[{i}].discount"),
            )
        )

    return doc


def _contact_to_json(c: Optional[Contact]) -> Optional[dict]:
    if c is None:
        return None
    out: dict = {"name": c.name}
    if c.logo:
        out["logo"] = base64.b64encode(c.logo).decode("ascii")
    if c.address is not None:
        out["address"] = {k: getattr(c.address, k) for k in ADDRESS_FIELDS if getattr(c.address, k)}
    return out


def _header_footer_to_json(hf: Optional[HeaderFooter]) -> Optional[dict]:
    if hf is None:
        return None
    return {"text": hf.text, "font_size": hf.font_size, "pagination": hf.pagination}


def document_to_json(doc: Document) -> dict:
    out: dict = {"type": doc.type}
    for name in TEXT_FIELDS:
        v = getattr(doc, name)
        if v:
            out[name] = v

    out["company"] = _contact_to_json(doc.company)
    out["customer"] = _contact_to_json(doc.customer)
    out["items"] = [
        {
            "name": it.name,
            "description": it.description,
            "unit_cost": it.unit_cost,
            "quantity": it.quantity,
            "tax": adjustment_to_fields(it.tax) if it.tax is not None else None,
            "discount": adjustment_to_fields(it.discount) if it.discount is not None else None,
        }
        for it in doc.items
    ]
    out["discount"] = adjustment_to_fields(doc.discount) if doc.discount is not None else None
    out["default_tax"] = adjustment_to_fields(doc.default_tax) if doc.default_tax is not None else None
    out["header"] = _header_footer_to_json(doc.header)
    out["footer"] = _header_footer_to_json(doc.footer)
    out["options"] = doc.options.to_dict()
    return out
