# invoicegen/services/validation.py
"""
Field checks run by Document.build() before any layout work.

All problems are collected and raised together as one ValidationError so a
caller sees every missing field at once.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from invoicegen.errors import ValidationError
from invoicegen.models import DOC_TYPES, Contact

if TYPE_CHECKING:
    from invoicegen.document import Document


REF_MAX = 32
VERSION_MAX = 32
CLIENT_REF_MAX = 64
DESCRIPTION_MAX = 1024
CONTACT_NAME_MAX = 256


def _check_contact(errors: List[str], label: str, contact: Optional[Contact]) -> None:
    if contact is None:
        errors.append(f"{label} is required")
        return

    name = (contact.name or "").strip()
    if not name:
        errors.append(f"{label}.name is required")
    elif len(name) > CONTACT_NAME_MAX:
        errors.append(f"{label}.name is longer than {CONTACT_NAME_MAX} characters")

    if contact.address is not None and not (contact.address.address or "").strip():
        errors.append(f"{label}.address.address is required")


def validate_document(doc: "Document") -> None:
    errors: List[str] = []

    if doc.type not in DOC_TYPES:
        errors.append(f"type must be one of {', '.join(DOC_TYPES)} (got {doc.type!r})")

    ref = (doc.ref or "").strip()
    if not ref:
        errors.append("ref is required")
    elif len(ref) > REF_MAX:
        errors.append(f"ref is longer than {REF_MAX} characters")

    if len(doc.version or "") > VERSION_MAX:
        errors.append(f"version is longer than {VERSION_MAX} characters")
    if len(doc.client_ref or "") > CLIENT_REF_MAX:
        errors.append(f"client_ref is longer than {CLIENT_REF_MAX} characters")
    if len(doc.description or "") > DESCRIPTION_MAX:
        errors.append(f"description is longer than {DESCRIPTION_MAX} characters")

    _check_contact(errors, "company", doc.company)
    _check_contact(errors, "customer", doc.customer)

    for i, item in enumerate(doc.items):
        if not (item.name or "").strip():
            errors.append(f"items[{i}].name is required")

    if errors:
        raise ValidationError(errors)
