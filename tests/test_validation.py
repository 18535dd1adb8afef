# tests/test_validation.py
from __future__ import annotations

import pytest

from invoicegen.document import Document
from invoicegen.errors import InvoiceError, ValidationError
from invoicegen.models import QUOTATION, Address, Contact, Item


def test_address_lines_skip_empty_fields():
    a = Address(address="1 Main St", postal_code="75001", city="Paris", country="France", vat="FR123")
    assert a.lines() == ["1 Main St", "75001 Paris", "France", "FR123"]


def test_address_city_needs_postal_code():
    assert Address(address="1 Main St", city="Paris").lines() == ["1 Main St"]


def test_valid_document_passes(document_factory):
    document_factory().validate()


def test_all_problems_are_reported_together():
    doc = Document("RECEIPT").append_item(Item(name=""))  # type: ignore[arg-type]
    with pytest.raises(ValidationError) as exc:
        doc.validate()

    errors = exc.value.errors
    assert any(e.startswith("type must be one of") for e in errors)
    assert "ref is required" in errors
    assert "company is required" in errors
    assert "customer is required" in errors
    assert "items[0].name is required" in errors
    assert isinstance(exc.value, ValueError)
    assert isinstance(exc.value, InvoiceError)


@pytest.mark.parametrize(
    "attr, value, message",
    [
        ("ref", "R" * 33, "ref is longer than 32 characters"),
        ("version", "v" * 33, "version is longer than 32 characters"),
        ("client_ref", "c" * 65, "client_ref is longer than 64 characters"),
        ("description", "d" * 1025, "description is longer than 1024 characters"),
    ],
)
def test_length_limits(document_factory, attr, value, message):
    doc = document_factory()
    setattr(doc, attr, value)
    with pytest.raises(ValidationError) as exc:
        doc.validate()
    assert exc.value.errors == [message]


def test_contact_rules(document_factory):
    doc = document_factory()
    doc.set_company(Contact(name="", address=Address(address="1 Main St")))
    doc.set_customer(Contact(name="x" * 257, address=Address(address="")))

    with pytest.raises(ValidationError) as exc:
        doc.validate()
    assert exc.value.errors == [
        "company.name is required",
        "customer.name is longer than 256 characters",
        "customer.address.address is required",
    ]


def test_contact_without_address_is_allowed(document_factory):
    doc = document_factory()
    doc.set_customer(Contact(name="Walk-in"))
    doc.validate()


def test_build_validates_before_rendering(document_factory, monkeypatch):
    doc = document_factory()
    doc.set_ref("")

    def fail(*args, **kwargs):
        raise AssertionError("canvas must not be created for an invalid document")

    monkeypatch.setattr("invoicegen.document.create_pdf_canvas", fail)
    with pytest.raises(ValidationError):
        doc.build()


def test_quotation_type_is_accepted(document_factory):
    doc = document_factory()
    doc.type = QUOTATION
    doc.validate()
