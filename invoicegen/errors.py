# invoicegen/errors.py
from __future__ import annotations

from typing import List


class InvoiceError(Exception):
    """Base class for everything build() can raise."""


class ValidationError(InvoiceError, ValueError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid document")


class ComputationError(InvoiceError, ArithmeticError):
    pass


class ImageDecodeError(InvoiceError):
    pass
