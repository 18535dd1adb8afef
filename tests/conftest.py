# tests/conftest.py
from __future__ import annotations

from typing import List, Tuple

import pytest

from invoicegen.config import Settings
from invoicegen.document import Document
from invoicegen.errors import ImageDecodeError
from invoicegen.models import INVOICE, Address, Contact, Item
from invoicegen.styling.base import Box, FontSpec


class RecordingCanvas:
    """
    Canvas stand-in with fixed metrics: every character is half the font size
    wide and a line is exactly one font size tall. Draw calls are recorded
    together with the font and color that were active.
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.font = ("Helvetica", "", 8.0)
        self.color = (0, 0, 0)
        self.cursor = (0.0, 0.0)
        self.page_count = 1

    def set_cursor(self, x, y):
        self.cursor = (x, y)

    def get_cursor(self):
        return self.cursor

    def set_font(self, family, weight, size):
        self.font = (family, weight, float(size))

    def set_color(self, rgb):
        self.color = tuple(rgb)

    def draw_rect(self, x1, y1, x2, y2, fill):
        self.calls.append(("rect", self.page_count, x1, y1, x2, y2, tuple(fill)))

    def draw_cell(self, box: Box, text, align="left", middle=False):
        self.calls.append(("cell", self.page_count, box, text, align, self.font, self.color))
        return box.h

    def draw_wrapped_text(self, box: Box, text, align="left"):
        lines = self.wrap_text(text, box.w, FontSpec(*self.font))
        self.calls.append(("wrapped", self.page_count, box, tuple(lines)))
        return len(lines) * self.font[2]

    def wrap_text(self, text, width, font: FontSpec) -> List[str]:
        char_w = font.size / 2.0
        out: List[str] = []
        if not (text or "").strip():
            return out
        for para in (text or "").rstrip().split("\n"):
            if not para.strip():
                out.append("")
                continue
            cur = ""
            for w in para.split():
                test = (cur + " " + w).strip()
                if len(test) * char_w <= width or not cur:
                    cur = test
                else:
                    out.append(cur)
                    cur = w
            if cur:
                out.append(cur)
        return out

    def line_height(self, font: FontSpec) -> float:
        return float(font.size)

    def image_size(self, raw: bytes) -> Tuple[int, int]:
        if not raw.startswith(b"IMG"):
            raise ImageDecodeError("not an image")
        return 200, 100

    def draw_image(self, box: Box, raw: bytes):
        self.image_size(raw)
        self.calls.append(("image", self.page_count, box))

    def new_page(self):
        self.page_count += 1
        self.calls.append(("page", self.page_count))

    def serialize(self) -> bytes:
        return repr(self.calls).encode("utf-8")

    def texts(self) -> List[str]:
        return [c[3] for c in self.calls if c[0] == "cell"]


@pytest.fixture
def recording_canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(font_regular_path=None, font_bold_path=None, log_level="DEBUG", output_dir=tmp_path)


def make_document(item_count: int = 1, **item_kwargs) -> Document:
    doc = (
        Document(INVOICE)
        .set_ref("INV-001")
        .set_date("01/02/2024")
        .set_company(Contact(name="Acme SARL", address=Address(address="1 rue de Paris", postal_code="75001", city="Paris")))
        .set_customer(Contact(name="Client Co", address=Address(address="2 Main Street", country="UK")))
    )
    for i in range(item_count):
        kwargs = {"unit_cost": "100", "quantity": "1"}
        kwargs.update(item_kwargs)
        doc.append_item(Item(name=f"Item {i + 1}", **kwargs))
    return doc


@pytest.fixture
def document_factory():
    return make_document
