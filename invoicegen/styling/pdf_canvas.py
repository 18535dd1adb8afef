# invoicegen/styling/pdf_canvas.py
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from invoicegen.errors import ImageDecodeError
from invoicegen.styling.base import BOLD, RGB, Align, Box, FontSpec
from invoicegen.styling.geometry import LINE_HEIGHT_RATIO

log = logging.getLogger(__name__)


def _clean(s: str) -> str:
    return (s or "").replace("\u00a0", " ").replace("\x00", "")


def wrap_line(text: str, font: str, size: float, max_w: float) -> List[str]:
    """
    Greedy word wrap; words wider than the line are split by character.
    """
    words = text.split()
    lines: List[str] = []
    cur = ""

    for w in words:
        test = (cur + " " + w).strip()
        if stringWidth(test, font, size) <= max_w:
            cur = test
            continue

        if cur:
            lines.append(cur)
        if stringWidth(w, font, size) <= max_w:
            cur = w
        else:
            chunk = ""
            for ch in w:
                t2 = chunk + ch
                if stringWidth(t2, font, size) <= max_w:
                    chunk = t2
                else:
                    if chunk:
                        lines.append(chunk)
                    chunk = ch
            cur = chunk

    if cur:
        lines.append(cur)
    return lines


def register_ttf(face: str, path: Path | None) -> bool:
    if path is None:
        return False
    if not path.exists():
        log.warning("Font file %s not found, keeping the built-in font", path)
        return False
    pdfmetrics.registerFont(TTFont(face, str(path)))
    return True


class PdfCanvas:
    """
    reportlab canvas behind a top-left coordinate system. reportlab counts y from
    the bottom of the page; every public method here takes layout coordinates.
    """

    def __init__(self, page_size: Tuple[float, float] = A4):
        self.page_w, self.page_h = float(page_size[0]), float(page_size[1])
        self._buf = io.BytesIO()
        # invariant=1 drops the timestamp and random document id, so the same
        # input always serializes to the same bytes
        self._c = canvas.Canvas(self._buf, pagesize=(self.page_w, self.page_h), invariant=1)
        self._c.setCreator("invoicegen")

        self._families: Dict[str, Tuple[str, str]] = {"Helvetica": ("Helvetica", "Helvetica-Bold")}
        self._face = "Helvetica"
        self._size = 8.0
        self._color: RGB = (0, 0, 0)
        self._x = 0.0
        self._y = 0.0
        self.page_count = 1

    # =========================
    # Fonts / colors / cursor
    # =========================

    def register_font_family(self, family: str, regular: str, bold: str) -> None:
        self._families[family] = (regular, bold)

    def _resolve_face(self, family: str, weight: str) -> str:
        regular, bold = self._families.get(family, (family, family))
        return bold if weight == BOLD else regular

    def set_font(self, family: str, weight: str, size: float) -> None:
        self._face = self._resolve_face(family, weight)
        self._size = float(size)
        self._c.setFont(self._face, self._size)

    def set_color(self, rgb: RGB) -> None:
        self._color = tuple(rgb)  # type: ignore[assignment]
        r, g, b = self._color
        self._c.setFillColorRGB(r / 255.0, g / 255.0, b / 255.0)

    def set_cursor(self, x: float, y: float) -> None:
        self._x, self._y = float(x), float(y)

    def get_cursor(self) -> Tuple[float, float]:
        return self._x, self._y

    # =========================
    # Measurement
    # =========================

    def line_height(self, font: FontSpec) -> float:
        return float(font.size) * LINE_HEIGHT_RATIO

    def wrap_text(self, text: str, width: float, font: FontSpec) -> List[str]:
        return wrap_line_all(text, self._resolve_face(font.family, font.weight), font.size, width)

    # =========================
    # Drawing
    # =========================

    def _rl_y(self, y: float) -> float:
        return self.page_h - y

    def draw_rect(self, x1: float, y1: float, x2: float, y2: float, fill: RGB) -> None:
        r, g, b = fill
        self._c.setFillColorRGB(r / 255.0, g / 255.0, b / 255.0)
        self._c.rect(x1, self._rl_y(y2), x2 - x1, y2 - y1, stroke=0, fill=1)
        # fill color doubles as the text color in reportlab
        self.set_color(self._color)

    def _draw_line(self, x: float, baseline: float, w: float, text: str, align: Align) -> None:
        y = self._rl_y(baseline)
        if align == "right":
            self._c.drawRightString(x + w, y, text)
        elif align == "center":
            self._c.drawCentredString(x + w / 2.0, y, text)
        else:
            self._c.drawString(x, y, text)

    def draw_cell(self, box: Box, text: str, align: Align = "left", middle: bool = False) -> float:
        text = _clean(text)
        w = box.w if box.w > 0 else stringWidth(text, self._face, self._size)
        h = box.h if box.h > 0 else self._size * LINE_HEIGHT_RATIO

        if middle:
            baseline = box.y + h / 2.0 + self._size * 0.35
        else:
            baseline = box.y + self._size * 0.8

        self._draw_line(box.x, baseline, w, text, align)
        self.set_cursor(box.x + w, box.y)
        return h

    def draw_wrapped_text(self, box: Box, text: str, align: Align = "left") -> float:
        """
        Draws as many wrapped lines as fit in box.h (all of them when h <= 0) and
        returns the height used. Leaves the cursor under the last line.
        """
        lh = self._size * LINE_HEIGHT_RATIO
        used = 0.0

        for ln in wrap_line_all(text, self._face, self._size, box.w):
            if box.h > 0 and used + lh > box.h:
                break
            self._draw_line(box.x, box.y + used + self._size * 0.8, box.w, ln, align)
            used += lh

        self.set_cursor(box.x, box.y + used)
        return used

    def image_size(self, raw: bytes) -> Tuple[int, int]:
        try:
            iw, ih = ImageReader(io.BytesIO(raw)).getSize()
        except Exception as e:
            raise ImageDecodeError(f"Could not decode logo image: {e}") from e
        if not iw or not ih:
            raise ImageDecodeError(f"Logo image has an empty size ({iw}x{ih})")
        return int(iw), int(ih)

    def draw_image(self, box: Box, raw: bytes) -> None:
        try:
            img = ImageReader(io.BytesIO(raw))
            self._c.drawImage(
                img,
                box.x,
                self._rl_y(box.y + box.h),
                width=box.w,
                height=box.h,
                mask="auto",
            )
        except Exception as e:
            raise ImageDecodeError(f"Could not draw logo image: {e}") from e

    # =========================
    # Pages
    # =========================

    def new_page(self) -> None:
        self._c.showPage()
        self.page_count += 1
        # showPage resets the graphics state
        self._c.setFont(self._face, self._size)
        self.set_color(self._color)

    def serialize(self) -> bytes:
        self._c.save()
        return self._buf.getvalue()


def wrap_line_all(text: str, face: str, size: float, width: float) -> List[str]:
    """
    Wraps every paragraph of `text`; blank lines between paragraphs are kept as
    empty lines, trailing newlines are not.
    """
    text = _clean(text).replace("\r\n", "\n").replace("\r", "\n").rstrip()
    if not text:
        return []

    out: List[str] = []
    for raw in text.split("\n"):
        out.extend(wrap_line(raw, face, size, width) or [""])
    return out
