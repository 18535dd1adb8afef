# invoicegen/styling/base.py

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Protocol, Tuple

RGB = Tuple[int, int, int]
Align = Literal["left", "center", "right"]

BOLD = "B"
REGULAR = ""


@dataclass(frozen=True)
class Box:
    """Top-left anchored box; y grows downwards like the layout cursor."""

    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class FontSpec:
    family: str
    weight: str = REGULAR
    size: float = 8


class Canvas(Protocol):
    """
    What the layout engine and the renderer need from a drawing surface.
    Coordinates are in points from the top-left corner of the current page.
    """

    def set_cursor(self, x: float, y: float) -> None:
        ...

    def get_cursor(self) -> Tuple[float, float]:
        ...

    def set_font(self, family: str, weight: str, size: float) -> None:
        ...

    def set_color(self, rgb: RGB) -> None:
        ...

    def draw_rect(self, x1: float, y1: float, x2: float, y2: float, fill: RGB) -> None:
        ...

    def draw_cell(self, box: Box, text: str, align: Align = "left", middle: bool = False) -> float:
        ...

    def draw_wrapped_text(self, box: Box, text: str, align: Align = "left") -> float:
        ...

    def wrap_text(self, text: str, width: float, font: FontSpec) -> List[str]:
        ...

    def line_height(self, font: FontSpec) -> float:
        ...

    def image_size(self, raw: bytes) -> Tuple[int, int]:
        ...

    def draw_image(self, box: Box, raw: bytes) -> None:
        ...

    def new_page(self) -> None:
        ...

    def serialize(self) -> bytes:
        ...
