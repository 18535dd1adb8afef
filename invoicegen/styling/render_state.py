# invoicegen/styling/render_state.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional

from invoicegen.styling.base import RGB, Canvas, FontSpec


class RenderState:
    """
    The font and text color currently set on the canvas. Anything that needs a
    different font or color for a sub-element goes through scoped(), which puts
    the previous values back however the block is left.
    """

    def __init__(self, canvas: Canvas, font: FontSpec, color: RGB):
        self.canvas = canvas
        self.font = font
        self.color = color
        self.reapply()

    def set_font(self, font: FontSpec) -> None:
        self.font = font
        self.canvas.set_font(font.family, font.weight, font.size)

    def set_color(self, color: RGB) -> None:
        self.color = tuple(color)  # type: ignore[assignment]
        self.canvas.set_color(self.color)

    def reapply(self) -> None:
        self.canvas.set_font(self.font.family, self.font.weight, self.font.size)
        self.canvas.set_color(self.color)

    @contextmanager
    def scoped(
        self,
        *,
        size: Optional[float] = None,
        weight: Optional[str] = None,
        family: Optional[str] = None,
        color: Optional[RGB] = None,
    ) -> Iterator["RenderState"]:
        saved_font, saved_color = self.font, self.color
        try:
            changes = {
                k: v for k, v in (("size", size), ("weight", weight), ("family", family)) if v is not None
            }
            if changes:
                self.set_font(replace(saved_font, **changes))
            if color is not None:
                self.set_color(color)
            yield self
        finally:
            if self.font != saved_font:
                self.set_font(saved_font)
            if self.color != saved_color:
                self.set_color(saved_color)
