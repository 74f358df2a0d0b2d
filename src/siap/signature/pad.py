"""
Freehand signature capture.

A signature surface is a fixed-size raster (500x176 by default). Strokes are drawn
with a 3px round-capped, round-joined dark ink. The pad only "saves" (emits a PNG
data URI to its owner) when a gesture ends and the surface carries ink; `clear()`
always emits the empty artifact.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from PIL import Image, ImageColor, ImageDraw

from siap.core.imaging import EMPTY_ARTIFACT, encode_png_data_uri
from siap.signature.pointer import ClientRect, PointerMessage

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class SignatureCapture:
    """One signing surface fed by `begin`/`extend`/`end` and reset by `clear`."""

    def __init__(
        self,
        *,
        width: int = 500,
        height: int = 176,
        stroke_width: int = 3,
        ink_color: str = "#0f172a",
        on_save: Callable[[str], None] | None = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self._width = int(width)
        self._height = int(height)
        self._stroke_width = int(stroke_width)
        self._ink = (*ImageColor.getrgb(ink_color)[:3], 255)
        self._on_save = on_save
        self._image = self._blank()
        self._draw = ImageDraw.Draw(self._image)
        self._last: Point | None = None
        self._drawing = False
        self._has_ink = False
        self._artifact = EMPTY_ARTIFACT

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    @property
    def has_ink(self) -> bool:
        return self._has_ink

    @property
    def artifact(self) -> str:
        """Last saved PNG data URI, or `""` when nothing is saved."""
        return self._artifact

    def _blank(self) -> Image.Image:
        return Image.new("RGBA", (self._width, self._height), (0, 0, 0, 0))

    def _map(self, point: Point, rect: ClientRect | None) -> Point:
        if rect is None:
            return float(point[0]), float(point[1])
        return rect.to_raster(point[0], point[1], self._width, self._height)

    def _dot(self, p: Point) -> None:
        r = self._stroke_width / 2
        self._draw.ellipse((p[0] - r, p[1] - r, p[0] + r, p[1] + r), fill=self._ink)

    def begin(self, point: Point, rect: ClientRect | None = None) -> None:
        """Start a new stroke subpath at `point` (client coords when `rect` is given)."""
        self._last = self._map(point, rect)
        self._drawing = True

    def extend(self, point: Point, rect: ClientRect | None = None) -> None:
        """Draw a segment from the last sampled point; no-op without an active stroke."""
        if not self._drawing or self._last is None:
            return
        p = self._map(point, rect)
        self._draw.line([self._last, p], fill=self._ink, width=self._stroke_width, joint="curve")
        # Round caps at both ends double as round joins between segments.
        self._dot(self._last)
        self._dot(p)
        self._last = p
        self._has_ink = True

    def end(self) -> str | None:
        """Finish the stroke; returns (and emits) the PNG artifact when there is ink."""
        if not self._drawing:
            return None
        self._drawing = False
        self._last = None
        if not self._has_ink:
            return None
        self._artifact = encode_png_data_uri(self._image)
        if self._on_save is not None:
            self._on_save(self._artifact)
        return self._artifact

    def clear(self) -> None:
        """Erase all ink and tell the owner the signature is now empty."""
        self._image = self._blank()
        self._draw = ImageDraw.Draw(self._image)
        self._last = None
        self._drawing = False
        self._has_ink = False
        self._artifact = EMPTY_ARTIFACT
        if self._on_save is not None:
            self._on_save(EMPTY_ARTIFACT)

    def feed(self, messages: Iterable[PointerMessage], rect: ClientRect | None = None) -> str:
        """Replay a unified pointer stream; returns the current artifact."""
        for msg in messages:
            point = (msg.client_x, msg.client_y)
            if msg.kind == "begin":
                self.begin(point, rect)
            elif msg.kind == "move":
                self.extend(point, rect)
            elif msg.kind == "end":
                self.end()
            else:
                logger.debug("Ignoring pointer message %r", msg)
        return self._artifact
