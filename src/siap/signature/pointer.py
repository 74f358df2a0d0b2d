"""
Unified pointer stream for signature surfaces.

Browsers deliver mouse and touch input with different event shapes. The adapters
here turn both into one stream of `begin`/`move`/`end` messages so the signature
pad never sees device particulars.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Literal, Mapping

PointerKind = Literal["begin", "move", "end"]

_MOUSE_KINDS: dict[str, PointerKind] = {
    "mousedown": "begin",
    "mousemove": "move",
    "mouseup": "end",
    "mouseleave": "end",
}

_TOUCH_KINDS: dict[str, PointerKind] = {
    "touchstart": "begin",
    "touchmove": "move",
    "touchend": "end",
    "touchcancel": "end",
}


@dataclass(frozen=True)
class PointerMessage:
    kind: PointerKind
    client_x: float = 0.0
    client_y: float = 0.0


@dataclass(frozen=True)
class ClientRect:
    """On-screen box of the signature surface, in client coordinates."""

    left: float
    top: float
    width: float
    height: float

    def to_raster(self, client_x: float, client_y: float, raster_width: int, raster_height: int) -> tuple[float, float]:
        """Map a client point into raster space (handles CSS scaling and pixel density)."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError("ClientRect must have a positive size")
        scale_x = raster_width / self.width
        scale_y = raster_height / self.height
        return (client_x - self.left) * scale_x, (client_y - self.top) * scale_y


def from_mouse_events(events: Iterable[Mapping[str, Any]]) -> Iterator[PointerMessage]:
    """Translate `{type, clientX, clientY}` mouse events into pointer messages."""
    for event in events:
        kind = _MOUSE_KINDS.get(str(event.get("type")))
        if kind is None:
            continue
        yield PointerMessage(
            kind=kind,
            client_x=float(event.get("clientX", 0.0)),
            client_y=float(event.get("clientY", 0.0)),
        )


def from_touch_events(events: Iterable[Mapping[str, Any]]) -> Iterator[PointerMessage]:
    """Translate touch events (first entry of `touches`) into pointer messages."""
    for event in events:
        kind = _TOUCH_KINDS.get(str(event.get("type")))
        if kind is None:
            continue
        if kind == "end":
            # `touches` is empty once the finger lifts.
            yield PointerMessage(kind="end")
            continue
        touches = event.get("touches") or []
        if not touches:
            continue
        first = touches[0]
        yield PointerMessage(
            kind=kind,
            client_x=float(first.get("clientX", 0.0)),
            client_y=float(first.get("clientY", 0.0)),
        )
