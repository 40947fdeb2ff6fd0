"""Positioned drawing primitives of a composed map document.

All coordinates are in the global pixel space of the document's zoom level
(see ``mapplot.image.projection``). Colors are ``mapplot.style.Color`` values and
opacities floats in [0, 1].
"""

from typing import Optional, Tuple, Union
from dataclasses import dataclass
import base64

from ..style import Color

Point = Tuple[float, float]


@dataclass(frozen=True)
class ImagePrimitive:
    """An encoded raster image (a map tile) placed at (x, y)."""
    x: float
    y: float
    width: float
    height: float
    data: bytes
    mime_type: str

    @property
    def href(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass(frozen=True)
class PolylinePrimitive:
    """An open line through ``points`` (no fill)."""
    points: Tuple[Point, ...]
    stroke: Color
    stroke_width: float
    stroke_opacity: float = 1.0


@dataclass(frozen=True)
class PolygonPrimitive:
    """A filled region made of closed rings, filled with the non-zero rule."""
    rings: Tuple[Tuple[Point, ...], ...]
    fill: Color
    fill_opacity: float
    stroke: Color
    stroke_width: float
    stroke_opacity: float = 1.0


@dataclass(frozen=True)
class RectanglePrimitive:
    x: float
    y: float
    width: float
    height: float
    fill: Color
    fill_opacity: float
    stroke: Color
    stroke_width: float
    stroke_opacity: float = 1.0


@dataclass(frozen=True)
class CirclePrimitive:
    cx: float
    cy: float
    r: float
    fill: Color
    fill_opacity: float
    stroke: Color
    stroke_width: float
    stroke_opacity: float = 1.0


@dataclass(frozen=True)
class MarkerPrimitive:
    """A pin drawn as a dot with an optional one-line label."""
    x: float
    y: float
    radius: float
    fill: Color
    opacity: float = 1.0
    label: Optional[str] = None
    title: Optional[str] = None


Primitive = Union[
    ImagePrimitive,
    PolylinePrimitive,
    PolygonPrimitive,
    RectanglePrimitive,
    CirclePrimitive,
    MarkerPrimitive,
]
