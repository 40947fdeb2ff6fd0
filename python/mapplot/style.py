"""Colors and stroke/fill styles for map shapes.

Styles are immutable. Every setter returns a modified copy, so a style can be
shared between shapes without one shape changing another.
"""

from typing import Optional, Tuple
from dataclasses import dataclass, replace
from enum import Enum
import colorsys
import json


@dataclass(frozen=True)
class Color:
    """A color in one of the notations understood by Google Maps and SVG.

    Use the constructors (``Color.rgb``, ``Color.rgba``, ``Color.hsl``,
    ``Color.hsla``, ``Color.named``) or the named constants (``Color.RED``...).

    HSL components follow the 8 bit convention: hue in degrees (0-359),
    saturation, lightness and alpha in 0-255.
    """
    kind: str
    components: Tuple[int, ...] = ()
    name: Optional[str] = None

    # filled in below the class body
    NAMED = {}

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> "Color":
        return cls("rgb", (r, g, b))

    @classmethod
    def rgba(cls, r: int, g: int, b: int, a: int) -> "Color":
        return cls("rgba", (r, g, b, a))

    @classmethod
    def hsl(cls, h: int, s: int, l: int) -> "Color":
        return cls("hsl", (h, s, l))

    @classmethod
    def hsla(cls, h: int, s: int, l: int, a: int) -> "Color":
        return cls("hsla", (h, s, l, a))

    @classmethod
    def named(cls, name: str) -> "Color":
        """One of the 16 basic CSS color names (e.g. 'red', 'navy')."""
        key = name.lower()
        if key not in cls.NAMED:
            available = ", ".join(cls.NAMED)
            raise ValueError(f"Unknown color name '{name}'. Available: {available}")
        return cls("named", cls.NAMED[key], key)

    def to_css(self) -> str:
        """CSS notation, usable in SVG attributes and Google Maps options."""
        c = self.components
        if self.kind == "rgb":
            return "#{:02x}{:02x}{:02x}".format(*c)
        if self.kind == "rgba":
            return "#{:02x}{:02x}{:02x}{:02x}".format(*c)
        if self.kind == "hsl":
            return f"hsl({c[0]}, {_percent(c[1])}%, {_percent(c[2])}%)"
        if self.kind == "hsla":
            return f"hsla({c[0]}, {_percent(c[1])}%, {_percent(c[2])}%, {_percent(c[3])}%)"
        return self.name

    def to_rgba(self) -> Tuple[int, int, int, int]:
        """(r, g, b, a) tuple with 0-255 components, as used by Pillow."""
        c = self.components
        if self.kind in ("rgb", "named"):
            return (c[0], c[1], c[2], 255)
        if self.kind == "rgba":
            return (c[0], c[1], c[2], c[3])
        r, g, b = colorsys.hls_to_rgb((c[0] % 360) / 360.0, c[2] / 255.0, c[1] / 255.0)
        alpha = c[3] if self.kind == "hsla" else 255
        return (round(r * 255), round(g * 255), round(b * 255), alpha)

    def to_js(self) -> str:
        return json.dumps(self.to_css())

    def __str__(self) -> str:
        return self.to_css()


def _percent(value: int) -> float:
    return 100.0 * value / 255.0


Color.NAMED = {
    "black": (0, 0, 0),
    "silver": (192, 192, 192),
    "gray": (128, 128, 128),
    "white": (255, 255, 255),
    "maroon": (128, 0, 0),
    "red": (255, 0, 0),
    "purple": (128, 0, 128),
    "fuchsia": (255, 0, 255),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "olive": (128, 128, 0),
    "yellow": (255, 255, 0),
    "navy": (0, 0, 128),
    "blue": (0, 0, 255),
    "teal": (0, 128, 128),
    "aqua": (0, 255, 255),
}

for _name in Color.NAMED:
    setattr(Color, _name.upper(), Color.named(_name))
del _name


class StrokePosition(Enum):
    """Where a polygon's stroke lies relative to its path."""
    CENTER = "CENTER"
    INSIDE = "INSIDE"
    OUTSIDE = "OUTSIDE"

    def to_js(self) -> str:
        return f"google.maps.StrokePosition.{self.value}"


@dataclass(frozen=True)
class PolylineStyle:
    """Stroke style of a polyline.

    Attributes:
        stroke_color: The stroke color.
        stroke_opacity: The stroke opacity between 0.0 and 1.0.
        stroke_weight: The stroke width in pixels.
    """
    stroke_color: Optional[Color] = None
    stroke_opacity: Optional[float] = None
    stroke_weight: Optional[int] = None

    def color(self, value: Color) -> "PolylineStyle":
        return replace(self, stroke_color=value)

    def opacity(self, value: float) -> "PolylineStyle":
        return replace(self, stroke_opacity=value)

    def weight(self, value: int) -> "PolylineStyle":
        return replace(self, stroke_weight=value)

    @classmethod
    def coerce(cls, value) -> "PolylineStyle":
        """Accept a PolylineStyle or a bare Color."""
        if isinstance(value, Color):
            return cls(stroke_color=value)
        return value


@dataclass(frozen=True)
class PolygonStyle:
    """Fill and stroke style of polygons, rectangles and circles."""
    fill_color: Optional[Color] = None
    fill_opacity: Optional[float] = None
    stroke_position: Optional[StrokePosition] = None
    stroke_color: Optional[Color] = None
    stroke_opacity: Optional[float] = None
    stroke_weight: Optional[int] = None

    def color(self, value: Color) -> "PolygonStyle":
        """Set both fill and stroke color."""
        return replace(self, fill_color=value, stroke_color=value)

    def opacity(self, value: float) -> "PolygonStyle":
        """Set both fill and stroke opacity."""
        return replace(self, fill_opacity=value, stroke_opacity=value)

    def with_fill_color(self, value: Color) -> "PolygonStyle":
        return replace(self, fill_color=value)

    def with_fill_opacity(self, value: float) -> "PolygonStyle":
        return replace(self, fill_opacity=value)

    def with_stroke_position(self, value: StrokePosition) -> "PolygonStyle":
        return replace(self, stroke_position=value)

    def with_stroke_color(self, value: Color) -> "PolygonStyle":
        return replace(self, stroke_color=value)

    def with_stroke_opacity(self, value: float) -> "PolygonStyle":
        return replace(self, stroke_opacity=value)

    def with_stroke_weight(self, value: int) -> "PolygonStyle":
        return replace(self, stroke_weight=value)

    @classmethod
    def coerce(cls, value) -> "PolygonStyle":
        """Accept a PolygonStyle or a bare Color."""
        if isinstance(value, Color):
            return cls().color(value)
        return value
