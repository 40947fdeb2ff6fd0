"""Composed map document and its SVG serialization."""

from typing import List, NamedTuple, Tuple
from dataclasses import dataclass, field

import svgwrite

from .primitives import (
    CirclePrimitive,
    ImagePrimitive,
    MarkerPrimitive,
    PolygonPrimitive,
    PolylinePrimitive,
    Primitive,
    RectanglePrimitive,
)


class Viewport(NamedTuple):
    """Rectangle of pixel space covered by a document."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def as_view_box(self) -> str:
        return f"{self.x!r} {self.y!r} {self.width!r} {self.height!r}"


@dataclass
class Document:
    """A map as an ordered list of drawing primitives.

    Primitives are painted in list order: later items are drawn on top.

    Attributes:
        viewport: The area of pixel space shown.
        primitives: Drawing primitives (tiles first, then shapes).
    """
    viewport: Viewport
    primitives: List[Primitive] = field(default_factory=list)

    def to_svg(self) -> str:
        """Serialize as a standalone SVG document."""
        drawing = svgwrite.Drawing(
            size=(self.viewport.width, self.viewport.height),
            viewBox=self.viewport.as_view_box(),
            profile="full",
            debug=False,
        )
        for primitive in self.primitives:
            drawing.add(_svg_element(drawing, primitive))
        return drawing.tostring()

    def to_png(self, scale: int = 1) -> bytes:
        """Rasterize to PNG bytes, ``scale`` pixels per document pixel."""
        from .rasterizer import rasterize
        return rasterize(self, scale)

    def __str__(self) -> str:
        return self.to_svg()


def _path_data(rings: Tuple[Tuple[Tuple[float, float], ...], ...]) -> str:
    parts = []
    for ring in rings:
        if not ring:
            continue
        head, *tail = ring
        parts.append(f"M {head[0]!r},{head[1]!r}")
        parts.extend(f"L {x!r},{y!r}" for x, y in tail)
        parts.append("Z")
    return " ".join(parts)


def _svg_element(drawing: svgwrite.Drawing, primitive: Primitive):
    if isinstance(primitive, ImagePrimitive):
        return drawing.image(
            href=primitive.href,
            insert=(primitive.x, primitive.y),
            size=(primitive.width, primitive.height),
        )

    if isinstance(primitive, PolylinePrimitive):
        return drawing.polyline(
            points=list(primitive.points),
            fill="none",
            stroke=primitive.stroke.to_css(),
            stroke_width=primitive.stroke_width,
            stroke_opacity=primitive.stroke_opacity,
            stroke_linejoin="round",
            stroke_linecap="round",
        )

    if isinstance(primitive, PolygonPrimitive):
        return drawing.path(
            d=_path_data(primitive.rings),
            fill=primitive.fill.to_css(),
            fill_opacity=primitive.fill_opacity,
            fill_rule="nonzero",
            stroke=primitive.stroke.to_css(),
            stroke_width=primitive.stroke_width,
            stroke_opacity=primitive.stroke_opacity,
        )

    if isinstance(primitive, RectanglePrimitive):
        return drawing.rect(
            insert=(primitive.x, primitive.y),
            size=(primitive.width, primitive.height),
            fill=primitive.fill.to_css(),
            fill_opacity=primitive.fill_opacity,
            stroke=primitive.stroke.to_css(),
            stroke_width=primitive.stroke_width,
            stroke_opacity=primitive.stroke_opacity,
        )

    if isinstance(primitive, CirclePrimitive):
        return drawing.circle(
            center=(primitive.cx, primitive.cy),
            r=primitive.r,
            fill=primitive.fill.to_css(),
            fill_opacity=primitive.fill_opacity,
            stroke=primitive.stroke.to_css(),
            stroke_width=primitive.stroke_width,
            stroke_opacity=primitive.stroke_opacity,
        )

    if isinstance(primitive, MarkerPrimitive):
        group = drawing.g(class_="marker", opacity=primitive.opacity)
        group.add(drawing.circle(
            center=(primitive.x, primitive.y),
            r=primitive.radius,
            fill=primitive.fill.to_css(),
            stroke="white",
            stroke_width=1,
        ))
        if primitive.label:
            group.add(drawing.text(
                primitive.label,
                insert=(primitive.x, primitive.y + primitive.radius / 2),
                text_anchor="middle",
                font_size=primitive.radius * 1.5,
                font_family="sans-serif",
                fill="white",
            ))
        if primitive.title:
            group.set_desc(title=primitive.title)
        return group

    raise TypeError(f"Unknown primitive type {type(primitive).__name__}")
