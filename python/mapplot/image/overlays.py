"""Rendering of map shapes into positioned primitives.

``render_shape`` projects the geographic geometry of a shape at a zoom level
and returns the primitive that draws it. Unset style attributes fall back to
the defaults below (black stroke, translucent black fill).
"""

from typing import Optional, Tuple

from ..shapes import Circle, Marker, Polygon, Polyline, Rectangle, Shape
from ..style import Color, PolygonStyle, PolylineStyle
from .primitives import (
    CirclePrimitive,
    MarkerPrimitive,
    PolygonPrimitive,
    PolylinePrimitive,
    Primitive,
    RectanglePrimitive,
)
from .projection import meters_per_pixel, project, project_path

DEFAULT_STROKE_COLOR = Color.BLACK
DEFAULT_STROKE_WEIGHT = 2
DEFAULT_STROKE_OPACITY = 1.0
DEFAULT_FILL_COLOR = Color.BLACK
DEFAULT_FILL_OPACITY = 0.3
DEFAULT_MARKER_COLOR = Color.rgb(0xea, 0x43, 0x35)
MARKER_RADIUS = 6.0


def _color(color: Optional[Color], default: Color) -> Color:
    return color if color is not None else default


def _or(value, default):
    return value if value is not None else default


def _projected(path, zoom: int) -> Tuple[Tuple[float, float], ...]:
    return tuple((float(x), float(y)) for x, y in project_path(path, zoom))


def _stroke(style) -> dict:
    return dict(
        stroke=_color(style.stroke_color, DEFAULT_STROKE_COLOR),
        stroke_width=float(_or(style.stroke_weight, DEFAULT_STROKE_WEIGHT)),
        stroke_opacity=float(_or(style.stroke_opacity, DEFAULT_STROKE_OPACITY)),
    )


def _fill(style: PolygonStyle) -> dict:
    return dict(
        fill=_color(style.fill_color, DEFAULT_FILL_COLOR),
        fill_opacity=float(_or(style.fill_opacity, DEFAULT_FILL_OPACITY)),
    )


def render_polyline(line: Polyline, zoom: int) -> PolylinePrimitive:
    style: PolylineStyle = line.line_style
    return PolylinePrimitive(points=_projected(line.path, zoom), **_stroke(style))


def render_polygon(polygon: Polygon, zoom: int) -> PolygonPrimitive:
    rings = tuple(_projected(path, zoom) for path in polygon.paths)
    style = polygon.fill_style
    return PolygonPrimitive(rings=rings, **_fill(style), **_stroke(style))


def render_rectangle(rectangle: Rectangle, zoom: int) -> RectanglePrimitive:
    p1 = project(rectangle.bounds.p1, zoom)
    p2 = project(rectangle.bounds.p2, zoom)
    style = rectangle.fill_style
    return RectanglePrimitive(
        x=min(p1.x, p2.x),
        y=min(p1.y, p2.y),
        width=abs(p2.x - p1.x),
        height=abs(p2.y - p1.y),
        **_fill(style),
        **_stroke(style),
    )


def render_circle(circle: Circle, zoom: int) -> CirclePrimitive:
    center = project(circle.center, zoom)
    radius = circle.radius / meters_per_pixel(circle.center.lat, zoom)
    style = circle.fill_style
    return CirclePrimitive(
        cx=center.x,
        cy=center.y,
        r=radius,
        **_fill(style),
        **_stroke(style),
    )


def render_marker(marker: Marker, zoom: int) -> MarkerPrimitive:
    position = project(marker.position, zoom)
    return MarkerPrimitive(
        x=position.x,
        y=position.y,
        radius=MARKER_RADIUS,
        fill=DEFAULT_MARKER_COLOR,
        opacity=float(_or(marker.opacity, 1.0)),
        label=marker.label,
        title=marker.title,
    )


def render_shape(shape: Shape, zoom: int) -> Primitive:
    """Project a shape at a zoom level and return its drawing primitive.

    Raises:
        TypeError: If ``shape`` is not one of the supported shape types.
    """
    if isinstance(shape, Polyline):
        return render_polyline(shape, zoom)
    if isinstance(shape, Polygon):
        return render_polygon(shape, zoom)
    if isinstance(shape, Rectangle):
        return render_rectangle(shape, zoom)
    if isinstance(shape, Circle):
        return render_circle(shape, zoom)
    if isinstance(shape, Marker):
        return render_marker(shape, zoom)
    raise TypeError(f"Cannot render {type(shape).__name__}; expected one of Marker, Polyline, Polygon, Rectangle, Circle")
