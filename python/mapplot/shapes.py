"""Shapes that can be drawn on a map.

The set of shapes is closed: ``Marker``, ``Polyline``, ``Polygon``,
``Rectangle`` and ``Circle``. Both exporters dispatch over this set
(``mapplot.google.google_map.shape_to_js`` and
``mapplot.image.overlays.render_shape``).

Shapes are immutable values. Builder methods return a modified copy:

    line = Polyline([(52.0, 4.0), (52.1, 4.1)]).style(Color.RED).set_z_index(2)
"""

from typing import Iterable, Optional, Tuple, Union
from dataclasses import dataclass, field, replace

from .coordinates import BoundingBox, Location, LocationLike, as_location, as_path
from .style import Color, PolygonStyle, PolylineStyle


def _is_point(value) -> bool:
    if isinstance(value, Location):
        return True
    try:
        return len(value) == 2 and isinstance(value[0], (int, float))
    except TypeError:
        return False


class _CommonOptions:
    """Builder methods shared by all shapes.

    Subclasses are frozen dataclasses declaring ``draggable``, ``editable``,
    ``visible`` and ``z_index`` fields.
    """

    def set_draggable(self, value: bool = True):
        """If True, the user can drag this shape over the map."""
        return replace(self, draggable=value)

    def set_editable(self, value: bool = True):
        """If True, the user can edit this shape by dragging its control points."""
        return replace(self, editable=value)

    def set_visible(self, value: bool = True):
        """Whether this shape is visible on the map. Defaults to True."""
        return replace(self, visible=value)

    def set_z_index(self, value: int):
        """The z-index compared to other shapes (higher = on top)."""
        return replace(self, z_index=value)

    @property
    def is_visible(self) -> bool:
        return self.visible is None or bool(self.visible)

    @property
    def draw_order(self) -> int:
        return self.z_index if self.z_index is not None else 0


@dataclass(frozen=True)
class Marker(_CommonOptions):
    """A marker identifying a single location.

    Attributes:
        position: Marker position.
        label: Short text shown inside the marker.
        title: Rollover text.
        opacity: Opacity between 0.0 and 1.0.
    """
    position: Location
    label: Optional[str] = None
    title: Optional[str] = None
    opacity: Optional[float] = None
    draggable: Optional[bool] = None
    editable: Optional[bool] = None
    visible: Optional[bool] = None
    z_index: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "position", as_location(self.position))

    def set_label(self, value: str) -> "Marker":
        return replace(self, label=value)

    def set_title(self, value: str) -> "Marker":
        return replace(self, title=value)

    def set_opacity(self, value: float) -> "Marker":
        return replace(self, opacity=value)


@dataclass(frozen=True)
class Polyline(_CommonOptions):
    """A linear overlay of connected line segments.

    Attributes:
        path: Ordered vertices. Order is the drawn shape of the line.
        geodesic: Google Maps only: follow the curvature of the Earth.
        line_style: Stroke style.
    """
    path: Tuple[Location, ...]
    geodesic: Optional[bool] = None
    line_style: PolylineStyle = field(default_factory=PolylineStyle)
    draggable: Optional[bool] = None
    editable: Optional[bool] = None
    visible: Optional[bool] = None
    z_index: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "path", as_path(self.path))

    def set_geodesic(self, value: bool = True) -> "Polyline":
        return replace(self, geodesic=value)

    def style(self, value: Union[PolylineStyle, Color]) -> "Polyline":
        """Set a style (or just a stroke color) for this line."""
        return replace(self, line_style=PolylineStyle.coerce(value))


@dataclass(frozen=True)
class Polygon(_CommonOptions):
    """A closed, filled region bounded by one outer and optional inner paths.

    Inner paths that wind in the opposite direction to the outer path form
    holes (non-zero winding rule).

    Attributes:
        paths: Outer path first, then inner paths. A single flat list of
            ``(lat, lon)`` pairs is accepted as the outer path.
    """
    paths: Tuple[Tuple[Location, ...], ...]
    geodesic: Optional[bool] = None
    fill_style: PolygonStyle = field(default_factory=PolygonStyle)
    draggable: Optional[bool] = None
    editable: Optional[bool] = None
    visible: Optional[bool] = None
    z_index: Optional[int] = None

    def __post_init__(self):
        paths = tuple(self.paths)
        # a single flat path: Polygon([(lat, lon), ...])
        if not paths or _is_point(paths[0]):
            paths = (paths,)
        object.__setattr__(self, "paths", tuple(as_path(p) for p in paths))

    @property
    def outer(self) -> Tuple[Location, ...]:
        return self.paths[0]

    def path(self, points: Iterable[LocationLike]) -> "Polygon":
        """Add another (typically inner) path to the polygon."""
        return replace(self, paths=self.paths + (as_path(points),))

    def set_geodesic(self, value: bool = True) -> "Polygon":
        return replace(self, geodesic=value)

    def style(self, value: Union[PolygonStyle, Color]) -> "Polygon":
        return replace(self, fill_style=PolygonStyle.coerce(value))


@dataclass(frozen=True)
class Rectangle(_CommonOptions):
    """An axis-aligned rectangle spanned by any two opposite corners."""
    bounds: BoundingBox
    fill_style: PolygonStyle = field(default_factory=PolygonStyle)
    draggable: Optional[bool] = None
    editable: Optional[bool] = None
    visible: Optional[bool] = None
    z_index: Optional[int] = None

    @classmethod
    def from_corners(cls, p1: LocationLike, p2: LocationLike) -> "Rectangle":
        return cls(BoundingBox(p1, p2))

    def style(self, value: Union[PolygonStyle, Color]) -> "Rectangle":
        return replace(self, fill_style=PolygonStyle.coerce(value))


@dataclass(frozen=True)
class Circle(_CommonOptions):
    """A circle on the Earth's surface.

    Attributes:
        center: Circle center.
        radius: Radius in meters on the Earth's surface.
    """
    center: Location
    radius: float
    fill_style: PolygonStyle = field(default_factory=PolygonStyle)
    draggable: Optional[bool] = None
    editable: Optional[bool] = None
    visible: Optional[bool] = None
    z_index: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "center", as_location(self.center))
        if self.radius < 0:
            raise ValueError(f"Circle radius must be >= 0, got {self.radius}")

    def style(self, value: Union[PolygonStyle, Color]) -> "Circle":
        return replace(self, fill_style=PolygonStyle.coerce(value))


Shape = Union[Marker, Polyline, Polygon, Rectangle, Circle]
SHAPE_TYPES = (Marker, Polyline, Polygon, Rectangle, Circle)
