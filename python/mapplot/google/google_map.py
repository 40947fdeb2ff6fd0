"""GoogleMap: an HTML page drawing shapes with the Google Maps JavaScript API.

Example usage:
    from mapplot import Color, Marker, Polygon, Polyline
    from mapplot.google import GoogleMap, MapOptions, MapType

    gmap = GoogleMap((52.05, 4.05), 10, apikey="<your-apikey-here>",
                     options=MapOptions(map_type=MapType.HYBRID))
    gmap.draw(Marker((52.05, 4.05)).set_label("A"))
    gmap.draw(Polyline([(52.0, 4.0), (52.1, 4.1)]).style(Color.RED))

    Path("map.html").write_text(gmap.to_html())
"""

from typing import Iterable, List, Optional
from dataclasses import dataclass
from enum import Enum
import html
from urllib.parse import quote

from ..coordinates import Location, LocationLike, as_location
from ..shapes import SHAPE_TYPES, Circle, Marker, Polygon, Polyline, Rectangle, Shape
from ..style import PolygonStyle
from .javascript import JavaScriptObject, RawIdent

DEFAULT_MAP_IDENT = "__map"
DEFAULT_PAGE_TITLE = "Google Maps - mapplot"
MAPS_API_URL = "https://maps.googleapis.com/maps/api/js?libraries=visualization"


class MapType(Enum):
    """Initial map type of the page."""
    ROADMAP = "ROADMAP"  # normal street map
    SATELLITE = "SATELLITE"
    HYBRID = "HYBRID"  # major streets on satellite images
    TERRAIN = "TERRAIN"  # physical features such as terrain and vegetation

    def to_js(self) -> str:
        return f"google.maps.MapTypeId.{self.value}"


@dataclass(frozen=True)
class MapOptions:
    """Page and map options. Unset (None) options use the Google Maps defaults.

    Attributes:
        page_title: Title of the HTML page.
        map_type: Initial map type (Google default: roadmap).
        disable_default_gui: Hide all default UI buttons.
        disable_double_click_zoom: Disable zoom and center on double click.
    """
    page_title: Optional[str] = None
    map_type: Optional[MapType] = None
    disable_default_gui: Optional[bool] = None
    disable_double_click_zoom: Optional[bool] = None


# =========================================================================
# Shape serialization
# =========================================================================


def _common_entries(shape, editable: bool = True) -> list:
    entries = [("draggable", shape.draggable)]
    if editable:
        entries.append(("editable", shape.editable))
    entries += [("visible", shape.visible), ("zIndex", shape.z_index)]
    return entries


def _polygon_style_entries(style: PolygonStyle) -> list:
    return [
        ("fillColor", style.fill_color),
        ("fillOpacity", style.fill_opacity),
        ("strokePosition", style.stroke_position),
        ("strokeColor", style.stroke_color),
        ("strokeOpacity", style.stroke_opacity),
        ("strokeWeight", style.stroke_weight),
    ]


def shape_to_js(shape: Shape, map_ident: str = DEFAULT_MAP_IDENT) -> str:
    """The ``new google.maps.<Kind>({...})`` expression that draws ``shape``.

    Args:
        shape: Shape to serialize.
        map_ident: Name of the JavaScript variable holding the map.

    Raises:
        TypeError: If ``shape`` is not one of the supported shape types.
    """
    obj = JavaScriptObject().entry("map", RawIdent(map_ident))

    if isinstance(shape, Marker):
        kind = "Marker"
        obj.entry("position", shape.position)
        obj.entries([("label", shape.label), ("title", shape.title), ("opacity", shape.opacity)])
        # google.maps.Marker has no editable option
        obj.entries(_common_entries(shape, editable=False))
    elif isinstance(shape, Polyline):
        kind = "Polyline"
        style = shape.line_style
        obj.entry("path", list(shape.path))
        obj.entries([
            ("geodesic", shape.geodesic),
            ("strokeColor", style.stroke_color),
            ("strokeOpacity", style.stroke_opacity),
            ("strokeWeight", style.stroke_weight),
        ])
        obj.entries(_common_entries(shape))
    elif isinstance(shape, Polygon):
        kind = "Polygon"
        obj.entry("paths", [list(path) for path in shape.paths])
        obj.entry_opt("geodesic", shape.geodesic)
        obj.entries(_polygon_style_entries(shape.fill_style))
        obj.entries(_common_entries(shape))
    elif isinstance(shape, Rectangle):
        kind = "Rectangle"
        obj.entry("bounds", shape.bounds)
        obj.entries(_polygon_style_entries(shape.fill_style))
        obj.entries(_common_entries(shape))
    elif isinstance(shape, Circle):
        kind = "Circle"
        obj.entry("center", shape.center)
        obj.entry("radius", shape.radius)
        obj.entries(_polygon_style_entries(shape.fill_style))
        obj.entries(_common_entries(shape))
    else:
        raise TypeError(f"Cannot serialize {type(shape).__name__}; expected one of Marker, Polyline, Polygon, Rectangle, Circle")

    return f"new google.maps.{kind}({obj.finish()})"


# =========================================================================
# GoogleMap
# =========================================================================

_HTML_TEMPLATE = """
<html>
<head>
<meta name="viewport" content="initial-scale=1.0, user-scalable=no" />
<meta http-equiv="content-type" content="text/html; charset=UTF-8"/>
<title>{title}</title>
<script type="text/javascript" src="{script_url}"></script>
<script type="text/javascript">
\tfunction initialize() {{
{body}
\t}}
</script>
</head>
<body style="margin:0px; padding:0px;" onload="initialize()">
\t<div id="map_canvas" style="width: 100%; height: 100%;"></div>
</body>
</html>
"""


class GoogleMap:
    """A Google Maps page centered on a location, with shapes drawn on it.

    Shapes are drawn in the order they are added (later on top, unless a
    z-index says otherwise).
    """

    def __init__(
        self,
        center: LocationLike,
        zoom: int,
        apikey: Optional[str] = None,
        options: Optional[MapOptions] = None,
    ):
        """Initialize a GoogleMap.

        Args:
            center: Initial map center.
            zoom: Initial zoom level.
            apikey: Google Maps JavaScript API key. Without a key the page
                    loads the API in development mode.
            options: Page and map options.
        """
        self._center = as_location(center)
        self._zoom = int(zoom)
        self._apikey = apikey
        self._options = options if options is not None else MapOptions()
        self._shapes: List[Shape] = []

    @property
    def center(self) -> Location:
        return self._center

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def options(self) -> MapOptions:
        return self._options

    @property
    def shapes(self) -> tuple:
        return tuple(self._shapes)

    def draw(self, shape: Shape) -> "GoogleMap":
        """Draw a shape on the map.

        Returns:
            Self for method chaining.
        """
        if not isinstance(shape, SHAPE_TYPES):
            raise TypeError(f"Cannot draw {type(shape).__name__}")
        self._shapes.append(shape)
        return self

    def draw_all(self, shapes: Iterable[Shape]) -> "GoogleMap":
        """Draw multiple shapes at once."""
        for shape in shapes:
            self.draw(shape)
        return self

    @property
    def script_url(self) -> str:
        if self._apikey:
            return f"{MAPS_API_URL}&key={quote(self._apikey, safe='')}"
        return MAPS_API_URL

    def to_js(self, map_ident: str = DEFAULT_MAP_IDENT) -> str:
        """Body of the page's ``initialize()`` function: map creation and shapes."""
        options = (
            JavaScriptObject()
            .entry("center", self._center)
            .entry("zoom", self._zoom)
            .entry_opt("mapTypeId", self._options.map_type)
            .entry_opt("disableDefaultUI", self._options.disable_default_gui)
            .entry_opt("disableDoubleClickZoom", self._options.disable_double_click_zoom)
        )
        lines = [
            f'\t\tconst {map_ident} = new google.maps.Map(document.getElementById("map_canvas"), {options.finish()});',
            "",
        ]
        lines.extend(f"\t\t{shape_to_js(shape, map_ident)};" for shape in self._shapes)
        return "\n".join(lines)

    def to_html(self, map_ident: str = DEFAULT_MAP_IDENT) -> str:
        """The complete HTML page."""
        title = self._options.page_title if self._options.page_title is not None else DEFAULT_PAGE_TITLE
        return _HTML_TEMPLATE.format(
            title=html.escape(title),
            script_url=self.script_url,
            body=self.to_js(map_ident),
        )

    def __str__(self) -> str:
        return self.to_html()

    def __repr__(self) -> str:
        return f"GoogleMap(center={tuple(self._center)}, zoom={self._zoom}, shapes={len(self._shapes)})"
