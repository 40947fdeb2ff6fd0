# SPDX-FileCopyrightText: 2022 - 2023 Peter Urban, Ghent University
#
# SPDX-License-Identifier: MPL-2.0

"""mapplot: plot locations, paths and shapes on maps.

Two exporters share the same shape values:
- ``mapplot.google``: an HTML page using the Google Maps JavaScript API
- ``mapplot.image``: SVG/PNG images built from slippy-map tiles

Example:
    from mapplot import BoundingBox, Color, Marker, Polyline
    from mapplot.google import GoogleMap
    from mapplot.image import ImageMap, XYZTilesetLoader

    track = Polyline([(52.0, 4.0), (52.05, 4.08), (52.1, 4.1)]).style(Color.RED)

    html = GoogleMap((52.05, 4.05), 11).draw(track).to_html()

    image = ImageMap.fetch(BoundingBox((52.0, 4.0), (52.1, 4.1)), 10, XYZTilesetLoader.from_preset("osm"))
    svg = image.draw(track).export_svg()
"""

# Python folders
from . import core
from . import coordinates
from . import style
from . import shapes
from . import errors
from . import config
from . import image
from . import google

from .coordinates import BoundingBox, Location
from .style import Color, PolygonStyle, PolylineStyle, StrokePosition
from .shapes import Circle, Marker, Polygon, Polyline, Rectangle, Shape
from .errors import (
    MapplotError,
    RenderError,
    TileRequestError,
    TilesetLoaderError,
    TileTransportError,
    UnexpectedMimeTypeError,
)
from .config import FetchConfig

__version__ = "0.3.0"
