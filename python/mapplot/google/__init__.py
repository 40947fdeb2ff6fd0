"""Google Maps export: an HTML page drawing shapes with the Maps JavaScript API.

Example:
    from mapplot import Marker
    from mapplot.google import GoogleMap

    gmap = GoogleMap((52.05, 4.05), 10, apikey="<your-apikey-here>")
    gmap.draw(Marker((52.05, 4.05)))
    html = gmap.to_html()
"""

from .javascript import JavaScriptObject, RawIdent, to_js
from .google_map import DEFAULT_MAP_IDENT, GoogleMap, MapOptions, MapType, shape_to_js

__all__ = [
    "JavaScriptObject",
    "RawIdent",
    "to_js",
    "DEFAULT_MAP_IDENT",
    "GoogleMap",
    "MapOptions",
    "MapType",
    "shape_to_js",
]
