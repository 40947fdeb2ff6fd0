"""Pillow rasterizer for composed map documents.

Tiles are alpha composited straight onto the canvas. Every other primitive is
drawn on its own transparent layer, cropped to the primitive's pixel extent,
which is then alpha composited onto the canvas, so opacities blend the same way
they do in the SVG output. Polygon rings are combined with the even-odd rule,
which gives the same result as non-zero filling for outer rings with nested
holes.
"""

from typing import Iterable, Optional, Tuple
import io
import math

from PIL import Image, ImageChops, ImageDraw, ImageFont

from ..errors import RenderError
from ..style import Color
from .document import Document, Viewport
from .primitives import (
    CirclePrimitive,
    ImagePrimitive,
    MarkerPrimitive,
    PolygonPrimitive,
    PolylinePrimitive,
    Primitive,
    RectanglePrimitive,
)

MARKER_OUTLINE = Color.WHITE
# extra pixels around a shape layer for anti-aliasing and rounding
LAYER_MARGIN = 2

Box = Tuple[int, int, int, int]


def raster_size(viewport: Viewport, scale: int = 1) -> Tuple[int, int]:
    """Pixel size of the raster image of a viewport.

    Partial pixels are rounded up; the result is at least 1x1.
    """
    width = math.ceil(round(viewport.width * scale, 6))
    height = math.ceil(round(viewport.height * scale, 6))
    return max(1, width), max(1, height)


def rasterize(document: Document, scale: int = 1) -> bytes:
    """Render a document into PNG bytes.

    Args:
        document: The composed map.
        scale: Output pixels per document pixel (1 or more).

    Returns:
        The encoded PNG image.

    Raises:
        ValueError: If ``scale`` is smaller than 1.
        RenderError: If a tile cannot be decoded or the image cannot be drawn.
    """
    if int(scale) != scale or scale < 1:
        raise ValueError(f"scale must be a positive integer, got {scale!r}")
    scale = int(scale)

    try:
        canvas = _render(document, scale)
        buffer = io.BytesIO()
        canvas.save(buffer, format="PNG")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise RenderError(f"Failed to rasterize document: {e}") from e
    return buffer.getvalue()


def _render(document: Document, scale: int) -> Image.Image:
    viewport = document.viewport
    canvas = Image.new("RGBA", raster_size(viewport, scale), (0, 0, 0, 0))

    def to_px(x: float, y: float) -> Tuple[float, float]:
        return ((x - viewport.x) * scale, (y - viewport.y) * scale)

    for primitive in document.primitives:
        if isinstance(primitive, ImagePrimitive):
            _composite_image(canvas, primitive, to_px, scale)
        else:
            _composite_shape(canvas, primitive, to_px, scale)
    return canvas


def _composite_image(canvas: Image.Image, primitive: ImagePrimitive, to_px, scale: int):
    with Image.open(io.BytesIO(primitive.data)) as source:
        tile = source.convert("RGBA")
    size = (max(1, round(primitive.width * scale)), max(1, round(primitive.height * scale)))
    x, y = (round(v) for v in to_px(primitive.x, primitive.y))
    if x >= canvas.width or y >= canvas.height or x + size[0] <= 0 or y + size[1] <= 0:
        return

    if tile.size != size:
        tile = tile.resize(size, Image.Resampling.BILINEAR)
    # alpha_composite only takes non-negative offsets; crop the tile instead
    canvas.alpha_composite(tile, dest=(max(0, x), max(0, y)), source=(max(0, -x), max(0, -y)))


def _composite_shape(canvas: Image.Image, primitive: Primitive, to_px, scale: int):
    box = _clip(_extent(primitive, to_px, scale), canvas.size)
    if box is None:
        return

    left, top, right, bottom = box
    layer = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))

    def to_layer(x: float, y: float) -> Tuple[float, float]:
        px, py = to_px(x, y)
        return (px - left, py - top)

    _draw_shape(layer, primitive, to_layer, scale)
    canvas.alpha_composite(layer, dest=(left, top))


def _label_font():
    return ImageFont.load_default()


def _extent(primitive: Primitive, to_px, scale: int) -> Optional[Tuple[float, float, float, float]]:
    """Pixel bounds (left, top, right, bottom) of everything a shape paints."""
    if isinstance(primitive, PolylinePrimitive):
        points = [to_px(x, y) for x, y in primitive.points]
        pad = _width(primitive.stroke_width, scale)
    elif isinstance(primitive, PolygonPrimitive):
        points = [to_px(x, y) for ring in primitive.rings for x, y in ring]
        pad = _width(primitive.stroke_width, scale)
    elif isinstance(primitive, RectanglePrimitive):
        points = [
            to_px(primitive.x, primitive.y),
            to_px(primitive.x + primitive.width, primitive.y + primitive.height),
        ]
        pad = _width(primitive.stroke_width, scale)
    elif isinstance(primitive, CirclePrimitive):
        cx, cy = to_px(primitive.cx, primitive.cy)
        r = primitive.r * scale
        points = [(cx - r, cy - r), (cx + r, cy + r)]
        pad = _width(primitive.stroke_width, scale)
    elif isinstance(primitive, MarkerPrimitive):
        cx, cy = to_px(primitive.x, primitive.y)
        half_width = half_height = primitive.radius * scale
        if primitive.label:
            left, top, right, bottom = _label_font().getbbox(primitive.label)
            half_width = max(half_width, (right - left) / 2)
            half_height = max(half_height, (bottom - top) / 2)
        points = [(cx - half_width, cy - half_height), (cx + half_width, cy + half_height)]
        pad = max(1, scale)
    else:
        raise TypeError(f"Unknown primitive type {type(primitive).__name__}")

    if not points:
        return None
    xs, ys = zip(*points)
    pad += LAYER_MARGIN
    return (min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad)


def _clip(extent: Optional[Tuple[float, float, float, float]], size: Tuple[int, int]) -> Optional[Box]:
    """Integer pixel box of ``extent`` inside an image of ``size``, None if they do not overlap."""
    if extent is None:
        return None
    left = max(0, math.floor(extent[0]))
    top = max(0, math.floor(extent[1]))
    right = min(size[0], math.ceil(extent[2]))
    bottom = min(size[1], math.ceil(extent[3]))
    if right <= left or bottom <= top:
        return None
    return (left, top, right, bottom)


def _rgba(color: Color, opacity: float = 1.0) -> Tuple[int, int, int, int]:
    r, g, b, a = color.to_rgba()
    return (r, g, b, round(a * max(0.0, min(1.0, opacity))))


def _width(stroke_width: float, scale: int) -> int:
    return max(0, round(stroke_width * scale))


def _closed(points: Iterable[Tuple[float, float]]) -> list:
    points = list(points)
    if points and points[0] != points[-1]:
        points.append(points[0])
    return points


def _draw_shape(layer: Image.Image, primitive: Primitive, to_px, scale: int):
    draw = ImageDraw.Draw(layer)

    if isinstance(primitive, PolylinePrimitive):
        points = [to_px(x, y) for x, y in primitive.points]
        width = _width(primitive.stroke_width, scale)
        if len(points) >= 2 and width > 0:
            draw.line(points, fill=_rgba(primitive.stroke, primitive.stroke_opacity), width=width, joint="curve")
        return

    if isinstance(primitive, PolygonPrimitive):
        rings = [[to_px(x, y) for x, y in ring] for ring in primitive.rings if len(ring) >= 3]
        if not rings:
            return
        mask = Image.new("1", layer.size, 0)
        for ring in rings:
            ring_mask = Image.new("1", layer.size, 0)
            ImageDraw.Draw(ring_mask).polygon(ring, fill=1)
            mask = ImageChops.logical_xor(mask, ring_mask)
        fill = Image.new("RGBA", layer.size, _rgba(primitive.fill, primitive.fill_opacity))
        layer.paste(fill, (0, 0), mask)
        width = _width(primitive.stroke_width, scale)
        if width > 0:
            stroke = _rgba(primitive.stroke, primitive.stroke_opacity)
            for ring in rings:
                draw.line(_closed(ring), fill=stroke, width=width, joint="curve")
        return

    if isinstance(primitive, RectanglePrimitive):
        x0, y0 = to_px(primitive.x, primitive.y)
        x1, y1 = to_px(primitive.x + primitive.width, primitive.y + primitive.height)
        width = _width(primitive.stroke_width, scale)
        draw.rectangle(
            [x0, y0, x1, y1],
            fill=_rgba(primitive.fill, primitive.fill_opacity),
            outline=_rgba(primitive.stroke, primitive.stroke_opacity) if width > 0 else None,
            width=width,
        )
        return

    if isinstance(primitive, CirclePrimitive):
        cx, cy = to_px(primitive.cx, primitive.cy)
        r = primitive.r * scale
        width = _width(primitive.stroke_width, scale)
        draw.ellipse(
            [cx - r, cy - r, cx + r, cy + r],
            fill=_rgba(primitive.fill, primitive.fill_opacity),
            outline=_rgba(primitive.stroke, primitive.stroke_opacity) if width > 0 else None,
            width=width,
        )
        return

    if isinstance(primitive, MarkerPrimitive):
        cx, cy = to_px(primitive.x, primitive.y)
        r = primitive.radius * scale
        draw.ellipse(
            [cx - r, cy - r, cx + r, cy + r],
            fill=_rgba(primitive.fill, primitive.opacity),
            outline=_rgba(MARKER_OUTLINE, primitive.opacity),
            width=max(1, scale),
        )
        if primitive.label:
            font = _label_font()
            left, top, right, bottom = draw.textbbox((0, 0), primitive.label, font=font)
            origin = (cx - (right - left) / 2 - left, cy - (bottom - top) / 2 - top)
            draw.text(origin, primitive.label, fill=_rgba(MARKER_OUTLINE, primitive.opacity), font=font)
        return

    raise TypeError(f"Unknown primitive type {type(primitive).__name__}")
