"""
Tests for projecting shapes into drawing primitives.
"""

import pytest

from mapplot.coordinates import BoundingBox
from mapplot.image.overlays import (
    DEFAULT_FILL_OPACITY,
    DEFAULT_STROKE_WEIGHT,
    render_shape,
)
from mapplot.image.primitives import (
    CirclePrimitive,
    MarkerPrimitive,
    PolygonPrimitive,
    PolylinePrimitive,
    RectanglePrimitive,
)
from mapplot.image.projection import meters_per_pixel, project
from mapplot.shapes import Circle, Marker, Polygon, Polyline, Rectangle
from mapplot.style import Color, PolygonStyle, PolylineStyle


class TestRenderPolyline:
    """Tests for polyline rendering."""

    def test_vertex_count_and_order(self):
        # Given
        path = [(52.0, 4.0), (52.1, 4.1), (52.05, 4.2), (51.9, 4.0)]

        # When
        primitive = render_shape(Polyline(path), 10)

        # Then
        assert isinstance(primitive, PolylinePrimitive)
        assert len(primitive.points) == len(path)
        for point, loc in zip(primitive.points, path):
            expected = project(loc, 10)
            assert point == pytest.approx((expected.x, expected.y))

    def test_defaults(self):
        primitive = render_shape(Polyline([(0, 0), (1, 1)]), 3)
        assert primitive.stroke == Color.BLACK
        assert primitive.stroke_width == DEFAULT_STROKE_WEIGHT
        assert primitive.stroke_opacity == 1.0

    def test_style(self):
        style = PolylineStyle().color(Color.RED).opacity(0.5).weight(5)
        primitive = render_shape(Polyline([(0, 0), (1, 1)]).style(style), 3)
        assert primitive.stroke == Color.RED
        assert primitive.stroke_opacity == 0.5
        assert primitive.stroke_width == 5.0


class TestRenderPolygon:
    """Tests for polygon rendering."""

    def test_rings(self):
        # Given
        polygon = Polygon([(0, 0), (0, 10), (10, 10)]).path([(1, 1), (2, 1), (2, 2)])

        # When
        primitive = render_shape(polygon, 4)

        # Then
        assert isinstance(primitive, PolygonPrimitive)
        assert len(primitive.rings) == 2
        assert len(primitive.rings[0]) == 3
        assert primitive.rings[1][0] == pytest.approx(tuple(project((1, 1), 4)))

    def test_defaults_and_style(self):
        plain = render_shape(Polygon([(0, 0), (0, 1), (1, 1)]), 4)
        assert plain.fill == Color.BLACK
        assert plain.fill_opacity == DEFAULT_FILL_OPACITY

        styled = render_shape(Polygon([(0, 0), (0, 1), (1, 1)]).style(PolygonStyle().color(Color.BLUE)), 4)
        assert styled.fill == styled.stroke == Color.BLUE


class TestRenderOtherShapes:
    """Tests for rectangles, circles and markers."""

    def test_rectangle_spans_projected_corners(self):
        # Given
        rect = Rectangle(BoundingBox((52.1, 4.1), (52.0, 4.0)))

        # When
        primitive = render_shape(rect, 10)

        # Then
        nw = project((52.1, 4.0), 10)
        se = project((52.0, 4.1), 10)
        assert isinstance(primitive, RectanglePrimitive)
        assert primitive.x == pytest.approx(nw.x)
        assert primitive.y == pytest.approx(nw.y)
        assert primitive.width == pytest.approx(se.x - nw.x)
        assert primitive.height == pytest.approx(se.y - nw.y)

    def test_circle_radius_in_pixels(self):
        circle = Circle((52.0, 4.0), 1000.0)
        primitive = render_shape(circle, 12)
        assert isinstance(primitive, CirclePrimitive)
        assert primitive.r == pytest.approx(1000.0 / meters_per_pixel(52.0, 12))
        assert (primitive.cx, primitive.cy) == pytest.approx(tuple(project((52.0, 4.0), 12)))

    def test_marker(self):
        marker = Marker((10.0, 20.0)).set_label("A").set_title("Start").set_opacity(0.4)
        primitive = render_shape(marker, 6)
        assert isinstance(primitive, MarkerPrimitive)
        assert (primitive.x, primitive.y) == pytest.approx(tuple(project((10.0, 20.0), 6)))
        assert primitive.label == "A"
        assert primitive.title == "Start"
        assert primitive.opacity == 0.4

    def test_unknown_shape(self):
        with pytest.raises(TypeError):
            render_shape("not a shape", 3)
