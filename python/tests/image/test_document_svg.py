"""
Tests for the SVG serialization of composed documents.
"""

import xml.etree.ElementTree as ET

import pytest

from mapplot.image.document import Document, Viewport
from mapplot.image.primitives import (
    CirclePrimitive,
    ImagePrimitive,
    MarkerPrimitive,
    PolygonPrimitive,
    PolylinePrimitive,
    RectanglePrimitive,
)
from mapplot.style import Color

SVG = "{http://www.w3.org/2000/svg}"


def parse(document: Document) -> ET.Element:
    return ET.fromstring(document.to_svg())


def drawn(document: Document) -> list:
    """Top-level drawing elements (svgwrite always adds an empty <defs>)."""
    return [child for child in parse(document) if child.tag != f"{SVG}defs"]


class TestViewport:
    """Tests for the Viewport helper."""

    def test_contains(self):
        viewport = Viewport(10.0, 20.0, 100.0, 50.0)
        assert viewport.contains(10.0, 20.0)
        assert viewport.contains(110.0, 70.0)
        assert not viewport.contains(9.0, 30.0)

    def test_view_box(self):
        assert Viewport(1.5, 2.0, 3.0, 4.0).as_view_box() == "1.5 2.0 3.0 4.0"


class TestDocumentSvg:
    """Tests for Document.to_svg."""

    def test_root_size_and_view_box(self):
        # Given
        document = Document(Viewport(100.0, 200.0, 300.0, 150.0))

        # When
        root = parse(document)

        # Then
        assert root.tag == f"{SVG}svg"
        assert root.get("viewBox") == "100.0 200.0 300.0 150.0"
        assert float(root.get("width")) == 300.0
        assert float(root.get("height")) == 150.0
        assert drawn(document) == []

    def test_primitives_in_order(self):
        # Given
        document = Document(
            Viewport(0.0, 0.0, 512.0, 512.0),
            [
                ImagePrimitive(0.0, 0.0, 256, 256, b"\x89PNG", "image/png"),
                PolylinePrimitive(((0.0, 0.0), (10.0, 10.0)), Color.RED, 2.0),
                PolygonPrimitive((((0.0, 0.0), (10.0, 0.0), (10.0, 10.0)),), Color.BLACK, 0.3, Color.BLACK, 2.0),
                RectanglePrimitive(1.0, 2.0, 3.0, 4.0, Color.BLUE, 0.5, Color.BLUE, 1.0),
                CirclePrimitive(50.0, 60.0, 7.0, Color.GREEN, 0.3, Color.BLACK, 2.0),
                MarkerPrimitive(20.0, 30.0, 6.0, Color.RED, label="A", title="Start"),
            ],
        )

        # When
        elements = drawn(document)

        # Then
        tags = [child.tag.replace(SVG, "") for child in elements]
        assert tags == ["image", "polyline", "path", "rect", "circle", "g"]

    def test_polyline_attributes(self):
        line = PolylinePrimitive(((0.0, 0.0), (10.0, 5.0), (20.0, 0.0)), Color.rgb(255, 0, 0), 3.0, 0.5)
        (element,) = drawn(Document(Viewport(0, 0, 20, 10), [line]))
        assert element.get("fill") == "none"
        assert element.get("stroke") == "#ff0000"
        assert float(element.get("stroke-width")) == 3.0
        assert float(element.get("stroke-opacity")) == 0.5
        assert len(element.get("points").replace(",", " ").split()) == 6

    def test_polygon_path_uses_nonzero_rule(self):
        # Given: outer ring and a hole
        polygon = PolygonPrimitive(
            (
                ((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)),
                ((2.0, 2.0), (2.0, 8.0), (8.0, 8.0), (8.0, 2.0)),
            ),
            Color.BLACK, 0.3, Color.BLACK, 2.0,
        )

        # When
        (element,) = drawn(Document(Viewport(0, 0, 10, 10), [polygon]))

        # Then
        assert element.get("fill-rule") == "nonzero"
        assert element.get("d").count("M") == 2
        assert element.get("d").count("Z") == 2

    def test_image_is_embedded_as_data_uri(self):
        image = ImagePrimitive(256.0, 0.0, 256, 256, b"abc", "image/jpeg")
        (element,) = drawn(Document(Viewport(0, 0, 512, 256), [image]))
        href = element.get("{http://www.w3.org/1999/xlink}href") or element.get("href")
        assert href == "data:image/jpeg;base64,YWJj"
        assert float(element.get("x")) == 256.0

    def test_marker_label_and_title(self):
        marker = MarkerPrimitive(20.0, 30.0, 6.0, Color.RED, opacity=0.8, label="A", title="Start")
        (group,) = drawn(Document(Viewport(0, 0, 50, 50), [marker]))
        assert group.get("class") == "marker"
        assert group.find(f"{SVG}text").text == "A"
        assert group.find(f"{SVG}title").text == "Start"

    def test_str_is_svg(self):
        document = Document(Viewport(0, 0, 1, 1))
        assert str(document) == document.to_svg()

    def test_unknown_primitive(self):
        with pytest.raises(TypeError):
            Document(Viewport(0, 0, 1, 1), ["nope"]).to_svg()
