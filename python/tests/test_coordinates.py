import pytest

from mapplot.coordinates import BoundingBox, Location, as_location, as_path


class TestLocation:
    """
    Tests for Location and the tuple coercion helpers.
    """

    def test_tuple_coercion(self):
        loc = as_location((52, 4))
        assert isinstance(loc, Location)
        assert loc == Location(52.0, 4.0)
        assert isinstance(loc.lat, float)

    def test_location_is_passed_through(self):
        loc = Location(1.0, 2.0)
        assert as_location(loc) is loc

    def test_as_path_keeps_order(self):
        path = as_path([(3, 4), (1, 2), (5, 6)])
        assert path == (Location(3.0, 4.0), Location(1.0, 2.0), Location(5.0, 6.0))

    def test_to_js(self):
        assert Location(52.5, -4.25).to_js() == "{ lat: 52.5, lng: -4.25 }"


class TestBoundingBox:
    """
    Tests for BoundingBox corner handling and derived values.
    """

    def test_corner_order_is_kept_but_derived_values_are_ordered(self):
        # Given
        bbox = BoundingBox((52.1, 4.1), (52.0, 4.0))

        # Then
        assert bbox.p1 == Location(52.1, 4.1)
        assert bbox.south == 52.0
        assert bbox.north == 52.1
        assert bbox.west == 4.0
        assert bbox.east == 4.1
        assert bbox.south_west == Location(52.0, 4.0)
        assert bbox.north_east == Location(52.1, 4.1)

    def test_center_and_contains(self):
        bbox = BoundingBox((0, 0), (10, 20))
        assert bbox.center == Location(5.0, 10.0)
        assert bbox.contains((5, 5))
        assert bbox.contains((0, 0))
        assert not bbox.contains((11, 5))

    def test_union(self):
        a = BoundingBox((0, 0), (1, 1))
        b = BoundingBox((2, -1), (3, 0.5))
        u = a.union(b)
        assert (u.south, u.west, u.north, u.east) == (0, -1, 3, 1)

    def test_from_points(self):
        bbox = BoundingBox.from_points([(52.0, 4.1), (52.1, 4.0), (52.05, 4.05)])
        assert bbox.south_west == Location(52.0, 4.0)
        assert bbox.north_east == Location(52.1, 4.1)

    def test_from_points_empty(self):
        with pytest.raises(ValueError):
            BoundingBox.from_points([])

    def test_to_js_normalizes_corners(self):
        bbox = BoundingBox((1.0, 2.0), (-1.0, -2.0))
        assert bbox.to_js() == (
            "new google.maps.LatLngBounds({ lat: -1.0, lng: -2.0 }, { lat: 1.0, lng: 2.0 })"
        )
