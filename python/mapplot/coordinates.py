"""Geographic value types shared by the Google Maps and image exporters.

Coordinates are WGS84 degrees. Latitude is conventionally in [-90, 90] and
longitude in [-180, 180], but neither is enforced here: the web-Mercator
projection clamps latitude itself (see ``mapplot.image.projection``).
"""

from typing import Iterable, NamedTuple, Tuple, Union
from dataclasses import dataclass

import numpy as np


class Location(NamedTuple):
    """A geographic position.

    Attributes:
        lat: Latitude in degrees.
        lon: Longitude in degrees.
    """
    lat: float
    lon: float

    def to_js(self) -> str:
        # google.maps.LatLngLiteral
        return f"{{ lat: {float(self.lat)!r}, lng: {float(self.lon)!r} }}"


LocationLike = Union[Location, Tuple[float, float]]


def as_location(value: LocationLike) -> Location:
    """Coerce a ``(lat, lon)`` tuple (or a Location) into a Location."""
    if isinstance(value, Location):
        return value
    lat, lon = value
    return Location(float(lat), float(lon))


def as_path(points: Iterable[LocationLike]) -> Tuple[Location, ...]:
    """Coerce an iterable of ``(lat, lon)`` pairs into a tuple of Locations."""
    return tuple(as_location(p) for p in points)


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box given by two opposite corners.

    The corners are kept as given: ``p1`` is not necessarily the south-west
    corner. Use the derived properties (``south``, ``north``, ``west``,
    ``east``, ``south_west``, ``north_east``) when an ordering is needed.

    Attributes:
        p1: First corner.
        p2: Opposite corner.
    """
    p1: Location
    p2: Location

    def __post_init__(self):
        # accept plain (lat, lon) tuples
        object.__setattr__(self, "p1", as_location(self.p1))
        object.__setattr__(self, "p2", as_location(self.p2))

    @property
    def south(self) -> float:
        """Minimum latitude."""
        return min(self.p1.lat, self.p2.lat)

    @property
    def north(self) -> float:
        """Maximum latitude."""
        return max(self.p1.lat, self.p2.lat)

    @property
    def west(self) -> float:
        """Minimum longitude."""
        return min(self.p1.lon, self.p2.lon)

    @property
    def east(self) -> float:
        """Maximum longitude."""
        return max(self.p1.lon, self.p2.lon)

    @property
    def south_west(self) -> Location:
        return Location(self.south, self.west)

    @property
    def north_east(self) -> Location:
        return Location(self.north, self.east)

    @property
    def center(self) -> Location:
        """Center point of the bounding box (in degrees, not projected)."""
        return Location(
            (self.south + self.north) / 2,
            (self.west + self.east) / 2,
        )

    def contains(self, location: LocationLike) -> bool:
        """Check if a location is within the bounding box."""
        lat, lon = as_location(location)
        return self.south <= lat <= self.north and self.west <= lon <= self.east

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Return the union (combined extent) of two bounding boxes."""
        return BoundingBox(
            (min(self.south, other.south), min(self.west, other.west)),
            (max(self.north, other.north), max(self.east, other.east)),
        )

    @classmethod
    def from_points(cls, points: Iterable[LocationLike]) -> "BoundingBox":
        """Create the smallest bounding box enclosing a set of locations."""
        coords = np.asarray([tuple(as_location(p)) for p in points], dtype=np.float64)
        if coords.size == 0:
            raise ValueError("BoundingBox.from_points needs at least one location")
        return cls(
            (float(np.nanmin(coords[:, 0])), float(np.nanmin(coords[:, 1]))),
            (float(np.nanmax(coords[:, 0])), float(np.nanmax(coords[:, 1]))),
        )

    def to_js(self) -> str:
        return (
            f"new google.maps.LatLngBounds({self.south_west.to_js()}, "
            f"{self.north_east.to_js()})"
        )
