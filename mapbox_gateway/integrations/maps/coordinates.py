"""
Coordinate parsing, validation and Mapbox path encoding.

Mapbox expects coordinates as ``lon,lat`` pairs joined by ``;`` in a single
path segment.  Everything here is pure and raises ``ValidationError`` so the
gateway can reject bad input before touching the network.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Any, Final

from mapbox_gateway.integrations.maps.mapboxErrors import ValidationError

LONGITUDE_RANGE: Final[tuple[float, float]] = (-180.0, 180.0)
LATITUDE_RANGE: Final[tuple[float, float]] = (-90.0, 90.0)


@dataclass(frozen=True)
class Coordinate:
    """A (longitude, latitude) pair in decimal degrees."""

    longitude: float
    latitude: float

    def encode(self) -> str:
        return f"{format_degrees(self.longitude)},{format_degrees(self.latitude)}"


def format_degrees(value: float) -> str:
    """Shortest round-tripping decimal form of ``value``, never in exponent
    notation (``5e-05`` is written ``0.00005``)."""
    return format(Decimal(repr(float(value))), "f")


def _as_number(value: Any, name: str) -> float:
    # bool is a Real subclass but never a meaningful coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"Invalid {name}: expected a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {name}: {value!r} is not a finite number")
    return number


def _check_range(number: float, bounds: tuple[float, float], name: str) -> None:
    low, high = bounds
    if not low <= number <= high:
        raise ValidationError(
            f"Invalid {name}: {number} is outside [{low:g}, {high:g}]"
        )


def parse_coordinate(
    longitude: Any,
    latitude: Any,
    *,
    check_range: bool = True,
) -> Coordinate:
    """Validate a longitude/latitude pair and return a ``Coordinate``.

    Raises:
        ValidationError: If either value is not a finite number, or (when
            ``check_range`` is set) falls outside the valid degree range.
    """
    lon = _as_number(longitude, "longitude")
    lat = _as_number(latitude, "latitude")
    if check_range:
        _check_range(lon, LONGITUDE_RANGE, "longitude")
        _check_range(lat, LATITUDE_RANGE, "latitude")
    return Coordinate(longitude=lon, latitude=lat)


def _is_proper_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, Mapping))


def parse_coordinate_list(
    values: Any,
    *,
    label: str,
    minimum: int = 2,
    check_range: bool = True,
) -> list[Coordinate]:
    """Validate an ordered list of coordinates.

    Each item may be a ``Coordinate`` or any two-item ``[lon, lat]``
    sequence.  Input order is preserved.

    Args:
        values: The caller-supplied sequence.
        label: Name used in error messages ("waypoints", "points").
        minimum: Minimum number of coordinates required.
        check_range: Whether to enforce longitude/latitude bounds.

    Raises:
        ValidationError: If ``values`` is not a sequence, is too short, or
            contains an invalid coordinate.
    """
    if not _is_proper_sequence(values) or len(values) < minimum:
        raise ValidationError(
            f"Invalid {label}. Minimum {minimum} coordinates required."
        )

    parsed: list[Coordinate] = []
    for index, item in enumerate(values):
        if isinstance(item, Coordinate):
            item = (item.longitude, item.latitude)
        if not _is_proper_sequence(item) or len(item) != 2:
            raise ValidationError(
                f"Invalid {label}[{index}]: expected a [longitude, latitude] pair"
            )
        parsed.append(parse_coordinate(item[0], item[1], check_range=check_range))
    return parsed


def encode_coordinates(coordinates: Sequence[Coordinate]) -> str:
    """Encode coordinates as ``lon,lat;lon,lat;...`` in input order."""
    return ";".join(coordinate.encode() for coordinate in coordinates)


__all__ = [
    "Coordinate",
    "LATITUDE_RANGE",
    "LONGITUDE_RANGE",
    "encode_coordinates",
    "format_degrees",
    "parse_coordinate",
    "parse_coordinate_list",
]
