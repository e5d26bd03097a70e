"""Unit tests for coordinate validation and path encoding."""

import math

import pytest

from mapbox_gateway.integrations.maps import (
    Coordinate,
    ValidationError,
    encode_coordinates,
    format_degrees,
    parse_coordinate,
    parse_coordinate_list,
)


class TestParseCoordinate:

    def test_valid_pair(self):
        assert parse_coordinate(2.3522, 48.8566) == Coordinate(2.3522, 48.8566)

    def test_integers_become_floats(self):
        coordinate = parse_coordinate(13, 52)
        assert coordinate.longitude == 13.0
        assert isinstance(coordinate.latitude, float)

    @pytest.mark.parametrize("value", ["2.35", None, True, [1.0]])
    def test_non_numbers_are_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_coordinate(value, 48.0)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_numbers_are_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_coordinate(2.0, value)

    @pytest.mark.parametrize(
        "longitude, latitude",
        [(-180.1, 0.0), (180.1, 0.0), (0.0, -90.1), (0.0, 90.1)],
    )
    def test_out_of_range_is_rejected(self, longitude, latitude):
        with pytest.raises(ValidationError):
            parse_coordinate(longitude, latitude)

    def test_bounds_are_inclusive(self):
        assert parse_coordinate(-180, 90) == Coordinate(-180.0, 90.0)

    def test_range_check_can_be_disabled(self):
        assert parse_coordinate(200.0, -95.0, check_range=False) == Coordinate(200.0, -95.0)


class TestParseCoordinateList:

    def test_preserves_input_order(self):
        parsed = parse_coordinate_list(
            [(2.0, 48.0), [-0.1, 51.5], Coordinate(13.4, 52.5)], label="waypoints"
        )
        assert parsed == [
            Coordinate(2.0, 48.0),
            Coordinate(-0.1, 51.5),
            Coordinate(13.4, 52.5),
        ]

    @pytest.mark.parametrize("values", [[], [(2.0, 48.0)]])
    def test_fewer_than_two_coordinates_rejected(self, values):
        with pytest.raises(ValidationError, match="Minimum 2 coordinates required"):
            parse_coordinate_list(values, label="waypoints")

    @pytest.mark.parametrize("values", [None, "2,48;3,49", {"a": (2, 48), "b": (3, 49)}, 42])
    def test_non_sequences_rejected(self, values):
        with pytest.raises(ValidationError):
            parse_coordinate_list(values, label="points")

    def test_malformed_pair_reports_index(self):
        with pytest.raises(ValidationError, match=r"points\[1\]"):
            parse_coordinate_list([(2.0, 48.0), (3.0,)], label="points")

    def test_three_item_pair_rejected(self):
        with pytest.raises(ValidationError):
            parse_coordinate_list([(2.0, 48.0, 10.0), (3.0, 49.0)], label="points")


class TestEncodeCoordinates:

    def test_lon_lat_pairs_joined_by_semicolon(self):
        encoded = encode_coordinates(
            [Coordinate(2.3522, 48.8566), Coordinate(-0.1278, 51.5074)]
        )
        assert encoded == "2.3522,48.8566;-0.1278,51.5074"

    def test_order_is_not_changed(self):
        coordinates = [Coordinate(3.0, 1.0), Coordinate(1.0, 2.0), Coordinate(2.0, 3.0)]
        assert encode_coordinates(coordinates) == "3.0,1.0;1.0,2.0;2.0,3.0"

    def test_small_values_are_not_written_in_exponent_notation(self):
        encoded = encode_coordinates(
            [Coordinate(0.00005, 51.4779), Coordinate(-0.00001, 0.00002)]
        )
        assert encoded == "0.00005,51.4779;-0.00001,0.00002"

    @pytest.mark.parametrize(
        "value, expected",
        [(2.3522, "2.3522"), (-122.4194, "-122.4194"), (1e-07, "0.0000001"), (180.0, "180.0")],
    )
    def test_degrees_keep_full_precision(self, value, expected):
        assert format_degrees(value) == expected
