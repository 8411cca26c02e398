"""
Unit tests for the encoded polyline codec.
"""

import polyline
import pytest

from grelibre.schemas.geo import Position
from grelibre.utils.encoded_polyline import DecodeError, decode_polyline, encode_polyline

GOOGLE_SAMPLE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
GOOGLE_SAMPLE_POSITIONS = [(-120.2, 38.5), (-120.95, 40.7), (-126.453, 43.252)]


def assert_positions_close(actual, expected, tolerance=1e-5):
    assert len(actual) == len(expected)
    for (lon, lat), (expected_lon, expected_lat) in zip(actual, expected):
        assert lon == pytest.approx(expected_lon, abs=tolerance)
        assert lat == pytest.approx(expected_lat, abs=tolerance)


def test_decode_known_vector():
    """Test decoding of the reference string from the algorithm documentation."""
    positions = decode_polyline(GOOGLE_SAMPLE)

    assert_positions_close(positions, GOOGLE_SAMPLE_POSITIONS)


def test_decode_returns_longitude_first():
    """Test decoded positions expose longitude then latitude."""
    first = decode_polyline(GOOGLE_SAMPLE)[0]

    assert isinstance(first, Position)
    assert first.lon == pytest.approx(-120.2)
    assert first.lat == pytest.approx(38.5)


def test_decode_empty_string():
    """Test an empty polyline decodes to no position."""
    assert decode_polyline("") == []


def test_decode_is_repeatable():
    """Test decoding twice gives identical results."""
    assert decode_polyline(GOOGLE_SAMPLE) == decode_polyline(GOOGLE_SAMPLE)


def test_decode_truncated_in_continuation_run():
    """Test a stream ending inside a multi-character value is rejected."""
    with pytest.raises(DecodeError) as exc_info:
        decode_polyline("_p~i")

    assert exc_info.value.position == 4


def test_decode_missing_longitude():
    """Test a point with only its latitude is rejected."""
    with pytest.raises(DecodeError):
        decode_polyline("_p~iF")


def test_decode_truncated_after_complete_points():
    """Test trailing garbage after complete points is rejected, not returned."""
    with pytest.raises(DecodeError):
        decode_polyline(GOOGLE_SAMPLE + "_ul")


def test_decode_invalid_character():
    """Test characters outside the polyline alphabet are rejected."""
    with pytest.raises(DecodeError) as exc_info:
        decode_polyline("_p~iF ps|U")

    assert exc_info.value.position == 5


def test_decode_error_is_value_error():
    """Test DecodeError can be handled as a ValueError."""
    with pytest.raises(ValueError):
        decode_polyline("?")


def test_encode_known_vector():
    """Test encoding reproduces the reference string."""
    assert encode_polyline(GOOGLE_SAMPLE_POSITIONS) == GOOGLE_SAMPLE


def test_round_trip_grenoble_path():
    """Test a path through Grenoble survives encoding then decoding."""
    path = [
        (5.714722, 45.191458),  # Gares
        (5.724524, 45.188529),
        (5.73125, 45.18701),
        (5.76829, 45.19262),  # Campus
    ]

    assert_positions_close(decode_polyline(encode_polyline(path)), path)


def test_decode_with_precision_six():
    """Test polylines encoded with six decimals, as some routers emit."""
    path = [(5.7247, 45.1885), (5.7301, 45.1907)]

    decoded = decode_polyline(encode_polyline(path, precision=6), precision=6)

    assert_positions_close(decoded, path, tolerance=1e-6)


def test_decode_matches_reference_library():
    """Test decoding agrees with the polyline package, axes swapped."""
    encoded = encode_polyline([(5.71472, 45.19146), (5.7253, 45.1893), (5.76829, 45.19262)])

    expected = [(lon, lat) for lat, lon in polyline.decode(encoded)]

    assert_positions_close(decode_polyline(encoded), expected, tolerance=1e-9)
