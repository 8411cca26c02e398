"""
Encoded Polyline Codec

Google's encoded polyline algorithm: each coordinate is scaled by 10^precision,
delta-encoded against the previous point, zig-zag encoded and written as
5-bit chunks offset by 63, with 0x20 as the continuation bit.

Decoding is strict: a truncated stream raises DecodeError instead of
yielding partial points. Encoding delegates to the polyline package.

Reference: https://developers.google.com/maps/documentation/utilities/polylinealgorithm
"""

from typing import Iterable, List, Tuple

import polyline

from grelibre.schemas.geo import Position

# Characters produced by the encoder range from chr(63) to chr(63 + 0x3f)
_MIN_CHAR = 63
_MAX_CHAR = 63 + 0x3F


class DecodeError(ValueError):
    """Raised when an encoded polyline is truncated or contains invalid characters."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at offset {position}")
        self.position = position


def _read_value(encoded: str, index: int) -> Tuple[int, int]:
    """
    Read one signed delta starting at ``index``.

    Returns the delta and the index of the next unread character.
    """
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise DecodeError("Truncated polyline", index)

        char = ord(encoded[index])
        if not _MIN_CHAR <= char <= _MAX_CHAR:
            raise DecodeError(f"Invalid polyline character {encoded[index]!r}", index)

        byte = char - 63
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if not byte & 0x20:
            break

    if result & 1:
        return ~(result >> 1), index
    return result >> 1, index


def decode_polyline(encoded: str, precision: int = 5) -> List[Position]:
    """
    Decode an encoded polyline into a list of positions.

    Args:
        encoded: The encoded polyline string; may be empty
        precision: Number of decimal digits the coordinates were scaled by

    Returns:
        Positions in encoding order, longitude first

    Raises:
        DecodeError: If the string ends in the middle of a point or contains
            a character outside the polyline alphabet
    """
    factor = 10**precision
    positions: List[Position] = []
    index = lat = lng = 0

    while index < len(encoded):
        delta_lat, index = _read_value(encoded, index)
        if index >= len(encoded):
            raise DecodeError("Polyline point is missing its longitude", index)
        delta_lng, index = _read_value(encoded, index)

        lat += delta_lat
        lng += delta_lng
        positions.append(Position(lon=lng / factor, lat=lat / factor))

    return positions


def encode_polyline(positions: Iterable[Position], precision: int = 5) -> str:
    """
    Encode positions (longitude first) into a polyline string.
    """
    return polyline.encode([tuple(position) for position in positions], precision, geojson=True)
