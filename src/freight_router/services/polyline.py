from __future__ import annotations

from freight_router.exceptions import PolylineDecodeError
from freight_router.services.types import GeoPoint

PRECISION = 1e5
CHAR_OFFSET = 63
CONTINUATION_BIT = 0x20
PAYLOAD_MASK = 0x1F
MAX_CHAR = 126


def decode_polyline(encoded: str) -> list[GeoPoint]:
    """Decode an encoded polyline into points, failing on truncated input."""
    points: list[GeoPoint] = []
    index = 0
    latitude = 0
    longitude = 0
    length = len(encoded)

    while index < length:
        lat_delta, index = _read_value(encoded, index)
        if index >= length:
            raise PolylineDecodeError(
                f"Polyline ends after a latitude value at offset {index}"
            )
        lng_delta, index = _read_value(encoded, index)

        latitude += lat_delta
        longitude += lng_delta
        points.append(GeoPoint(latitude=latitude / PRECISION, longitude=longitude / PRECISION))

    return points


def decode_polylines(encoded: list[str]) -> list[GeoPoint]:
    """Decode consecutive polyline segments into one waypoint sequence."""
    waypoints: list[GeoPoint] = []
    for segment in encoded:
        waypoints.extend(decode_polyline(segment))
    return waypoints


def encode_polyline(points: list[GeoPoint]) -> str:
    chunks: list[str] = []
    previous_lat = 0
    previous_lng = 0
    for point in points:
        lat = round(point.latitude * PRECISION)
        lng = round(point.longitude * PRECISION)
        chunks.append(_write_value(lat - previous_lat))
        chunks.append(_write_value(lng - previous_lng))
        previous_lat = lat
        previous_lng = lng
    return "".join(chunks)


def _read_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise PolylineDecodeError(f"Polyline truncated inside a value at offset {index}")
        code = ord(encoded[index])
        if code < CHAR_OFFSET or code > MAX_CHAR:
            raise PolylineDecodeError(f"Invalid polyline character {encoded[index]!r} at offset {index}")
        chunk = code - CHAR_OFFSET
        index += 1
        result |= (chunk & PAYLOAD_MASK) << shift
        shift += 5
        if not chunk & CONTINUATION_BIT:
            break

    if result & 1:
        return ~(result >> 1), index
    return result >> 1, index


def _write_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chars: list[str] = []
    while value >= CONTINUATION_BIT:
        chars.append(chr((CONTINUATION_BIT | (value & PAYLOAD_MASK)) + CHAR_OFFSET))
        value >>= 5
    chars.append(chr(value + CHAR_OFFSET))
    return "".join(chars)
