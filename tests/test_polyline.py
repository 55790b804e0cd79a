from __future__ import annotations

import pytest

from freight_router.exceptions import PolylineDecodeError
from freight_router.services.polyline import decode_polyline, decode_polylines, encode_polyline
from freight_router.services.types import GeoPoint

GOOGLE_SAMPLE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def test_decodes_reference_polyline() -> None:
    points = decode_polyline(GOOGLE_SAMPLE)

    assert [(point.latitude, point.longitude) for point in points] == [
        pytest.approx((38.5, -120.2)),
        pytest.approx((40.7, -120.95)),
        pytest.approx((43.252, -126.453)),
    ]


def test_empty_polyline_yields_no_points() -> None:
    assert decode_polyline("") == []


def test_decoding_is_deterministic() -> None:
    assert decode_polyline(GOOGLE_SAMPLE) == decode_polyline(GOOGLE_SAMPLE)


def test_encode_matches_reference_and_round_trips() -> None:
    points = [
        GeoPoint(latitude=38.5, longitude=-120.2),
        GeoPoint(latitude=40.7, longitude=-120.95),
        GeoPoint(latitude=43.252, longitude=-126.453),
    ]

    encoded = encode_polyline(points)

    assert encoded == GOOGLE_SAMPLE
    for decoded, original in zip(decode_polyline(encoded), points):
        assert decoded.latitude == pytest.approx(original.latitude, abs=1e-5)
        assert decoded.longitude == pytest.approx(original.longitude, abs=1e-5)


def test_segments_are_concatenated_in_order() -> None:
    first = encode_polyline([GeoPoint(41.8781, -87.6298), GeoPoint(40.0, -89.0)])
    second = encode_polyline([GeoPoint(35.0, -95.0), GeoPoint(32.7767, -96.797)])

    waypoints = decode_polylines([first, second])

    assert len(waypoints) == 4
    assert waypoints[0].latitude == pytest.approx(41.8781)
    assert waypoints[-1].longitude == pytest.approx(-96.797)


@pytest.mark.parametrize(
    "encoded",
    [
        "_p~iF",  # latitude without a longitude
        "_p~i",  # value cut off mid continuation
        "_p~iF~ps|U_ulL",  # trailing odd value
        "_p~iF ~ps|U",  # character below the encoding offset
    ],
)
def test_malformed_polyline_fails_fast(encoded: str) -> None:
    with pytest.raises(PolylineDecodeError):
        decode_polyline(encoded)
