from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from marinerkit.core.geo import GeoPoint, bearing_deg, distance_km
from marinerkit.domain.models import RoutePoint
from marinerkit.routing.legs import (
    RouteLeg,
    annotate,
    intermediate_points,
    reverse,
    schedule,
    summarize,
    total_distance_nm,
)

DEPARTURE = datetime(2026, 6, 1, 8, 0, tzinfo=timezone.utc)


def _four_point_route() -> list[RoutePoint]:
    return [
        RoutePoint(name="Boston Harbor", latitude=42.355, longitude=-71.0),
        RoutePoint(name="Deer Island Light", latitude=42.34, longitude=-70.955),
        RoutePoint(name="Boston Approach", latitude=42.35, longitude=-70.7),
        RoutePoint(name="Race Point", latitude=42.07, longitude=-70.26),
    ]


def test_annotate_empty_and_single_point():
    assert annotate([]) == []

    legs = annotate([RoutePoint(name="Solo", latitude=10.0, longitude=20.0)])
    assert len(legs) == 1
    assert legs[0].distance_to_next_nm == 0.0
    assert legs[0].bearing_to_next_deg == 0.0
    assert legs[0].name == "Solo"


def test_annotate_computes_each_leg_from_its_successor():
    points = _four_point_route()
    legs = annotate(points)

    assert len(legs) == len(points)
    for i in range(len(points) - 1):
        a = GeoPoint(lat=points[i].latitude, lon=points[i].longitude)
        b = GeoPoint(lat=points[i + 1].latitude, lon=points[i + 1].longitude)
        assert legs[i].distance_to_next_nm == pytest.approx(distance_km(a, b) / 1.852)
        assert legs[i].bearing_to_next_deg == pytest.approx(bearing_deg(a, b))
    assert (legs[-1].distance_to_next_nm, legs[-1].bearing_to_next_deg) == (0.0, 0.0)


def test_annotate_accepts_bare_geopoints():
    legs = annotate([GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=1.0)])
    assert legs[0].name is None
    assert legs[0].bearing_to_next_deg == pytest.approx(90.0)


def test_reverse_recomputes_instead_of_flipping_legs():
    points = _four_point_route()
    reversed_legs = reverse(annotate(points))

    assert reversed_legs == annotate(list(reversed(points)))
    # A flipped array would keep the old outbound bearing on the new first leg.
    flipped = list(reversed(annotate(points)))
    assert reversed_legs[0].bearing_to_next_deg != flipped[0].bearing_to_next_deg
    assert flipped[0].distance_to_next_nm == 0.0
    assert reversed_legs[-1].distance_to_next_nm == 0.0


def test_reverse_on_equator_turns_bearings_around():
    legs = annotate([GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=1.0), GeoPoint(lat=0.0, lon=2.0)])
    back = reverse(legs)
    assert [leg.point.lon for leg in back] == [2.0, 1.0, 0.0]
    assert back[0].bearing_to_next_deg == pytest.approx(270.0)
    assert back[1].bearing_to_next_deg == pytest.approx(270.0)


def test_reverse_twice_restores_original_legs():
    legs = annotate(_four_point_route())
    assert reverse(reverse(legs)) == legs


def test_reverse_drops_stale_etas():
    legs = schedule(annotate(_four_point_route()), DEPARTURE, 6.0)
    assert all(leg.eta is None for leg in reverse(legs))


def test_schedule_advances_eta_by_distance_over_speed():
    legs = schedule(annotate(_four_point_route()), DEPARTURE, 6.0)

    assert legs[0].eta == DEPARTURE
    for prev, cur in zip(legs, legs[1:]):
        assert cur.eta - prev.eta == timedelta(hours=prev.distance_to_next_nm / 6.0)


def test_schedule_rejects_non_positive_speed():
    with pytest.raises(ValueError, match="average_speed_knots"):
        schedule(annotate(_four_point_route()), DEPARTURE, 0)


def test_summarize_reports_totals():
    legs = schedule(annotate(_four_point_route()), DEPARTURE, 5.0)
    summary = summarize(legs)

    assert summary.name == "Boston Harbor - Race Point"
    assert summary.total_distance_nm == pytest.approx(total_distance_nm(legs))
    assert summary.departure == DEPARTURE
    assert summary.duration == legs[-1].eta - DEPARTURE


def test_summarize_empty_route():
    summary = summarize([])
    assert summary.total_distance_nm == 0.0
    assert summary.duration is None


def test_intermediate_points_lie_on_the_leg_and_keep_legs_coherent():
    legs = schedule(annotate([GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=1.0)]), DEPARTURE, 6.0)
    # ~60 nm at 6 kn is just over 10 hours: 9 hourly points between the ends.
    out = intermediate_points(legs, 60)

    assert len(out) == 11
    assert [leg.is_intermediate for leg in out] == [False] + [True] * 9 + [False]
    for j, leg in enumerate(out[1:-1], start=1):
        assert leg.point.lat == pytest.approx(0.0, abs=1e-9)
        assert leg.eta == DEPARTURE + timedelta(hours=j)
        assert leg.name == f"+{j * 60}m"
    lons = [leg.point.lon for leg in out]
    assert lons == sorted(lons)

    recomputed = annotate(out)
    for leg, fresh in zip(out, recomputed):
        assert leg.distance_to_next_nm == fresh.distance_to_next_nm
        assert leg.bearing_to_next_deg == fresh.bearing_to_next_deg
    assert out[0].distance_to_next_nm == pytest.approx(6.0, rel=1e-9)
    assert out[-1].eta == legs[-1].eta


def test_intermediate_points_requires_schedule():
    legs = annotate(_four_point_route())
    with pytest.raises(ValueError, match="scheduled"):
        intermediate_points(legs, 30)


def test_intermediate_points_short_route_is_unchanged():
    single = [RouteLeg(point=GeoPoint(lat=1.0, lon=1.0), name="A", eta=DEPARTURE)]
    assert intermediate_points(single, 30) == single


def test_intermediate_points_follow_the_scheduled_etas_not_a_fixed_speed():
    legs = annotate([GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=1.0)])
    # A 4 hour leg (~15 kn) rather than whatever speed the caller last had in mind.
    legs = [replace(legs[0], eta=DEPARTURE), replace(legs[1], eta=DEPARTURE + timedelta(hours=4))]
    out = intermediate_points(legs, 60)

    assert [leg.point.lon for leg in out] == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0], abs=1e-9)
    for leg in out[:-1]:
        assert leg.bearing_to_next_deg == pytest.approx(90.0)
    assert total_distance_nm(out) == pytest.approx(total_distance_nm(legs))


def test_intermediate_points_after_a_slow_schedule_stay_inside_the_leg():
    legs = schedule(annotate([GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=1.0)]), DEPARTURE, 3.0)
    out = intermediate_points(legs, 60)

    lons = [leg.point.lon for leg in out]
    assert lons == sorted(lons)
    assert all(0.0 <= lon <= 1.0 for lon in lons)
    assert len(out) == 2 + 19


def test_reverse_keeps_intermediate_flags_with_their_points():
    out = intermediate_points(
        schedule(annotate([GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=1.0)]), DEPARTURE, 6.0), 120
    )
    back = reverse(out)

    assert [leg.is_intermediate for leg in back] == [leg.is_intermediate for leg in reversed(out)]
    assert [leg.name for leg in back] == [leg.name for leg in reversed(out)]
    assert reverse(back) == [replace(leg, eta=None) for leg in out]
