"""
Route leg annotation.

A route is an ordered list of stops; each leg carries the distance (nautical miles)
and initial bearing to the *next* stop. Those values are directional, so every
operation that changes the stop order (reverse, inserting intermediate points)
rebuilds the legs through `annotate` instead of moving existing leg values around.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, Sequence, Union

from marinerkit.core.geo import (
    GeoPoint,
    bearing_deg,
    destination_point,
    distance_km,
    km_to_nautical_miles,
    nautical_miles_to_km,
)
from marinerkit.domain.models import RoutePoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteLeg:
    """One stop of an annotated route plus the leg that starts there."""

    point: GeoPoint
    name: str | None = None
    distance_to_next_nm: float = 0.0
    bearing_to_next_deg: float = 0.0
    eta: datetime | None = None
    is_intermediate: bool = False


@dataclass(frozen=True)
class RouteSummary:
    name: str
    total_distance_nm: float
    departure: datetime | None
    arrival: datetime | None

    @property
    def duration(self) -> timedelta | None:
        if self.departure is None or self.arrival is None:
            return None
        return self.arrival - self.departure


Stop = Union[RouteLeg, RoutePoint, GeoPoint]


def _as_stop(item: Stop) -> tuple[GeoPoint, str | None]:
    if isinstance(item, RouteLeg):
        return item.point, item.name
    if isinstance(item, GeoPoint):
        return item, None
    return GeoPoint(lat=item.latitude, lon=item.longitude), item.name


def annotate(stops: Iterable[Stop]) -> list[RouteLeg]:
    """Annotate each stop with distance/bearing to the next one.

    The last leg has no successor and is fixed at (0.0, 0.0). An empty input gives an
    empty route.
    """
    pairs = [_as_stop(s) for s in stops]
    legs: list[RouteLeg] = []
    for i, (point, name) in enumerate(pairs):
        if i + 1 < len(pairs):
            nxt = pairs[i + 1][0]
            legs.append(
                RouteLeg(
                    point=point,
                    name=name,
                    distance_to_next_nm=km_to_nautical_miles(distance_km(point, nxt)),
                    bearing_to_next_deg=bearing_deg(point, nxt),
                )
            )
        else:
            legs.append(RouteLeg(point=point, name=name))
    return legs


def reverse(legs: Sequence[RouteLeg]) -> list[RouteLeg]:
    """Reverse travel direction.

    Re-annotates the reversed stop order; flipping the leg list would keep every bearing
    pointing the old way. ETAs are dropped (reschedule after); intermediate flags stay
    with their points.
    """
    backwards = list(reversed(legs))
    return [
        replace(leg, is_intermediate=src.is_intermediate) for leg, src in zip(annotate(backwards), backwards)
    ]


def total_distance_nm(legs: Iterable[RouteLeg]) -> float:
    return sum(leg.distance_to_next_nm for leg in legs)


def schedule(legs: Sequence[RouteLeg], departure: datetime, average_speed_knots: float) -> list[RouteLeg]:
    """Attach ETAs assuming a constant speed over ground from `departure`."""
    speed = float(average_speed_knots)
    if speed <= 0:
        raise ValueError("average_speed_knots must be > 0")
    out: list[RouteLeg] = []
    eta = departure
    for leg in legs:
        out.append(replace(leg, eta=eta))
        eta = eta + timedelta(hours=leg.distance_to_next_nm / speed)
    return out


def summarize(legs: Sequence[RouteLeg]) -> RouteSummary:
    if not legs:
        return RouteSummary(name="", total_distance_nm=0.0, departure=None, arrival=None)
    first = legs[0].name or ""
    last = legs[-1].name or ""
    return RouteSummary(
        name=f"{first} - {last}",
        total_distance_nm=total_distance_nm(legs),
        departure=legs[0].eta,
        arrival=legs[-1].eta,
    )


def intermediate_points(legs: Sequence[RouteLeg], interval_minutes: int) -> list[RouteLeg]:
    """Insert positions every `interval_minutes` of sailing along each scheduled leg.

    A leg lasting D gets `floor(D / interval) - 1` extra points. Point j sits at the
    fraction `j * interval / D` of the leg's distance, on the leg's initial bearing, so
    the spacing always follows the ETAs the route was scheduled with. The combined route
    is re-annotated so every leg (including the shortened originals) stays coherent, and
    ETAs are carried over.
    """
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be > 0")
    if len(legs) < 2:
        return list(legs)
    if any(leg.eta is None for leg in legs):
        raise ValueError("route must be scheduled before adding intermediate points")

    interval = timedelta(minutes=interval_minutes)

    stops: list[RouteLeg] = []
    for start, end in zip(legs, legs[1:]):
        stops.append(start)
        leg_duration = end.eta - start.eta
        count = int(leg_duration / interval) - 1
        leg_km = nautical_miles_to_km(start.distance_to_next_nm)
        for j in range(1, count + 1):
            stops.append(
                RouteLeg(
                    point=destination_point(
                        start.point, start.bearing_to_next_deg, leg_km * (interval * j / leg_duration)
                    ),
                    name=f"{start.name or ''} +{j * interval_minutes}m".strip(),
                    eta=start.eta + interval * j,
                    is_intermediate=True,
                )
            )
    stops.append(legs[-1])

    annotated = annotate(stops)
    logger.debug(
        "Added %d intermediate points to a %d-stop route", len(stops) - len(legs), len(legs)
    )
    return [
        replace(leg, eta=src.eta, is_intermediate=src.is_intermediate)
        for leg, src in zip(annotated, stops)
    ]
