"""
Domain models (Pydantic).

These types are the contract between the catalog loader, the CLI and the core:
- located entities (`Station`, `NavUnit`, `RoutePoint`) as loaded from JSON snapshots,
- the `LocatedEntity` protocol that ranking and favorites code is written against.

Coordinates are range-checked here, at the data boundary. The geometry in
`marinerkit.core.geo` accepts whatever it is given.
"""

from __future__ import annotations

from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

from marinerkit.core.geo import GeoPoint


class LocatedEntity(Protocol):
    """Anything the proximity ranker can order: an identity, a name and maybe a position."""

    @property
    def identity(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    @property
    def location(self) -> GeoPoint | None: ...

    @property
    def favorite_key(self) -> str: ...


class _Positioned(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @property
    def location(self) -> GeoPoint | None:
        # A half-specified position is treated as unknown.
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(lat=self.latitude, lon=self.longitude)

    @property
    def favorite_key(self) -> str:
        return f"{self.kind}:{self.identity}"


class Station(_Positioned):
    """A buoy / observation station."""

    kind: Literal["station"] = "station"
    station_id: str
    name: str
    station_type: str | None = None

    @property
    def identity(self) -> str:
        return self.station_id

    @property
    def display_name(self) -> str:
        return self.name


class NavUnit(_Positioned):
    """A navigation unit (dock, terminal, lock, ...)."""

    kind: Literal["nav_unit"] = "nav_unit"
    nav_unit_id: str
    name: str
    facility_type: str | None = None
    city: str | None = None
    state: str | None = None

    @property
    def identity(self) -> str:
        return self.nav_unit_id

    @property
    def display_name(self) -> str:
        return self.name


class RoutePoint(_Positioned):
    """A named waypoint of a route. Unlike stations, a waypoint always has a position."""

    kind: Literal["route_point"] = "route_point"
    name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    point_id: str | None = None

    @property
    def identity(self) -> str:
        return self.point_id or self.name

    @property
    def display_name(self) -> str:
        return self.name
