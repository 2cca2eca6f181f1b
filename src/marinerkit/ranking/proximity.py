"""
Proximity ranking.

Orders located entities by great-circle distance from the user's position, when
there is one. Distances are an explicit `Distance` value (known kilometers or
unknown) rather than a "max float" sentinel, and unknown always sorts after every
known distance. Ties (including all-unknown) fall back to a case-insensitive,
locale-aware name comparison, then to identity, so the order is total and does not
depend on input order.
"""

from __future__ import annotations

import locale
import sys
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, Sequence

from marinerkit.core.geo import GeoPoint, distance_km, km_to_statute_miles
from marinerkit.domain.models import LocatedEntity

SENTINEL_DISTANCE = sys.float_info.max


@total_ordering
@dataclass(frozen=True)
class Distance:
    """Either a known distance in kilometers (`km` set) or unknown (`km is None`)."""

    km: float | None = None

    @classmethod
    def known(cls, km: float) -> Distance:
        return cls(km=float(km))

    @classmethod
    def unknown(cls) -> Distance:
        return cls(km=None)

    @property
    def is_known(self) -> bool:
        return self.km is not None

    def sort_key(self) -> tuple[int, float]:
        return (0, self.km) if self.km is not None else (1, 0.0)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Distance):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def as_sentinel(self) -> float:
        """Legacy float form: kilometers, or `sys.float_info.max` when unknown."""
        return self.km if self.km is not None else SENTINEL_DISTANCE


@dataclass(frozen=True)
class RankedEntity:
    entity: LocatedEntity
    distance: Distance

    @property
    def distance_from_user(self) -> float:
        return self.distance.as_sentinel()

    @property
    def distance_display(self) -> str:
        if self.distance.km is None:
            return ""
        return f"{km_to_statute_miles(self.distance.km):.1f} mi"


def _name_key(name: str) -> tuple[str, str, str]:
    folded = name.casefold()
    # strxfrm rejects embedded NULs.
    return (locale.strxfrm(folded.replace("\x00", "")), folded, name)


def distance_from(user_location: GeoPoint | None, entity: LocatedEntity) -> Distance:
    location = entity.location
    if user_location is None or location is None:
        return Distance.unknown()
    return Distance.known(distance_km(user_location, location))


def rank(entities: Iterable[LocatedEntity], user_location: GeoPoint | None) -> list[RankedEntity]:
    """Rank entities nearest-first; entities with no computable distance go last."""
    ranked = [RankedEntity(entity=e, distance=distance_from(user_location, e)) for e in entities]
    ranked.sort(
        key=lambda r: (
            r.distance.sort_key(),
            _name_key(r.entity.display_name),
            r.entity.identity,
        )
    )
    return ranked


def filter_by_query(ranked: Sequence[RankedEntity], query: str | None) -> list[RankedEntity]:
    """Keep entries whose name or identity contains `query` (case-insensitive), in order."""
    needle = (query or "").casefold()
    if not needle.strip():
        return list(ranked)
    return [
        r
        for r in ranked
        if needle in r.entity.display_name.casefold() or needle in r.entity.identity.casefold()
    ]
