"""
Favorites list projection.

`project` is what a favorites screen calls on every refresh or search keystroke: rank
the current favorites snapshot by distance, then apply the search filter. It reads
only its arguments (no caching, no sync state), so the result always reflects the
snapshot and location it was given.
"""

from __future__ import annotations

from typing import Iterable

from marinerkit.core.geo import GeoPoint
from marinerkit.domain.models import LocatedEntity
from marinerkit.ranking.proximity import RankedEntity, filter_by_query, rank


def project(
    all_favorites: Iterable[LocatedEntity],
    user_location: GeoPoint | None,
    query: str | None = "",
) -> list[RankedEntity]:
    return filter_by_query(rank(all_favorites, user_location), query)
