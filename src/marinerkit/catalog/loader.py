"""
Entity and waypoint snapshot loader.

The CLI works from local JSON snapshots: a list of stations / nav units (each tagged
with `kind`) and an ordered list of route waypoints. We validate them into the typed
Pydantic models so the ranking and routing code can assume a consistent shape.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Union

from pydantic import Field, TypeAdapter

from marinerkit.core.env import resolve_project_path
from marinerkit.domain.models import NavUnit, RoutePoint, Station

CatalogEntity = Annotated[Union[Station, NavUnit], Field(discriminator="kind")]

_ENTITIES_ADAPTER = TypeAdapter(list[CatalogEntity])
_WAYPOINTS_ADAPTER = TypeAdapter(list[RoutePoint])


def _read_json(path: str | Path):
    resolved = resolve_project_path(path)
    return json.loads(resolved.read_text(encoding="utf-8"))


def load_entities(path: str | Path) -> list[Station | NavUnit]:
    """Load and validate a station / nav unit catalog JSON file."""
    payload = _read_json(path)
    if isinstance(payload, dict):
        payload = payload.get("entities", [])
    return _ENTITIES_ADAPTER.validate_python(payload)


def load_waypoints(path: str | Path) -> list[RoutePoint]:
    """Load an ordered waypoint list (either a bare list or `{"name": ..., "points": [...]}`)."""
    payload = _read_json(path)
    if isinstance(payload, dict):
        payload = payload.get("points", [])
    return _WAYPOINTS_ADAPTER.validate_python(payload)


def select_favorites(entities: list[Station | NavUnit], keys: set[str]) -> list[Station | NavUnit]:
    """Subset of `entities` whose favorite key (or bare identity) is in `keys`."""
    return [e for e in entities if e.favorite_key in keys or e.identity in keys]
