"""
MarinerKit CLI entrypoint.

This CLI is intended for quick local checks of the core against JSON snapshots:
- `rank`: order a station / nav unit catalog by distance from a position,
- `favorites`: the favorites list view (rank + search) for a set of favorite keys,
- `route`: annotate a waypoint file, optionally reversed and scheduled.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from marinerkit.catalog.loader import load_entities, load_waypoints, select_favorites
from marinerkit.config.settings import get_settings
from marinerkit.core.geo import GeoPoint
from marinerkit.core.logging import configure_logging
from marinerkit.core.time import format_duration, parse_datetime
from marinerkit.favorites.projector import project
from marinerkit.ranking.proximity import RankedEntity, filter_by_query, rank
from marinerkit.routing.legs import RouteLeg, annotate, intermediate_points, reverse, schedule, summarize

logger = logging.getLogger(__name__)


def _user_location(args: argparse.Namespace) -> GeoPoint | None:
    if args.lat is None and args.lon is None:
        return None
    if args.lat is None or args.lon is None:
        raise ValueError("--lat and --lon must be given together")
    return GeoPoint(lat=float(args.lat), lon=float(args.lon))


def _ranked_payload(ranked: list[RankedEntity]) -> list[dict[str, Any]]:
    return [
        {
            "favorite_key": r.entity.favorite_key,
            "name": r.entity.display_name,
            "distance_km": r.distance.km,
            "distance_display": r.distance_display,
        }
        for r in ranked
    ]


def _print_ranked(ranked: list[RankedEntity], as_json: bool) -> None:
    if as_json:
        print(json.dumps(_ranked_payload(ranked), ensure_ascii=False, indent=2))
        return
    for i, r in enumerate(ranked, start=1):
        print(f"{i:>3}. {r.entity.display_name} [{r.entity.favorite_key}]  {r.distance_display}")


def _cmd_rank(args: argparse.Namespace) -> int:
    settings = get_settings()
    entities = load_entities(args.catalog or settings.catalog.stations_path)
    ranked = filter_by_query(rank(entities, _user_location(args)), args.query)
    _print_ranked(ranked, args.json)
    return 0


def _cmd_favorites(args: argparse.Namespace) -> int:
    settings = get_settings()
    entities = load_entities(args.catalog or settings.catalog.stations_path)
    favorites = select_favorites(entities, set(args.favorite))
    missing = set(args.favorite) - {e.favorite_key for e in favorites} - {e.identity for e in favorites}
    for key in sorted(missing):
        logger.warning("Favorite %s is not in the catalog; skipping.", key)
    _print_ranked(project(favorites, _user_location(args), args.query), args.json)
    return 0


def _leg_payload(leg: RouteLeg) -> dict[str, Any]:
    return {
        "name": leg.name,
        "lat": leg.point.lat,
        "lon": leg.point.lon,
        "distance_to_next_nm": round(leg.distance_to_next_nm, 3),
        "bearing_to_next_deg": round(leg.bearing_to_next_deg, 1),
        "eta": leg.eta.isoformat() if leg.eta else None,
        "intermediate": leg.is_intermediate,
    }


def _cmd_route(args: argparse.Namespace) -> int:
    settings = get_settings()
    legs = annotate(load_waypoints(args.waypoints or settings.catalog.waypoints_path))
    if args.reverse:
        legs = reverse(legs)

    speed = float(args.speed) if args.speed is not None else settings.route.average_speed_knots
    wants_points = args.intermediate or args.interval is not None
    if wants_points and not args.depart:
        raise ValueError("--intermediate and --interval need --depart")
    if args.depart:
        legs = schedule(legs, parse_datetime(args.depart, settings.app.timezone), speed)
        if wants_points:
            interval = args.interval if args.interval is not None else settings.route.intermediate_interval_minutes
            legs = intermediate_points(legs, int(interval))

    summary = summarize(legs)
    if args.json:
        payload = {
            "name": summary.name,
            "total_distance_nm": round(summary.total_distance_nm, 3),
            "departure": summary.departure.isoformat() if summary.departure else None,
            "arrival": summary.arrival.isoformat() if summary.arrival else None,
            "legs": [_leg_payload(leg) for leg in legs],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Route: {summary.name}  ({summary.total_distance_nm:.1f} nm)")
    if summary.duration is not None:
        print(f"Duration: {format_duration(summary.duration)} at {speed:g} kn")
    for i, leg in enumerate(legs, start=1):
        eta = f"  eta={leg.eta:%Y-%m-%d %H:%M}" if leg.eta else ""
        print(
            f"{i:>3}. {leg.name or '-'}  {leg.distance_to_next_nm:.2f} nm @ {leg.bearing_to_next_deg:05.1f}°{eta}"
        )
    return 0


def _add_position_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, default=None, help="User latitude (omit if unknown)")
    p.add_argument("--lon", type=float, default=None, help="User longitude (omit if unknown)")
    p.add_argument("--query", type=str, default="", help="Case-insensitive name/id filter")
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the MarinerKit CLI."""
    parser = argparse.ArgumentParser(prog="marinerkit")
    sub = parser.add_subparsers(dest="command", required=True)

    r = sub.add_parser("rank", help="Rank a station / nav unit catalog by distance.")
    r.add_argument("--catalog", type=str, default=None, help="Catalog JSON (default from config)")
    _add_position_args(r)
    r.set_defaults(func=_cmd_rank)

    fav = sub.add_parser("favorites", help="Ranked favorites list for the given keys.")
    fav.add_argument("--catalog", type=str, default=None, help="Catalog JSON (default from config)")
    fav.add_argument(
        "--favorite", action="append", default=[], help="Repeatable. Favorite key (kind:id) or bare id."
    )
    _add_position_args(fav)
    fav.set_defaults(func=_cmd_favorites)

    rt = sub.add_parser("route", help="Annotate a waypoint file with legs, bearings and ETAs.")
    rt.add_argument("--waypoints", type=str, default=None, help="Waypoint JSON (default from config)")
    rt.add_argument("--reverse", action="store_true", help="Travel the route in reverse")
    rt.add_argument("--depart", type=str, default=None, help="ISO departure time; enables ETAs")
    rt.add_argument("--speed", type=float, default=None, help="Average speed in knots")
    rt.add_argument(
        "--intermediate", action="store_true", help="Add intermediate points (needs --depart)"
    )
    rt.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Minutes between intermediate points (default from config; implies --intermediate)",
    )
    rt.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rt.set_defaults(func=_cmd_route)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m marinerkit.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
