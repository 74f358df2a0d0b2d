"""
SIAP Visit CLI entrypoint.

Intended for quick checks in the field office without the web app:
distances, geofence decisions, syncing the local cache and retrying
queued visit submissions.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from siap.app.shell import build_shell
from siap.config.settings import get_settings
from siap.core.geo import distance_m
from siap.core.logging import configure_logging
from siap.domain.models import Coordinate, InspectorProfile, School
from siap.geofence.evaluator import describe, evaluate, location_status
from siap.workflow.location import StaticLocationProvider


def _cmd_distance(args: argparse.Namespace) -> int:
    meters = distance_m(args.lat1, args.lon1, args.lat2, args.lon2)
    print(f"{meters:.1f}")
    return 0


def _cmd_geofence(args: argparse.Namespace) -> int:
    settings = get_settings()
    captured = Coordinate(latitude=args.lat, longitude=args.lon)
    school = School(id="cli", name="CLI", latitude=args.school_lat, longitude=args.school_lon)
    radius = float(args.radius) if args.radius is not None else settings.geofence.radius_m
    result = evaluate(captured, school, radius)

    if args.json:
        payload = {**result.model_dump(mode="json"), "location_status": location_status(result), "radius_m": radius}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"{location_status(result)}: {describe(result)}")
    return 0 if result.verified else 1


def _cmd_sync(args: argparse.Namespace) -> int:
    settings = get_settings()
    shell = build_shell(settings, StaticLocationProvider())
    inspector = shell.inspector
    if args.inspector_id and (inspector is None or inspector.id_pengawas != args.inspector_id):
        shell.sign_in(InspectorProfile(id_pengawas=args.inspector_id))
    if shell.inspector is None:
        print("No inspector; pass --inspector-id")
        return 2
    ok = shell.refresh()
    print(f"schools={len(shell.schools)} visits={len(shell.visits)} outbox={len(shell.outbox)}")
    return 0 if ok else 1


def _cmd_flush_outbox(_: argparse.Namespace) -> int:
    settings = get_settings()
    shell = build_shell(settings, StaticLocationProvider())
    delivered = shell.flush_outbox()
    print(f"delivered={delivered} remaining={len(shell.outbox)}")
    return 0 if not shell.outbox else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the SIAP Visit CLI."""
    parser = argparse.ArgumentParser(prog="siap")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance in meters between two points.")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lon1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lon2", type=float)
    dist.set_defaults(func=_cmd_distance)

    geo = sub.add_parser("geofence", help="Check a captured position against a school coordinate.")
    geo.add_argument("--lat", required=True, type=float)
    geo.add_argument("--lon", required=True, type=float)
    geo.add_argument("--school-lat", type=float, default=None)
    geo.add_argument("--school-lon", type=float, default=None)
    geo.add_argument("--radius", type=float, default=None, help="Meters; defaults to geofence.radius_m")
    geo.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    geo.set_defaults(func=_cmd_geofence)

    sync = sub.add_parser("sync", help="Pull schools and visits into the local cache.")
    sync.add_argument("--inspector-id", type=str, default=None)
    sync.set_defaults(func=_cmd_sync)

    flush = sub.add_parser("flush-outbox", help="Retry visits whose submission failed.")
    flush.set_defaults(func=_cmd_flush_outbox)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m siap.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
