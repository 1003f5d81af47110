"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from isochrone_heatmap import __version__
from isochrone_heatmap.config import get_settings
from isochrone_heatmap.schemas import InvalidRequestError

DEFAULT_OUTPUT = "data/derived/isochrone.json"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="isochrone-heatmap",
        description="Walking and public transit travel-time heatmaps around a point",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'build' command - compute a heatmap and save it
    build_parser = subparsers.add_parser("build", help="Compute an isochrone heatmap")
    build_parser.add_argument("--lat", type=float, required=True, help="Origin latitude")
    build_parser.add_argument("--lng", type=float, required=True, help="Origin longitude")
    build_parser.add_argument(
        "--radius", type=float, default=None, help="Radius in meters (default: from settings)"
    )
    build_parser.add_argument(
        "--max-minutes", type=float, default=None, help="Upper end of the colour scale"
    )
    build_parser.add_argument(
        "--departure",
        choices=["now", "custom"],
        default="now",
        help="Use the current time or --day-type/--time (default: now)",
    )
    build_parser.add_argument(
        "--day-type", choices=["weekday", "saturday", "sunday"], default="weekday"
    )
    build_parser.add_argument("--time", default="08:30", help="Departure time HH:MM")
    build_parser.add_argument(
        "--output",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Output JSON path (default: {DEFAULT_OUTPUT})",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Transit enabled: {settings.transit_enabled}")
    print(f"Grid size: {settings.grid_size_meters:g} m")
    print(f"Radius range: {settings.min_radius_meters:g}-{settings.max_radius_meters:g} m")
    print(f"Max transit samples: {settings.max_transit_samples}")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Handle the 'build' command: compute a heatmap and save it."""
    # Deferred: importing the flow builds the engine and loads Prefect
    from isochrone_heatmap.flows.isochrone import build_isochrone

    request = {
        "origin": {"lat": args.lat, "lng": args.lng},
        "radiusMeters": args.radius,
        "maxMinutes": args.max_minutes,
        "departureMode": args.departure,
        "dayType": args.day_type,
        "time": args.time,
    }
    try:
        stats = build_isochrone(request, args.output)
    except InvalidRequestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(
        f"Done: {stats['totalGridCells']} cells, "
        f"{stats['apiFailures']} failed transit lookups, "
        f"{stats['cacheHits']} cache hits."
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "build": cmd_build,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
