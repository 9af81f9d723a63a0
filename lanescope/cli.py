"""
LaneScope CLI
=============

Inspect lanes without running the API server.

COMMANDS:
- view:     Scale a lane and print its view as JSON
- inspect:  Print structural diagnostics for a lane

A lane comes either from the lane server (by id) or from a JSON file.

USAGE:
    python -m lanescope.cli view 680bc0 --width 1280 --height 720
    python -m lanescope.cli inspect --file lane.json
"""
import argparse
import json
import sys
from typing import List, Optional

from .config import LaneScopeConfig
from .contracts.base import LanePayloadError
from .contracts.lane import Lane
from .engine import LaneScopeBackend
from .ingestion.fetcher import LaneFetcher
from .logging_config import configure_logging


def load_lane(args: argparse.Namespace, config: LaneScopeConfig) -> Lane:
    """Load from --file or fetch by id. Exits with status 1 on failure."""
    if args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as f:
                return Lane.from_dict(json.load(f))
        except (OSError, json.JSONDecodeError, LanePayloadError) as e:
            print(f"[!] {args.file}: {e}", file=sys.stderr)
            sys.exit(1)

    lane_id = args.lane_id or config.default_lane_id
    fetcher = LaneFetcher(base_url=config.api_base_url, timeout=config.request_timeout)
    result = fetcher.fetch_sync(lane_id)
    if not result.is_success:
        print(f"[!] could not fetch lane {lane_id}: {result.error.message}", file=sys.stderr)
        sys.exit(1)
    return result.lane


def cmd_view(args: argparse.Namespace, config: LaneScopeConfig) -> None:
    backend = LaneScopeBackend(config)
    lane = load_lane(args, config)
    view = backend.build_view(lane, args.width, args.height, args.margin)
    print(json.dumps(view.to_dict(), indent=2))


def cmd_inspect(args: argparse.Namespace, config: LaneScopeConfig) -> None:
    backend = LaneScopeBackend(config)
    lane = load_lane(args, config)
    metrics = backend.inspect(lane)

    print(f"Lane {lane.id} ({lane.name})")
    print(f"  vertices:        {metrics.node_count}")
    print(f"  edges:           {metrics.edge_count}")
    print(f"  dangling edges:  {metrics.dangling_edge_count}")
    print(f"  components:      {metrics.component_count}")
    print(f"  entry vertices:  {list(metrics.entry_vertex_ids)}")
    print(f"  unreachable:     {list(metrics.unreachable_vertex_ids)}")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="LaneScope lane inspector")
    parser.add_argument("--log-level", default=None, help="Logging level (default from env)")

    subparsers = parser.add_subparsers(dest="command")

    for name, help_text in (("view", "Print scaled view"), ("inspect", "Print diagnostics")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("lane_id", nargs="?", help="Lane id on the lane server")
        sub.add_argument("--file", "-f", help="Read the lane from a JSON file instead")
        if name == "view":
            sub.add_argument("--width", type=float, default=None)
            sub.add_argument("--height", type=float, default=None)
            sub.add_argument("--margin", type=float, default=None)

    args = parser.parse_args(argv)

    config = LaneScopeConfig.from_env()
    configure_logging(args.log_level or config.log_level)

    if args.command == "view":
        cmd_view(args, config)
    elif args.command == "inspect":
        cmd_inspect(args, config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
