"""Command-line interface for circuit JSON to DSN conversion.

Commands:
    convert: Convert a circuit JSON file to a Specctra DSN file.
    route: Route a DSN file with the Freerouting API and write the session.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from . import __version__
from .api import load_circuit_json, write_dsn
from .config import AppConfig, load_config
from .hashing import canonical_json_dumps
from .routing import FreeroutingClient, summarize_session

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``circuit-dsn`` CLI."""
    parser = argparse.ArgumentParser(
        prog="circuit-dsn",
        description="Convert circuit JSON boards to Specctra DSN and route them",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: ./circuit_dsn.yaml if present)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert circuit JSON to DSN")
    convert.add_argument("input", type=Path, help="Circuit JSON (.json) or YAML (.yaml) file")
    convert.add_argument("--out", type=Path, required=True, help="Output .dsn path")
    convert.add_argument("--design-name", default=None, help="Override the DSN design name")
    convert.add_argument("--json", action="store_true", help="Print a JSON result summary")

    route = subparsers.add_parser("route", help="Route a DSN file with Freerouting")
    route.add_argument("dsn", type=Path, help="Input .dsn file")
    route.add_argument("--out", type=Path, required=True, help="Output .ses path")
    route.add_argument("--base-url", default=None, help="Override the Freerouting API base URL")
    route.add_argument("--json", action="store_true", help="Print a JSON routing summary")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.WARNING
    if args.verbose >= 1:
        log_level = logging.INFO
    if args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    try:
        config = load_config(args.config)
        if args.command == "convert":
            return _cmd_convert(args, config)
        if args.command == "route":
            return _cmd_route(args, config)
        parser.error(f"Unknown command: {args.command}")
        return 2
    except Exception as e:
        logger.error("Error: %s", e)
        if args.verbose >= 2:
            import traceback

            traceback.print_exc()
        return 1


def _cmd_convert(args: argparse.Namespace, config: AppConfig) -> int:
    """Handle convert command."""
    if not args.input.exists():
        logger.error("Input file not found: %s", args.input)
        return 1

    converter_config = config.converter
    if args.design_name:
        converter_config = replace(converter_config, design_name=args.design_name)

    records = load_circuit_json(args.input)
    result = write_dsn(records, args.out, config=converter_config)

    if args.json:
        _emit_json(result.to_dict())
    else:
        print(f"Wrote {result.path}")
        print(f"  sha256: {result.sha256}")
        for name, count in result.counts.items():
            print(f"  {name}: {count}")
    return 0


def _cmd_route(args: argparse.Namespace, config: AppConfig) -> int:
    """Handle route command."""
    if not args.dsn.exists():
        logger.error("DSN file not found: %s", args.dsn)
        return 1

    routing_config = config.freerouting
    if args.base_url:
        routing_config = replace(routing_config, base_url=args.base_url)

    client = FreeroutingClient(routing_config)
    ses_text = client.route(args.dsn.read_text(encoding="utf-8"))
    args.out.parent.mkdir(parents=True, exist_ok=True)
    args.out.write_text(ses_text, encoding="utf-8")
    summary = summarize_session(ses_text)

    if args.json:
        _emit_json({"path": str(args.out), **summary.to_dict()})
    else:
        print(f"Wrote {args.out}")
        print(f"  routed nets: {len(summary.routed_nets)}")
        print(f"  wires: {summary.wire_count}")
        print(f"  vias: {summary.via_count}")
    return 0


def _emit_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(f"{canonical_json_dumps(payload)}\n")


if __name__ == "__main__":
    sys.exit(main())
