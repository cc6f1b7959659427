"""Beacon CLI — beacon status / beacon redirect / beacon watch.

Entry point for the ``beacon`` command-line interface.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from beacon.config import BeaconConfig


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the beacon CLI."""
    parser = argparse.ArgumentParser(
        prog="beacon",
        description="Service health and redirect checks for a web page.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # beacon status
    status_parser = subparsers.add_parser(
        "status",
        help="Poll the health endpoint once",
    )
    status_parser.add_argument("root", nargs="?", default=".", help="Directory holding beacon.yaml")
    status_parser.add_argument("--base-url", default=None, help="Service origin")
    status_parser.add_argument("--timeout", type=float, default=None, help="Seconds")

    # beacon redirect
    redirect_parser = subparsers.add_parser(
        "redirect",
        help="Check that a URL redirects to the expected target",
    )
    redirect_parser.add_argument("source", nargs="?", default=None, help="URL to probe")
    redirect_parser.add_argument(
        "expected", nargs="?", default=None, help="Substring the Location must contain",
    )
    redirect_parser.add_argument("--root", default=".", help="Directory holding beacon.yaml")
    redirect_parser.add_argument("--timeout", type=float, default=None, help="Seconds")

    # beacon watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Poll the health endpoint until interrupted",
    )
    watch_parser.add_argument("root", nargs="?", default=".", help="Directory holding beacon.yaml")
    watch_parser.add_argument("--base-url", default=None, help="Service origin")
    watch_parser.add_argument("--interval", type=float, default=None, help="Seconds between polls")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from beacon import __version__

    return __version__


async def _status(config: BeaconConfig) -> int:
    from beacon.app import Beacon
    from beacon.monitor.status import StatusState
    from beacon.render import ConsoleSink

    page = Beacon(config, sink=ConsoleSink())
    try:
        report = await page.check_status()
    finally:
        await page.close()
    return 0 if report.state is StatusState.ACTIVE else 1


async def _redirect(config: BeaconConfig, source: str | None, expected: str | None) -> int:
    from beacon.app import Beacon
    from beacon.render import ConsoleSink

    page = Beacon(config, sink=ConsoleSink())
    try:
        result = await page.test_redirect(source, expected)
    finally:
        await page.close()
    return 0 if result.ok else 1


async def _watch(config: BeaconConfig) -> int:
    from beacon.app import Beacon
    from beacon.render import ConsoleSink

    page = Beacon(config, sink=ConsoleSink())
    task = page.status.start()
    try:
        await asyncio.Event().wait()
    finally:
        task.stop()
        await page.close()
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from beacon._errors import ConfigError
    from beacon.config_loader import load_config

    try:
        if args.command == "status":
            config = load_config(
                Path(args.root), base_url=args.base_url, health_timeout=args.timeout,
            )
            code = asyncio.run(_status(config))
        elif args.command == "redirect":
            config = load_config(Path(args.root), redirect_timeout=args.timeout)
            source = args.source or config.redirect_source_url
            expected = args.expected if args.expected is not None else config.redirect_expected_target
            if not source:
                parser.error("redirect needs a source URL (argument or redirect_source_url)")
            code = asyncio.run(_redirect(config, source, expected))
        else:
            config = load_config(
                Path(args.root), base_url=args.base_url, poll_interval=args.interval,
            )
            code = asyncio.run(_watch(config))
    except ConfigError as exc:
        print(f"  Config error: {exc}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        code = 0

    sys.exit(code)


if __name__ == "__main__":
    main()
