"""Command line entry point.

``marsdash serve`` runs the proxy; ``marsdash dashboard`` drives the
dashboard against a running proxy and rewrites the rendered page on every
state change.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from marsdash import server
from marsdash.client import ProxyClient
from marsdash.config import ApiVariant, DashboardConfig
from marsdash.dashboard import Dashboard, file_sink
from marsdash.exceptions import MarsDashError

_logger = logging.getLogger("marsdash")


def _add_common_options(parser: argparse.ArgumentParser, *, suppress: bool = False) -> None:
    unset = argparse.SUPPRESS if suppress else None
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--variant",
        choices=[variant.value for variant in ApiVariant],
        default=unset,
        help="API surface to use (default: MARSDASH_VARIANT or 'photos')",
    )
    parser.add_argument("--static-dir", type=Path, default=unset, help="Directory served at / (default: ./public)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="marsdash", description="Mars rover dashboard and NASA API proxy")
    _add_common_options(parser)
    # Accepted after the subcommand too; SUPPRESS keeps an omitted option from
    # overwriting one given before the subcommand.
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, suppress=True)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", parents=[common], help="Run the proxy server")
    serve.add_argument("--host", help="Bind address (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, help="Listen port (default: 3000)")

    dash = sub.add_parser("dashboard", parents=[common], help="Render the dashboard from a running proxy")
    dash.add_argument("--proxy-url", help="Proxy base URL (default: http://localhost:3000)")
    dash.add_argument(
        "--rover",
        action="append",
        default=[],
        metavar="NAME",
        help="Rover to select after the initial load (repeatable)",
    )
    dash.add_argument("--output", type=Path, help="Rendered page path (default: <static-dir>/index.html)")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        stream=sys.stdout,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run_dashboard(config: DashboardConfig, rovers: list[str], output: Path) -> bool:
    """Load the initial rover, then select each of *rovers* in turn.

    Returns ``False`` when the final snapshot carries an error.
    """
    async with ProxyClient(config) as client:
        dashboard = Dashboard(config, client, sink=file_sink(output))
        await dashboard.start()
        for rover in rovers:
            await dashboard.select(rover)
        await dashboard.wait_idle()

    state = dashboard.state
    if state.error:
        _logger.error("%s: %s", state.selected_rover, state.error)
        return False
    _logger.info(
        "Rendered %s (%d render(s), cached rovers: %s) to %s",
        state.selected_rover,
        dashboard.store.render_count,
        ", ".join(sorted(state.rover_data)) or "none",
        output,
    )
    return True


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = DashboardConfig.from_env(
            variant=args.variant,
            static_dir=args.static_dir,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            proxy_url=getattr(args, "proxy_url", None),
        )
        if args.command == "serve":
            server.run(config)
            return 0

        unknown = [rover for rover in args.rover if rover not in config.rover_names]
        if unknown:
            _logger.error(
                "Unknown rover(s): %s (expected one of: %s)",
                ", ".join(unknown),
                ", ".join(config.rover_names),
            )
            return 2
        output = args.output or config.static_dir / "index.html"
        return 0 if asyncio.run(run_dashboard(config, args.rover, output)) else 1
    except KeyboardInterrupt:
        _logger.info("Stopped by user")
        return 0
    except MarsDashError as exc:
        _logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
