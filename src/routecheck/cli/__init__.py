"""routecheck CLI — route/action and path helper drift checks.

Entry point registered as ``routecheck`` in ``pyproject.toml``::

    [project.scripts]
    routecheck = "routecheck.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``routecheck`` command."""
    parser = argparse.ArgumentParser(
        prog="routecheck",
        description="routecheck — find routes without actions and path helpers without routes.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- routecheck check -------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Check routes and path helper calls")
    _add_project_arguments(check_parser)
    check_parser.add_argument(
        "--config",
        default=None,
        help="YAML config file (default: <root>/.routecheck.yml when present)",
    )
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format",
    )
    check_parser.add_argument(
        "--skip-routes",
        action="store_true",
        help="Do not check routes for missing actions",
    )
    check_parser.add_argument(
        "--skip-helpers",
        action="store_true",
        help="Do not check path/url helper calls",
    )
    check_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every scanned file",
    )

    # -- routecheck routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes from the application model")
    _add_project_arguments(routes_parser)

    # -- routecheck dump-script -------------------------------------------
    subparsers.add_parser(
        "dump-script",
        help="Print the Ruby script that dumps the application model as JSON",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
    )

    if args.command == "check":
        from routecheck.cli._check import run_check

        run_check(args)
    elif args.command == "routes":
        from routecheck.cli._routes import run_routes

        run_routes(args)
    elif args.command == "dump-script":
        from routecheck.app_model import DUMP_SCRIPT

        sys.stdout.write(DUMP_SCRIPT)


def _add_project_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Rails project root (default: current directory)",
    )
    subparser.add_argument(
        "--model",
        default=None,
        help="Application model JSON from `routecheck dump-script` "
        "(default: run bin/rails runner)",
    )
