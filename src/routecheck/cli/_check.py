"""``routecheck check`` — the drift report command.

Loads the config and application model, runs both analyses, and prints
the report to stdout.  Exits with code 1 if anything was found or if
loading failed.
"""

import argparse
import sys

from routecheck.checker import RouteChecker
from routecheck.cli._load import load_check_config, load_model
from routecheck.errors import RouteCheckError


def run_check(args: argparse.Namespace) -> None:
    """Check ``args.root`` and print the report.

    Raises ``SystemExit(1)`` when violations are reported or when the
    config, model, or a parser fails.
    """
    try:
        config = load_check_config(args)
        model = load_model(args)
        report = RouteChecker(model, config).check(
            routes=not args.skip_routes,
            helpers=not args.skip_helpers,
        )
    except RouteCheckError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.format == "json":
        print(report.render_json())
    else:
        sys.stdout.write(report.render_text())

    if not report.ok:
        raise SystemExit(1)
