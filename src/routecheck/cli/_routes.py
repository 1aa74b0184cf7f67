"""``routecheck routes`` — list routes from the application model.

Prints VERB, PATH, and CONTROLLER#ACTION for every auditable route, in
the order the application declares them.
"""

import argparse
import sys
from collections.abc import Sequence

from routecheck.cli._load import load_model
from routecheck.errors import RouteCheckError
from routecheck.model import Route

_HEADER = ("VERB", "PATH", "TARGET")
_MAX_RULE = 80


def run_routes(args: argparse.Namespace) -> None:
    """List the routes of the application under ``args.root``."""
    try:
        model = load_model(args)
    except RouteCheckError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not model.routes:
        print("No routes registered.")
        return

    for line in format_route_table(model.routes):
        print(line)


def format_route_table(routes: Sequence[Route]) -> list[str]:
    """Header, rule, and one aligned line per route."""
    rows = [_HEADER, *(_route_row(route) for route in routes)]
    verb_width = max(len(row[0]) for row in rows)
    path_width = max(len(row[1]) for row in rows)

    lines = [f"{verb:<{verb_width}}  {path:<{path_width}}  {target}" for verb, path, target in rows]
    rule = min(max(len(line) for line in lines), _MAX_RULE)
    lines.insert(1, "-" * rule)
    return lines


def _route_row(route: Route) -> tuple[str, str, str]:
    target = f"{route.controller}#{route.action}"
    if route.name:
        target = f"{target} ({route.name})"
    return (route.verb or "ANY", route.path, target)
