"""Check results and their text/JSON renderings.

The text report is rendered from an inline kida template::

    report = checker.check()
    print(report.render_text())

Example output::

    The following 1 route(s) are defined, but have no corresponding controller action.
    If you have recently added a route to routes.rb, make sure a matching action exists in the controller.
    If you have recently removed a controller action, also remove the route in routes.rb.
     - home#about

    The following 1 url and path method(s) don't correspond to any route.
     - app/views/home/index.html.erb:3 - call to fake_thing_path
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from kida import Environment

from routecheck.model import HelperCall, RouteViolation

_CLEAN_MESSAGE = (
    "All routes have corresponding actions and all path helpers correspond to routes."
)

_TEXT_TEMPLATE = """\
{% if routes %}
The following {{ routes | length }} route(s) are defined, but have no corresponding controller action.
If you have recently added a route to routes.rb, make sure a matching action exists in the controller.
If you have recently removed a controller action, also remove the route in routes.rb.
{% for route in routes %}
 - {{ route }}
{% end %}
{% end %}
{% if routes and calls %}

{% end %}
{% if calls %}
The following {{ calls | length }} url and path method(s) don't correspond to any route.
{% for call in calls %}
 - {{ call }}
{% end %}
{% end %}
{% if not routes and not calls %}
{{ clean }}
{% end %}
"""


@dataclass(slots=True)
class CheckReport:
    """Findings of one checker run."""

    routes_without_actions: list[RouteViolation] = field(default_factory=list)
    undefined_path_method_calls: list[HelperCall] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.routes_without_actions and not self.undefined_path_method_calls

    def to_dict(self) -> dict[str, Any]:
        return {
            "routes_without_actions": [
                {"controller": v.controller, "action": v.action}
                for v in self.routes_without_actions
            ],
            "undefined_path_method_calls": [
                {"filename": c.filename, "line": c.line, "method": c.name}
                for c in self.undefined_path_method_calls
            ],
        }

    def render_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def render_text(self) -> str:
        """Human-readable report."""
        template = _environment().from_string(_TEXT_TEMPLATE)
        text = template.render(
            routes=[str(v) for v in self.routes_without_actions],
            calls=[str(c) for c in self.undefined_path_method_calls],
            clean=_CLEAN_MESSAGE,
        )
        return text.strip("\n") + "\n"


def _environment() -> Environment:
    # Plain text output: no HTML escaping, tags don't leave blank lines
    return Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)
