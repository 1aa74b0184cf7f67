"""Reconciliation engine — cross-references routes, controllers, and helper calls.

Two analyses over one application model:

1. **Routes without actions**: every route must land on a declared
   action or on a template the controller can render implicitly.
2. **Undefined path method calls**: every ``*_path`` / ``*_url`` call in
   ERB, Haml, and controller sources must name a route, a whitelisted
   exception, or a helper/method owned by the file's controller.

Usage::

    model = load_app_model_file("routes.json", root=".")
    checker = RouteChecker(model, load_config(".routecheck.yml"))
    report = checker.check()
    if not report.ok:
        print(report.render_text())

A checker keeps no state besides its :class:`CheckContext`; create a new
one for every run.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from routecheck.config import CheckConfig
from routecheck.context import CheckContext
from routecheck.discovery import discover_files
from routecheck.model import AppModel, ControllerInfo, HelperCall, RouteViolation
from routecheck.parsers import Dialect, ParserSupport, load_parser, probe_support
from routecheck.report import CheckReport
from routecheck.resolve import controller_from_ruby_file, controller_from_view_file

logger = logging.getLogger("routecheck")

_HELPER_SUFFIX_RE = re.compile(r"_(?:url|path)$")


def normalize_helper_name(name: str) -> str:
    """``user_path`` → ``user``: the route name a helper would belong to."""
    return _HELPER_SUFFIX_RE.sub("", name, count=1)


# ---------------------------------------------------------------------------
# Helper call filter
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HelperCallFilter:
    """Decides whether a helper call found in one file is a violation.

    Parsers call it once per candidate; True means "report this".

    Attributes:
        filename: Root-relative file the calls come from.
        owned_names: Helpers (templates) or instance methods (controllers)
            of the file's controller.  Matched against the raw name.
        route_names: Every named route in the application.
        ignored_paths: Route names ignored everywhere.
        whitelist: Names exempted for this file only.
    """

    filename: str
    owned_names: frozenset[str]
    route_names: frozenset[str]
    ignored_paths: frozenset[str] = frozenset()
    whitelist: frozenset[str] = frozenset()

    def accept(self, name: str) -> bool:
        route_name = normalize_helper_name(name)
        if route_name in self.ignored_paths:
            return False
        if name in self.whitelist or route_name in self.whitelist:
            return False
        if route_name in self.route_names:
            return False
        return name not in self.owned_names

    def __call__(self, name: str) -> bool:
        return self.accept(name)


# ---------------------------------------------------------------------------
# Dialect passes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Pass:
    """How one dialect's files map to controllers and owned names."""

    dialect: Dialect
    resolve: Callable[[CheckContext, str], ControllerInfo | None]
    owned: Callable[[ControllerInfo], frozenset[str]]


_PASSES: tuple[_Pass, ...] = (
    _Pass(Dialect.ERB, controller_from_view_file, lambda info: info.helpers),
    _Pass(Dialect.HAML, controller_from_view_file, lambda info: info.helpers),
    _Pass(Dialect.RUBY, controller_from_ruby_file, lambda info: info.instance_methods),
)


# ---------------------------------------------------------------------------
# Checker
# ---------------------------------------------------------------------------


class RouteChecker:
    """Finds routes without actions and helper calls without routes."""

    __slots__ = ("_context",)

    def __init__(self, model: AppModel, config: CheckConfig | None = None) -> None:
        self._context = CheckContext.build(config or CheckConfig(), model)

    @property
    def context(self) -> CheckContext:
        return self._context

    @property
    def config(self) -> CheckConfig:
        return self._context.config

    def check(self, *, routes: bool = True, helpers: bool = True) -> CheckReport:
        """Run the enabled analyses and collect their findings."""
        report = CheckReport()
        if routes:
            report.routes_without_actions = self.routes_without_actions()
        if helpers:
            report.undefined_path_method_calls = self.undefined_path_method_calls()
        return report

    # -- routes → actions --------------------------------------------------

    def routes_without_actions(self) -> list[RouteViolation]:
        """Routes whose target action cannot be served.

        Ignored controllers and controllers missing from the model are
        out of scope.  Route order is kept; duplicates are not removed.
        """
        violations: list[RouteViolation] = []
        for route in self._context.model.routes:
            if route.controller in self.config.ignored_controllers:
                continue
            if route.controller not in self._context.controller_information:
                continue
            if self.controller_has_action(route.controller, route.action):
                continue
            violations.append(RouteViolation(controller=route.controller, action=route.action))
        return violations

    def controller_has_action(self, controller: str, action: str) -> bool:
        """True if ``controller`` declares ``action`` or can render it implicitly."""
        info = self._context.controller_information.get(controller)
        if info is None:
            return False
        if action in info.actions:
            return True
        lookup = info.lookup_context
        return lookup is not None and lookup.template_exists(f"{controller}/{action}")

    # -- helper calls → routes ----------------------------------------------

    def undefined_path_method_calls(self) -> list[HelperCall]:
        """Helper calls in ERB, Haml, and controller files that match nothing."""
        calls: list[HelperCall] = []
        for spec in _PASSES:
            calls.extend(self._scan(spec))
        return calls

    def helper_filter(self, filename: str, owned_names: frozenset[str]) -> HelperCallFilter:
        """Build the accept predicate for one file."""
        config = self.config
        return HelperCallFilter(
            filename=filename,
            owned_names=owned_names,
            route_names=self._context.model.all_route_names,
            ignored_paths=config.ignored_paths,
            whitelist=config.whitelist_for(filename),
        )

    def _scan(self, spec: _Pass) -> list[HelperCall]:
        files = discover_files(self.config.root, spec.dialect)
        support = probe_support(spec.dialect, files, self.config)
        if support is ParserSupport.NOT_APPLICABLE:
            return []
        if support is ParserSupport.UNAVAILABLE:
            logger.warning(
                "There are %s files in your codebase, but the %s parser couldn't load; "
                "skipping %d file(s).",
                spec.dialect.name.title(),
                spec.dialect.name.title(),
                len(files),
            )
            return []

        parser = load_parser(spec.dialect, self.config)
        found: list[HelperCall] = []
        for filename in files:
            controller = spec.resolve(self._context, filename)
            if controller is None:
                logger.debug("Skipping %s: its controller is ignored or unknown", filename)
                continue
            logger.debug("Scanning %s", filename)
            found.extend(parser.run(filename, self.helper_filter(filename, spec.owned(controller))))
        return found
