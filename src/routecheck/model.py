"""Application model records.

Immutable frozen dataclasses describing what the host application
declares: its routes, and for every controller the actions, instance
methods, view helpers, and templates it can serve.  Built once per run
by :mod:`routecheck.app_model`.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol, runtime_checkable


@runtime_checkable
class LookupContext(Protocol):
    """Answers whether a template exists for implicit rendering."""

    def template_exists(self, path: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class ViewLookup:
    """Filesystem lookup context over a controller's view paths.

    ``template_exists("home/about")`` is true when any view path holds
    ``home/about.<format>.<handler>`` (or any other extension chain).
    Unreadable directories count as missing.
    """

    view_paths: tuple[Path, ...]

    def template_exists(self, path: str) -> bool:
        directory, _, stem = path.rpartition("/")
        if not stem:
            return False
        prefix = f"{stem}."
        for view_path in self.view_paths:
            folder = view_path / directory if directory else view_path
            try:
                entries = list(folder.iterdir())
            except OSError:
                continue
            for entry in entries:
                if entry.name.startswith(prefix) and entry.is_file():
                    return True
        return False


@dataclass(frozen=True, slots=True)
class Route:
    """One registered route entry.

    ``name`` is the route name behind the generated ``<name>_path`` and
    ``<name>_url`` helpers; routes without a name have no helpers.
    """

    controller: str
    action: str
    name: str | None = None
    verb: str = ""
    path: str = ""


@dataclass(frozen=True, slots=True)
class ControllerInfo:
    """What a single controller exposes.

    Attributes:
        actions: Explicitly defined action methods.
        instance_methods: Every instance method, inherited ones included.
        helpers: View helper methods visible to the controller's templates.
        lookup_context: Template lookup for implicit rendering, if any.
    """

    actions: frozenset[str] = frozenset()
    instance_methods: frozenset[str] = frozenset()
    helpers: frozenset[str] = frozenset()
    lookup_context: LookupContext | None = None


@dataclass(frozen=True, slots=True)
class AppModel:
    """Snapshot of the host application's routing and controllers."""

    routes: Sequence[Route] = ()
    controller_information: Mapping[str, ControllerInfo] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    all_route_names: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class RouteViolation:
    """A route whose target is neither an action nor an implicit template."""

    controller: str
    action: str

    def __str__(self) -> str:
        return f"{self.controller}#{self.action}"


@dataclass(frozen=True, slots=True)
class HelperCall:
    """A path/URL helper invocation site."""

    filename: str
    line: int
    name: str

    def __str__(self) -> str:
        return f"{self.filename}:{self.line} - call to {self.name}"
