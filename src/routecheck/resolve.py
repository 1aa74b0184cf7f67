"""Controller resolution by file-path convention.

Maps a view template or controller source file to the controller that
owns it.  Resolution looks only at the path and at which controller
files exist on disk, never at file contents:

- ``app/views/admin/users/index.html.erb`` tries ``admin/users``, then
  ``admin``, then falls back to ``application``
- ``app/controllers/admin/users_controller.rb`` resolves to
  ``admin/users`` when that file exists, else ``application``

The name-level functions take an ``exists`` predicate so they stay pure;
the ``controller_from_*`` wrappers bind it to the project root and look
the name up in the ignore-filtered controller information.  A controller
that exists on disk but is ignored therefore resolves to ``None``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from routecheck.context import CheckContext
    from routecheck.model import ControllerInfo

APPLICATION_CONTROLLER = "application"

_CONTROLLER_FILE_RE = re.compile(r"app/controllers/(.*)_controller\.rb")


def controller_exists(root: str | Path, name: str | None) -> bool:
    """True if ``app/controllers/{name}_controller.rb`` is a file under ``root``."""
    if not name:
        return False
    try:
        return (Path(root) / "app" / "controllers" / f"{name}_controller.rb").is_file()
    except OSError:
        return False


def controller_name_from_view_file(filename: str, exists: Callable[[str], bool]) -> str:
    """Walk from the template's directory up to the first existing controller.

    The segment after ``app`` (``views``, ``components``, ...) and the
    file name itself are not part of the controller path.
    """
    parts = filename.split("/")
    try:
        start = parts.index("app") + 2
    except ValueError:
        candidate: list[str] = []
    else:
        candidate = parts[start:-1]

    while candidate:
        name = "/".join(candidate)
        if exists(name):
            return name
        candidate = candidate[:-1]
    return APPLICATION_CONTROLLER


def controller_name_from_ruby_file(filename: str, exists: Callable[[str], bool]) -> str:
    """Derive the controller name from a ``*_controller.rb`` path."""
    match = _CONTROLLER_FILE_RE.search(filename)
    name = match.group(1) if match else None
    if name and exists(name):
        return name
    return APPLICATION_CONTROLLER


def controller_from_view_file(context: CheckContext, filename: str) -> ControllerInfo | None:
    name = controller_name_from_view_file(filename, _exists_in(context))
    return context.controller_information.get(name)


def controller_from_ruby_file(context: CheckContext, filename: str) -> ControllerInfo | None:
    name = controller_name_from_ruby_file(filename, _exists_in(context))
    return context.controller_information.get(name)


def _exists_in(context: CheckContext) -> Callable[[str], bool]:
    root = context.root
    return lambda name: controller_exists(root, name)
