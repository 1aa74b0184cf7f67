"""Application model loading.

The host application describes itself as JSON, either ahead of time::

    bin/rails runner "$(routecheck dump-script)" > routes.json
    routecheck check --model routes.json

or on demand, in which case :func:`dump_app_model` runs the same script
under ``bin/rails runner`` in the project root.  Either way the JSON is
turned into an immutable :class:`~routecheck.model.AppModel` by
:func:`app_model_from_dict`.

Routes the checker cannot audit are dropped here: redirects and mounted
engines (no controller or action) and the framework's own ``rails/``
controllers.
"""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from routecheck.errors import AppModelError
from routecheck.model import AppModel, ControllerInfo, Route, ViewLookup

logger = logging.getLogger("routecheck.app_model")

# Controllers provided by the framework itself
_INTERNAL_PREFIXES = ("rails/",)

# Ruby run inside the host application; prints the model JSON on stdout
DUMP_SCRIPT = """\
require "json"

Rails.application.eager_load!

routes = Rails.application.routes.routes.map do |route|
  {
    controller: route.requirements[:controller],
    action: route.requirements[:action],
    name: route.name,
    verb: route.verb.to_s,
    path: route.path.spec.to_s
  }
end

bases = [ActionController::Base]
bases << ActionController::API if defined?(ActionController::API)

controllers = bases.flat_map(&:descendants).each_with_object({}) do |controller, info|
  # Anonymous classes have no controller_path
  next if controller.name.nil?

  # Private helpers are callable from the controller's own file
  methods = controller.instance_methods + controller.private_instance_methods
  info[controller.controller_path] = {
    # Abstract controllers serve no actions but their files are still scanned
    actions: controller.abstract? ? [] : controller.action_methods.to_a,
    instance_methods: methods.map(&:to_s).uniq,
    helpers: controller.respond_to?(:helpers) ? controller.helpers.methods.map(&:to_s) : [],
    view_paths: controller.respond_to?(:view_paths) ? controller.view_paths.map(&:to_s) : []
  }
end

puts JSON.generate(
  routes: routes,
  route_names: routes.map { |r| r[:name] }.compact.uniq,
  controllers: controllers
)
"""


def load_app_model_file(path: str | Path, *, root: str | Path = ".") -> AppModel:
    """Load a model previously dumped to ``path``.

    Raises:
        AppModelError: If the file cannot be read or is not a valid model.
    """
    model_path = Path(path)
    try:
        text = model_path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read application model {str(model_path)!r}: {exc}"
        raise AppModelError(msg) from exc
    return app_model_from_json(text, root=root)


def dump_app_model(
    root: str | Path = ".",
    *,
    command: tuple[str, ...] = ("bin/rails", "runner"),
    timeout: float | None = None,
) -> AppModel:
    """Ask the Rails application under ``root`` to describe itself.

    Raises:
        AppModelError: If the runner cannot start, fails, or prints
            something other than the model JSON.
    """
    project_root = Path(root)
    cmd = [*command, DUMP_SCRIPT]
    logger.debug("Dumping application model with %s in %s", " ".join(command), project_root)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(project_root),
            check=False,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        msg = f"Cannot run {' '.join(command)!r} in {str(project_root)!r}: {exc}"
        raise AppModelError(msg) from exc

    if proc.returncode != 0:
        detail = (proc.stderr or "").strip().splitlines()
        msg = f"{' '.join(command)!r} exited with status {proc.returncode}"
        if detail:
            msg = f"{msg}: {detail[-1]}"
        raise AppModelError(msg)

    # Boot output (deprecation notices, etc.) may precede the JSON line
    lines = [line for line in proc.stdout.splitlines() if line.strip()]
    if not lines:
        msg = f"{' '.join(command)!r} printed no application model"
        raise AppModelError(msg)
    return app_model_from_json(lines[-1], root=project_root)


def app_model_from_json(text: str, *, root: str | Path = ".") -> AppModel:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Application model is not valid JSON: {exc}"
        raise AppModelError(msg) from exc
    return app_model_from_dict(data, root=root)


def app_model_from_dict(data: Any, *, root: str | Path = ".") -> AppModel:
    """Build an AppModel from the dumped JSON structure.

    Relative ``view_paths`` are resolved against ``root``.
    """
    if not isinstance(data, Mapping):
        msg = f"Application model must be an object, got {type(data).__name__}"
        raise AppModelError(msg)

    routes = tuple(_routes(data.get("routes") or []))

    names = data.get("route_names")
    if names is None:
        route_names = frozenset(r.name for r in routes if r.name)
    else:
        route_names = frozenset(_strings(names, "route_names"))

    controllers_raw = data.get("controllers") or {}
    if not isinstance(controllers_raw, Mapping):
        msg = "'controllers' must map controller paths to their information"
        raise AppModelError(msg)
    controllers = {
        str(name): _controller_info(str(name), info, Path(root))
        for name, info in controllers_raw.items()
    }

    return AppModel(
        routes=routes,
        controller_information=MappingProxyType(controllers),
        all_route_names=route_names,
    )


def _routes(raw: Any) -> list[Route]:
    if not isinstance(raw, list):
        msg = f"'routes' must be a list, got {type(raw).__name__}"
        raise AppModelError(msg)

    routes: list[Route] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            msg = f"Route entries must be objects, got {entry!r}"
            raise AppModelError(msg)
        controller = entry.get("controller")
        action = entry.get("action")
        if not controller or not action:
            continue
        if str(controller).startswith(_INTERNAL_PREFIXES):
            continue
        routes.append(Route(
            controller=str(controller),
            action=str(action),
            name=entry.get("name") or None,
            verb=str(entry.get("verb") or ""),
            path=str(entry.get("path") or ""),
        ))
    return routes


def _controller_info(name: str, raw: Any, root: Path) -> ControllerInfo:
    if not isinstance(raw, Mapping):
        msg = f"Controller {name!r} information must be an object"
        raise AppModelError(msg)

    view_paths = _strings(raw.get("view_paths") or [], f"{name}.view_paths")
    lookup = ViewLookup(tuple(root / p for p in view_paths)) if view_paths else None
    return ControllerInfo(
        actions=frozenset(_strings(raw.get("actions") or [], f"{name}.actions")),
        instance_methods=frozenset(
            _strings(raw.get("instance_methods") or [], f"{name}.instance_methods"),
        ),
        helpers=frozenset(_strings(raw.get("helpers") or [], f"{name}.helpers")),
        lookup_context=lookup,
    )


def _strings(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"'{key}' must be a list of strings"
        raise AppModelError(msg)
    return value
