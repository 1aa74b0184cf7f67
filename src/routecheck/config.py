"""Checker configuration.

CheckConfig is a frozen dataclass — immutable after creation, built once
per run and handed to the checker.  ``load_config()`` reads the optional
``.routecheck.yml`` file from the project root.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from routecheck.errors import ConfigurationError

CONFIG_FILENAME = ".routecheck.yml"

_KNOWN_KEYS = frozenset({
    "ignored_controllers",
    "ignored_paths",
    "ignored_path_whitelist",
    "haml_command",
})


@dataclass(frozen=True, slots=True)
class CheckConfig:
    """Checker configuration. Immutable after creation.

    Override what you need::

        config = CheckConfig(
            root=Path("~/src/shop").expanduser(),
            ignored_controllers=frozenset({"admin/legacy"}),
            ignored_paths=frozenset({"oauth_callback"}),
        )

    Attributes:
        root: Project root; all discovered filenames are relative to it.
        ignored_controllers: Controller paths excluded from both analyses.
        ignored_paths: Route names (helper name without ``_path``/``_url``)
            never reported from any file.
        ignored_path_whitelist: Per-file exemptions keyed by the
            root-relative filename.
        haml_command: Command used to compile Haml to Ruby.
    """

    root: Path = Path(".")
    ignored_controllers: frozenset[str] = frozenset()
    ignored_paths: frozenset[str] = frozenset()
    ignored_path_whitelist: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    haml_command: tuple[str, ...] = ("haml",)

    def whitelist_for(self, filename: str) -> frozenset[str]:
        """Helper names exempted for exactly ``filename``."""
        return self.ignored_path_whitelist.get(filename, frozenset())


def load_config(path: str | Path, *, root: str | Path | None = None) -> CheckConfig:
    """Load a CheckConfig from a YAML file.

    Args:
        path: Path to the YAML file.
        root: Project root.  Defaults to the directory holding the file.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read config file {str(config_path)!r}: {exc}"
        raise ConfigurationError(msg) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = f"Config file {str(config_path)!r} is not valid YAML: {exc}"
        raise ConfigurationError(msg) from exc

    project_root = Path(root) if root is not None else config_path.parent
    return config_from_mapping(data or {}, root=project_root)


def config_from_mapping(data: Any, *, root: str | Path = ".") -> CheckConfig:
    """Build a CheckConfig from a parsed mapping, validating every value."""
    if not isinstance(data, Mapping):
        msg = f"Config must be a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        msg = f"Unknown config keys: {', '.join(sorted(map(str, unknown)))}"
        raise ConfigurationError(msg)

    whitelist_raw = data.get("ignored_path_whitelist") or {}
    if not isinstance(whitelist_raw, Mapping):
        msg = "ignored_path_whitelist must map filenames to lists of helper names"
        raise ConfigurationError(msg)
    whitelist = {
        str(filename): _string_set(names, f"ignored_path_whitelist[{filename!r}]")
        for filename, names in whitelist_raw.items()
    }

    kwargs: dict[str, Any] = {
        "root": Path(root),
        "ignored_controllers": _string_set(
            data.get("ignored_controllers"), "ignored_controllers",
        ),
        "ignored_paths": _string_set(data.get("ignored_paths"), "ignored_paths"),
        "ignored_path_whitelist": MappingProxyType(whitelist),
    }
    haml_command = data.get("haml_command")
    if haml_command is not None:
        if isinstance(haml_command, str):
            haml_command = haml_command.split()
        command = tuple(_string_list(haml_command, "haml_command"))
        if not command:
            msg = "haml_command must not be empty"
            raise ConfigurationError(msg)
        kwargs["haml_command"] = command
    return CheckConfig(**kwargs)


def _string_set(value: Any, key: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    return frozenset(_string_list(value, key))


def _string_list(value: Any, key: str) -> list[str]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        msg = f"{key} must be a list of strings, got {type(value).__name__}"
        raise ConfigurationError(msg)
    items = list(value)
    for item in items:
        if not isinstance(item, str):
            msg = f"{key} must be a list of strings, found {item!r}"
            raise ConfigurationError(msg)
    return items
