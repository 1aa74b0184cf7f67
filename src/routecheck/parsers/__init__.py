"""Parser adapters — extract path/URL helper calls from source files.

One adapter per dialect:

- ``ErbParser``: ERB templates, embedded Ruby is parsed with tree-sitter
- ``HamlParser``: Haml templates, compiled to Ruby by the ``haml`` gem
  (optional; requires haml >= 6 on ``PATH``)
- ``RubyParser``: controller sources, parsed with tree-sitter

Adapters are callbacks, not authorities: each one receives an ``accept``
predicate from the checker and only keeps the calls it approves.

Usage::

    support = probe_support(Dialect.HAML, files, config)
    if support is ParserSupport.AVAILABLE:
        parser = load_parser(Dialect.HAML, config)
        calls = parser.run("app/views/home/index.html.haml", accept)
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from routecheck.config import CheckConfig
    from routecheck.model import HelperCall

HelperFilter = Callable[[str], bool]


class Dialect(Enum):
    """Source dialects scanned for helper calls."""

    ERB = "erb"
    HAML = "haml"
    RUBY = "ruby"


class ParserSupport(Enum):
    """Whether a dialect's pass can run, decided once per pass."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    NOT_APPLICABLE = "not-applicable"


class ParserAdapter(Protocol):
    """Scans one file and returns the helper calls ``accept`` approves."""

    def run(self, filename: str, accept: HelperFilter) -> list[HelperCall]: ...


def haml_available(command: Sequence[str]) -> bool:
    """True if the Haml compiler executable can be found."""
    return bool(command) and shutil.which(command[0]) is not None


def probe_support(
    dialect: Dialect,
    files: Sequence[str],
    config: CheckConfig,
) -> ParserSupport:
    """Decide whether a dialect's pass runs.

    No files means ``NOT_APPLICABLE`` without probing anything.  Only
    Haml depends on an optional tool; ERB and Ruby are always available
    once there is something to scan.
    """
    if not files:
        return ParserSupport.NOT_APPLICABLE
    if dialect is Dialect.HAML and not haml_available(config.haml_command):
        return ParserSupport.UNAVAILABLE
    return ParserSupport.AVAILABLE


def load_parser(dialect: Dialect, config: CheckConfig) -> ParserAdapter:
    """Return the adapter for ``dialect``, bound to the project root."""
    if dialect is Dialect.ERB:
        from routecheck.parsers.erb import ErbParser

        return ErbParser(config.root)
    if dialect is Dialect.HAML:
        from routecheck.parsers.haml import HamlParser

        return HamlParser(config.root, command=config.haml_command)
    if dialect is Dialect.RUBY:
        from routecheck.parsers.ruby import RubyParser

        return RubyParser(config.root)

    msg = f"Unsupported dialect: {dialect!r}"
    raise ValueError(msg)
