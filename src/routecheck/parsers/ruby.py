"""Ruby source adapter — scans controller files for helper calls."""

from pathlib import Path

from routecheck.errors import ParserError
from routecheck.model import HelperCall
from routecheck.parsers import HelperFilter
from routecheck.parsers._ruby import accepted_calls


class RubyParser:
    """Extract path/URL helper calls from ``app/controllers/**/*.rb``."""

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def run(self, filename: str, accept: HelperFilter) -> list[HelperCall]:
        try:
            source = (self._root / filename).read_bytes()
        except OSError as exc:
            msg = f"Cannot read {filename!r}: {exc}"
            raise ParserError(msg) from exc
        return accepted_calls(filename, source, accept)
