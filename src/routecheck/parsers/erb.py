"""ERB template adapter.

ERB interleaves markup with Ruby in ``<% %>`` / ``<%= %>`` tags.  The
markup is irrelevant for helper calls, so the template is reduced to
its Ruby segments, each placed on the line it started on, and the
result is scanned like any other Ruby source.  Segments sharing a line
are joined with ``;`` so block openers and ``end`` stay balanced.
"""

import re
from pathlib import Path

from routecheck.errors import ParserError
from routecheck.model import HelperCall
from routecheck.parsers import HelperFilter
from routecheck.parsers._ruby import accepted_calls

# <% code %>, <%= expr %>, <%== raw %>, <%- trimmed -%>; <%# comments %>
# are matched so they can be skipped, <%% is a literal and never matches
_ERB_TAG_RE = re.compile(
    r"<%(?!%)(?P<flag>==|=|-|#)?(?P<code>.*?)[-=]?%>",
    re.DOTALL,
)


def erb_to_ruby(source: str) -> str:
    """Reduce an ERB template to its embedded Ruby, keeping line numbers."""
    pieces: list[str] = []
    output_line = 1
    source_line = 1
    position = 0

    for match in _ERB_TAG_RE.finditer(source):
        code_start = match.start("code")
        source_line += source.count("\n", position, code_start)
        position = code_start

        if match.group("flag") == "#":
            continue

        code = match.group("code")
        if source_line > output_line:
            pieces.append("\n" * (source_line - output_line))
            output_line = source_line
        elif pieces:
            pieces.append("; ")
        pieces.append(code)
        output_line += code.count("\n")

    return "".join(pieces)


class ErbParser:
    """Extract path/URL helper calls from ``app/**/*.erb``."""

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def run(self, filename: str, accept: HelperFilter) -> list[HelperCall]:
        try:
            source = (self._root / filename).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            msg = f"Cannot read {filename!r}: {exc}"
            raise ParserError(msg) from exc
        return accepted_calls(filename, erb_to_ruby(source), accept)
