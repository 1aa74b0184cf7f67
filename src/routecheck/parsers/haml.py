"""Haml template adapter.

Haml has no Python implementation, so templates are compiled to Ruby by
the Haml gem's own compiler (``haml compile FILE``, haml >= 6) and the
generated Ruby is scanned.  The compiler keeps template line numbers,
which is what findings report.

Availability is probed once per run by
:func:`routecheck.parsers.probe_support`; this adapter assumes the
command exists.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from routecheck.errors import ParserError
from routecheck.model import HelperCall
from routecheck.parsers import HelperFilter
from routecheck.parsers._ruby import accepted_calls

logger = logging.getLogger("routecheck.parsers")


class HamlParser:
    """Extract path/URL helper calls from ``app/**/*.haml``."""

    __slots__ = ("_command", "_root")

    def __init__(self, root: str | Path, *, command: Sequence[str] = ("haml",)) -> None:
        self._root = Path(root)
        self._command = tuple(command)

    def compile(self, filename: str) -> str:
        """Compile one template to Ruby source.

        Raises:
            ParserError: If the compiler cannot be started or fails.
        """
        cmd = [*self._command, "compile", filename]
        logger.debug("Compiling %s with %s", filename, " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self._root),
                check=False,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            msg = f"Cannot run Haml compiler {self._command[0]!r}: {exc}"
            raise ParserError(msg) from exc

        if proc.returncode != 0:
            detail = (proc.stderr or "").strip().splitlines()
            msg = f"Haml compiler failed on {filename!r}"
            if detail:
                msg = f"{msg}: {detail[-1]}"
            raise ParserError(msg)
        return proc.stdout

    def run(self, filename: str, accept: HelperFilter) -> list[HelperCall]:
        return accepted_calls(filename, self.compile(filename), accept)
