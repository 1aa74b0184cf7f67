"""Source file discovery under the conventional ``app/`` layout.

Returns root-relative POSIX filenames.  Those strings are what the
per-file whitelist is keyed by and what findings report, so they must
not depend on the current working directory.
"""

from pathlib import Path

from routecheck.parsers import Dialect

# Glob patterns per dialect, relative to the project root
DIALECT_GLOBS: dict[Dialect, str] = {
    Dialect.ERB: "app/**/*.erb",
    Dialect.HAML: "app/**/*.haml",
    Dialect.RUBY: "app/controllers/**/*.rb",
}


def discover_files(root: str | Path, dialect: Dialect) -> list[str]:
    """List the files of one dialect below ``root``, sorted.

    Args:
        root: Project root.
        dialect: Which source dialect to look for.

    Returns:
        Root-relative POSIX paths such as ``app/views/home/index.html.erb``.
    """
    base = Path(root)
    return sorted(
        path.relative_to(base).as_posix()
        for path in base.glob(DIALECT_GLOBS[dialect])
        if path.is_file()
    )
