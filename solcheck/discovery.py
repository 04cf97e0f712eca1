"""Project tree enumeration."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from fnmatch import fnmatch
from pathlib import Path

from solcheck.roles import ProjectLayout, SourceFile

logger = logging.getLogger(__name__)

SOURCE_GLOB = "*.sol"


class ProjectError(RuntimeError):
    """Raised when the project tree cannot be enumerated."""


def discover_sources(
    root: Path,
    *,
    layout: ProjectLayout | None = None,
    exclude: Sequence[str] = (),
) -> list[SourceFile]:
    """List Solidity files under the layout directories with their roles."""
    layout = layout or ProjectLayout()
    if not root.is_dir():
        raise ProjectError(f"Project root is not a readable directory: {root}")

    seen: set[str] = set()
    sources: list[SourceFile] = []
    for directory in layout.roots:
        base = root / directory
        if not base.is_dir():
            logger.debug("Skipping missing directory %s", base)
            continue
        try:
            paths = sorted(base.rglob(SOURCE_GLOB))
        except OSError as exc:
            raise ProjectError(f"Could not enumerate {base}: {exc}") from exc

        for path in paths:
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if relative in seen or _is_excluded(relative, exclude):
                continue
            seen.add(relative)
            sources.append(SourceFile.for_path(relative, layout))

    logger.debug("Discovered %d Solidity files under %s", len(sources), root)
    return sources


def _is_excluded(path: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch(path, pattern) for pattern in patterns)
