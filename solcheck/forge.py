"""Forge subprocess helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess, run

logger = logging.getLogger(__name__)

FORGE_EXECUTABLE = "forge"


class ForgeError(RuntimeError):
    """Raised when forge cannot be executed or fails."""


@dataclass(frozen=True, slots=True)
class ForgeResult:
    ok: bool
    output: str


def run_forge_fmt(root: Path, *, check: bool = False) -> ForgeResult:
    """Format the project with ``forge fmt``, or only verify it with ``check``.

    In check mode an unformatted tree is a failed result, not an error.
    """
    args = ["fmt", "--check"] if check else ["fmt"]
    completed = _run_forge(root, args)
    output = "\n".join(
        part.strip() for part in (completed.stdout, completed.stderr) if part and part.strip()
    )

    if check:
        ok = completed.returncode == 0 and not (completed.stderr or "").strip()
        if not ok:
            logger.warning("forge fmt --check reported unformatted files in %s", root)
        return ForgeResult(ok=ok, output=output)

    if completed.returncode != 0:
        raise ForgeError(output or f"{FORGE_EXECUTABLE} {' '.join(args)} failed")
    return ForgeResult(ok=True, output=output)


def _run_forge(root: Path, args: list[str]) -> CompletedProcess[str]:
    logger.debug("Running %s %s in %s", FORGE_EXECUTABLE, " ".join(args), root)
    try:
        return run(
            [FORGE_EXECUTABLE, *args],
            cwd=root,
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise ForgeError(
            f"`{FORGE_EXECUTABLE}` not found on PATH; install Foundry to format sources"
        ) from exc
