"""Path-based role classification for project files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath

EXECUTABLE_SCRIPT_SUFFIX = ".s.sol"
TEST_CONTRACT_SUFFIX = ".t.sol"


class Role(StrEnum):
    CONTRACT = "contract"
    SCRIPT = "script"
    TEST = "test"
    LIBRARY = "library"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    """Directory names, relative to the project root, for each file role."""

    src: str = "src"
    script: str = "script"
    test: str = "test"
    library_dirs: tuple[str, ...] = ("libraries", "helpers")

    @property
    def roots(self) -> tuple[str, str, str]:
        return (self.src, self.script, self.test)


@dataclass(frozen=True, slots=True)
class SourceFile:
    path: str
    role: Role

    @classmethod
    def for_path(cls, path: str, layout: ProjectLayout | None = None) -> SourceFile:
        return cls(path=path, role=classify(path, layout))


def classify(path: str, layout: ProjectLayout | None = None) -> Role:
    """Return the role implied by a project-relative path."""
    layout = layout or ProjectLayout()
    parts = PurePosixPath(path.replace("\\", "/")).parts

    if _is_under(parts, layout.script):
        return Role.SCRIPT
    if _is_under(parts, layout.test):
        return Role.TEST
    if _is_under(parts, layout.src):
        inner = parts[len(PurePosixPath(layout.src).parts) : -1]
        if any(part in layout.library_dirs for part in inner):
            return Role.LIBRARY
        return Role.CONTRACT
    return Role.OTHER


def is_executable_script(path: str) -> bool:
    """Script files meant to be executed end in ``.s.sol``; others are helpers."""
    return PurePosixPath(path).name.endswith(EXECUTABLE_SCRIPT_SUFFIX)


def is_test_contract_file(path: str) -> bool:
    return PurePosixPath(path).name.endswith(TEST_CONTRACT_SUFFIX)


def _is_under(parts: tuple[str, ...], directory: str) -> bool:
    prefix = PurePosixPath(directory).parts
    return len(parts) > len(prefix) and parts[: len(prefix)] == prefix
