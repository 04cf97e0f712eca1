"""Configuration loading for solcheck."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from solcheck.roles import ProjectLayout

CONFIG_FILENAMES = (".solcheck.toml", "solcheck.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEY = "solcheck"
FOUNDRY_FILENAME = "foundry.toml"
FOUNDRY_PROFILE = "default"
LAYOUT_DIR_KEYS = ("src", "script", "test")


@dataclass(slots=True)
class LayoutConfig:
    """Directory layout, resolved from solcheck config then ``foundry.toml``."""

    src: str = "src"
    script: str = "script"
    test: str = "test"
    library_dirs: list[str] = field(default_factory=lambda: ["libraries", "helpers"])
    source: str | None = None

    def to_layout(self) -> ProjectLayout:
        return ProjectLayout(
            src=self.src,
            script=self.script,
            test=self.test,
            library_dirs=tuple(self.library_dirs),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "src": self.src,
            "script": self.script,
            "test": self.test,
            "library_dirs": list(self.library_dirs),
            "source": self.source,
        }


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "human"
    exclude: list[str] = field(default_factory=list)
    workers: int | None = None
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "exclude": list(self.exclude),
            "workers": self.workers,
            "layout": self.layout.to_dict(),
            "source": self.source,
        }


def load_app_config(root: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or project-local files with precedence."""
    root = root.resolve()
    foundry = _load_foundry_profile(root)

    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (root / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved), foundry=foundry)

    for filename in CONFIG_FILENAMES:
        resolved = root / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved), foundry=foundry)

    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path), foundry=foundry)

    return _from_mapping({}, source=None, foundry=foundry)


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'format = "human"',
            'exclude = ["src/vendor/**"]',
            "# workers = 4",
            "",
            "[layout]",
            "# Unset directories fall back to foundry.toml [profile.default].",
            '# src = "src"',
            '# script = "script"',
            '# test = "test"',
            'library_dirs = ["libraries", "helpers"]',
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _load_foundry_profile(root: Path) -> dict[str, Any]:
    path = root / FOUNDRY_FILENAME
    if not path.exists():
        return {}
    profiles = _as_table(_load_toml(path).get("profile"), "foundry.profile")
    return _as_table(profiles.get(FOUNDRY_PROFILE), f"foundry.profile.{FOUNDRY_PROFILE}")


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name != PYPROJECT_FILENAME:
        return loaded
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return {}
    section = tool.get(PYPROJECT_TOOL_KEY)
    return section if isinstance(section, dict) else {}


def _from_mapping(
    mapping: dict[str, Any],
    *,
    source: str | None,
    foundry: dict[str, Any],
) -> AppConfig:
    raw_format = mapping.get("format", "human")
    format_value = str(raw_format).lower()
    if format_value not in {"human", "json"}:
        format_value = "human"

    raw_workers = mapping.get("workers")
    if raw_workers is None:
        workers: int | None = None
    else:
        workers = _as_int(raw_workers, "workers")
        if workers <= 0:
            raise ValueError("workers must be > 0")

    return AppConfig(
        format=format_value,
        exclude=_as_str_list(mapping.get("exclude")),
        workers=workers,
        layout=_parse_layout_config(_as_table(mapping.get("layout"), "layout"), foundry),
        source=source,
    )


def _parse_layout_config(value: dict[str, Any], foundry: dict[str, Any]) -> LayoutConfig:
    layout = LayoutConfig()
    sources: set[str] = set()
    for key in LAYOUT_DIR_KEYS:
        if key in value:
            setattr(layout, key, _as_dir(value[key], f"layout.{key}"))
            sources.add("config")
        elif key in foundry:
            setattr(layout, key, _as_dir(foundry[key], f"foundry.profile.{FOUNDRY_PROFILE}.{key}"))
            sources.add(FOUNDRY_FILENAME)
    if "library_dirs" in value:
        layout.library_dirs = _as_str_list(value["library_dirs"])
    layout.source = " + ".join(sorted(sources)) if sources else None
    return layout


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("Expected a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("Expected a list of strings")
        items.append(item)
    return items


def _as_dir(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return PurePosixPath(value.strip()).as_posix()


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw
