"""Report aggregation and rendering."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import click

from solcheck import __version__
from solcheck.rules.base import Finding


@dataclass(frozen=True, slots=True)
class FileError:
    """A file that could not be read; never aborts the scan."""

    file: str
    message: str


@dataclass(frozen=True, slots=True)
class Report:
    """Deterministically ordered findings and file errors for one scan."""

    findings: tuple[Finding, ...]
    errors: tuple[FileError, ...]
    files_scanned: int

    @property
    def passed(self) -> bool:
        return not self.findings and not self.errors

    def outcome(self) -> tuple[list[Finding], bool]:
        """Return ``(findings, passed)``."""
        return list(self.findings), self.passed


def build_report(
    findings: Iterable[Finding],
    errors: Iterable[FileError] = (),
    *,
    files_scanned: int,
) -> Report:
    """Order findings by ``(file, line, rule_id)`` and errors by file."""
    return Report(
        findings=tuple(sorted(findings, key=lambda item: (item.file, item.line, item.rule_id))),
        errors=tuple(sorted(errors, key=lambda item: item.file)),
        files_scanned=files_scanned,
    )


def render_human(report: Report) -> str:
    """Render one line per finding plus a colorized summary."""
    lines: list[str] = []
    for finding in report.findings:
        tag = click.style(f"[{finding.rule_id}]", fg="yellow")
        lines.append(f"{finding.file}:{finding.line}: {tag} {finding.message}")
    for error in report.errors:
        tag = click.style("[io_error]", fg="red")
        lines.append(f"{error.file}: {tag} {error.message}")

    if report.passed:
        lines.append(
            click.style(
                f"No convention violations found ({report.files_scanned} files checked).",
                fg="green",
                bold=True,
            )
        )
    else:
        lines.append(
            click.style(
                f"Convention checks failed: {len(report.findings)} findings, "
                f"{len(report.errors)} file errors in {report.files_scanned} files.",
                fg="red",
                bold=True,
            )
        )
    return "\n".join(lines)


def render_json(report: Report, *, project_root: str) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_json_payload(report, project_root=project_root), sort_keys=True)


def build_json_payload(report: Report, *, project_root: str) -> dict[str, Any]:
    """Build stable JSON payload for CI and automation."""
    return {
        "passed": report.passed,
        "findings": [_serialize_finding(item) for item in report.findings],
        "errors": [{"file": item.file, "message": item.message} for item in report.errors],
        "meta": {
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "project_root": project_root,
            "files_scanned": report.files_scanned,
            "version": __version__,
        },
    }


def _serialize_finding(finding: Finding) -> dict[str, Any]:
    return {
        "file": finding.file,
        "line": finding.line,
        "rule_id": finding.rule_id,
        "message": finding.message,
    }
