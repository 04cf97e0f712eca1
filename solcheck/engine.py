"""Scan orchestration."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

from solcheck.declarations import scan_declarations
from solcheck.discovery import discover_sources
from solcheck.report import FileError, Report, build_report
from solcheck.roles import ProjectLayout, SourceFile
from solcheck.rules import RuleSet, default_rule_set
from solcheck.rules.base import PARSE_ERROR_RULE_ID, FileContext, Finding
from solcheck.suppression import scan_suppressions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _FileResult:
    findings: list[Finding]
    error: FileError | None = None


def check_source(source: SourceFile, text: str, rule_set: RuleSet | None = None) -> list[Finding]:
    """Run every rule over one file and return the unsuppressed findings."""
    active_rules = rule_set if rule_set is not None else default_rule_set()
    outcome = scan_declarations(text)
    suppressions = scan_suppressions(
        text,
        outcome.declarations,
        known_rules={rule.rule_id for rule in active_rules},
    )
    context = FileContext(
        source=source,
        declarations=tuple(outcome.declarations),
        suppressions=suppressions,
    )

    findings: list[Finding] = [
        Finding(file=source.path, line=error.line, rule_id=PARSE_ERROR_RULE_ID, message=error.message)
        for error in outcome.errors
    ]
    findings.extend(
        Finding(file=source.path, line=problem.line, rule_id=problem.kind, message=problem.message)
        for problem in suppressions.problems
    )
    for rule in active_rules:
        for violation in rule.evaluate(context):
            if suppressions.suppresses(rule.rule_id, violation.line_start, violation.line_end):
                continue
            findings.append(
                Finding(
                    file=source.path,
                    line=violation.line_start,
                    rule_id=rule.rule_id,
                    message=violation.message,
                )
            )
    return findings


def scan(
    project_root: Path,
    *,
    layout: ProjectLayout | None = None,
    rule_set: RuleSet | None = None,
    exclude: Sequence[str] = (),
    workers: int | None = None,
) -> Report:
    """Check every Solidity file of a project and return the ordered report.

    Files are checked independently on a thread pool; the report order does
    not depend on completion order. Unreadable files become ``FileError``
    entries, while a missing project root raises ``ProjectError``.
    """
    root = Path(project_root)
    sources = discover_sources(root, layout=layout, exclude=exclude)
    active_rules = rule_set if rule_set is not None else default_rule_set()
    max_workers = workers or default_worker_count()
    logger.debug("Checking %d files with %d workers", len(sources), max_workers)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(
            executor.map(lambda source: _check_file(root, source, active_rules), sources)
        )

    findings = [finding for result in results for finding in result.findings]
    errors = [result.error for result in results if result.error is not None]
    return build_report(findings, errors, files_scanned=len(sources))


def default_worker_count() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


def _check_file(root: Path, source: SourceFile, rule_set: RuleSet) -> _FileResult:
    started = perf_counter()
    try:
        text = (root / source.path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", source.path, exc)
        return _FileResult(findings=[], error=FileError(file=source.path, message=str(exc)))

    findings = check_source(source, text, rule_set)
    logger.debug(
        "Checked %s (%s) in %.1f ms: %d findings",
        source.path,
        source.role,
        (perf_counter() - started) * 1000,
        len(findings),
    )
    return _FileResult(findings=findings)
