"""Inline suppression directives.

A directive is the ``solcheck:`` marker followed by a ``disable-*`` keyword,
optionally scoped to named rules::

    uint256 constant lowerCase = 1; // solcheck: disable-line
    // solcheck: disable-next-line(constant_names)
    // solcheck: disable-next-item
    // solcheck: disable-start
    // solcheck: disable-end
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from solcheck.declarations import Declaration
from solcheck.source import mask_source

DIRECTIVE_RE = re.compile(r"solcheck:[ \t]*(?P<directive>[\w-]*)(?:\((?P<rules>[^)]*)\))?")


class SuppressionKind(StrEnum):
    LINE = "line"
    NEXT_LINE = "next_line"
    NEXT_ITEM = "next_item"
    BLOCK = "block"


DIRECTIVES = {
    "disable-line": SuppressionKind.LINE,
    "disable-next-line": SuppressionKind.NEXT_LINE,
    "disable-next-item": SuppressionKind.NEXT_ITEM,
    "disable-start": SuppressionKind.BLOCK,
    "disable-end": SuppressionKind.BLOCK,
}


@dataclass(frozen=True, slots=True)
class SuppressionSpan:
    """Lines over which some or all rules are silenced."""

    kind: SuppressionKind
    rules: frozenset[str]
    first_line: int
    last_line: int

    def applies_to(self, rule_id: str) -> bool:
        return not self.rules or rule_id in self.rules

    def overlaps(self, first_line: int, last_line: int) -> bool:
        return self.first_line <= last_line and first_line <= self.last_line


@dataclass(frozen=True, slots=True)
class DirectiveProblem:
    line: int
    kind: Literal["parse_error", "invalid_directive"]
    message: str


@dataclass(slots=True)
class SuppressionSet:
    spans: list[SuppressionSpan] = field(default_factory=list)
    problems: list[DirectiveProblem] = field(default_factory=list)

    def suppresses(self, rule_id: str, first_line: int, last_line: int) -> bool:
        """Return whether any span silences ``rule_id`` on the given lines."""
        return any(
            span.applies_to(rule_id) and span.overlaps(first_line, last_line)
            for span in self.spans
        )


def scan_suppressions(
    text: str,
    declarations: Sequence[Declaration],
    known_rules: Collection[str] | None = None,
) -> SuppressionSet:
    """Collect suppression spans and directive problems for one file."""
    # Directives are only read from comments; lines split as the scanner splits them.
    lines = mask_source(text).comments.split("\n")
    last_line = len(lines)
    result = SuppressionSet()
    open_block: tuple[int, frozenset[str]] | None = None

    for lineno, line in enumerate(lines, start=1):
        for match in DIRECTIVE_RE.finditer(line):
            directive = match.group("directive")
            kind = DIRECTIVES.get(directive)
            if kind is None:
                result.problems.append(
                    DirectiveProblem(
                        line=lineno,
                        kind="invalid_directive",
                        message=f"invalid inline directive `{match.group(0).strip()}`",
                    )
                )
                continue

            rules = _parse_rules(match.group("rules"))
            if known_rules is not None:
                for rule_id in sorted(rules - set(known_rules)):
                    result.problems.append(
                        DirectiveProblem(
                            line=lineno,
                            kind="invalid_directive",
                            message=f"unknown rule `{rule_id}` in `{directive}` directive",
                        )
                    )

            if directive == "disable-start":
                if open_block is None:
                    open_block = (lineno, rules)
                continue
            if directive == "disable-end":
                if open_block is None:
                    result.problems.append(
                        DirectiveProblem(
                            line=lineno,
                            kind="parse_error",
                            message="`disable-end` without a matching `disable-start`",
                        )
                    )
                    continue
                start, block_rules = open_block
                result.spans.append(SuppressionSpan(kind, block_rules, start, lineno))
                open_block = None
                continue

            span = _span_for(kind, rules, lineno, last_line, declarations)
            if span is not None:
                result.spans.append(span)

    if open_block is not None:
        start, block_rules = open_block
        result.spans.append(SuppressionSpan(SuppressionKind.BLOCK, block_rules, start, last_line))
        result.problems.append(
            DirectiveProblem(
                line=start,
                kind="parse_error",
                message="`disable-start` without a matching `disable-end`; suppressing to end of file",
            )
        )

    return result


def _span_for(
    kind: SuppressionKind,
    rules: frozenset[str],
    lineno: int,
    last_line: int,
    declarations: Sequence[Declaration],
) -> SuppressionSpan | None:
    if kind is SuppressionKind.LINE:
        return SuppressionSpan(kind, rules, lineno, lineno)
    if kind is SuppressionKind.NEXT_LINE:
        return SuppressionSpan(kind, rules, lineno + 1, lineno + 1)

    following = [item for item in declarations if item.line_start > lineno]
    if following:
        # Outermost declaration when several start on the same line.
        item = min(following, key=lambda decl: (decl.line_start, -decl.line_end))
        return SuppressionSpan(kind, rules, item.line_start, item.line_end)
    if lineno < last_line:
        return SuppressionSpan(kind, rules, lineno + 1, last_line)
    return None


def _parse_rules(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())
