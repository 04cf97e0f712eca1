"""Suppression directive tests."""

from __future__ import annotations

from solcheck.declarations import scan_declarations
from solcheck.suppression import SuppressionKind, SuppressionSet, scan_suppressions

KNOWN_RULES = {"constant_names", "internal_names", "test_names", "script_entrypoint"}


def test_disable_line_and_next_line_cover_single_lines() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    uint256 constant a = 1; // solcheck: disable-line",
            "    // solcheck: disable-next-line",
            "    uint256 constant b = 2;",
            "    uint256 constant c = 3;",
            "}",
        ]
    )

    assert [(span.kind, span.first_line, span.last_line) for span in suppressions.spans] == [
        (SuppressionKind.LINE, 2, 2),
        (SuppressionKind.NEXT_LINE, 4, 4),
    ]
    assert suppressions.suppresses("constant_names", 2, 2)
    assert suppressions.suppresses("constant_names", 4, 4)
    assert not suppressions.suppresses("constant_names", 5, 5)
    assert suppressions.problems == []


def test_disable_next_item_covers_full_multi_line_declaration() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    // solcheck: disable-next-item",
            "",
            "    function wide(",
            "        uint256 a",
            "    ) internal {",
            "        a;",
            "    }",
            "    function after_() internal {}",
            "}",
        ]
    )

    [span] = suppressions.spans
    assert (span.kind, span.first_line, span.last_line) == (SuppressionKind.NEXT_ITEM, 4, 6)
    assert suppressions.suppresses("internal_names", 4, 6)
    assert not suppressions.suppresses("internal_names", 9, 9)


def test_disable_next_item_before_contract_covers_whole_contract() -> None:
    suppressions = _scan(
        [
            "// solcheck: disable-next-item",
            "contract A { function f() internal {}",
            "  uint256 constant x = 1;",
            "}",
            "uint256 constant y = 2;",
        ]
    )

    [span] = suppressions.spans
    assert (span.first_line, span.last_line) == (2, 4)


def test_disable_next_item_without_following_declaration_covers_rest_of_file() -> None:
    suppressions = _scan(
        ["contract A {}", "// solcheck: disable-next-item", "// trailing", "// notes"]
    )

    [span] = suppressions.spans
    assert (span.first_line, span.last_line) == (3, 4)


def test_block_directives_cover_inclusive_range() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    /* solcheck: disable-start */",
            "    uint256 constant a = 1;",
            "    /* solcheck: disable-end */",
            "    uint256 constant b = 2;",
            "}",
        ]
    )

    [span] = suppressions.spans
    assert (span.kind, span.first_line, span.last_line) == (SuppressionKind.BLOCK, 2, 4)
    assert suppressions.problems == []


def test_unmatched_start_extends_to_end_of_file_and_reports_problem() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    // solcheck: disable-start",
            "    // solcheck: disable-start",
            "    uint256 constant a = 1;",
            "}",
        ]
    )

    [span] = suppressions.spans
    assert (span.first_line, span.last_line) == (2, 5)
    [problem] = suppressions.problems
    assert (problem.line, problem.kind) == (2, "parse_error")


def test_stray_end_is_reported() -> None:
    suppressions = _scan(["contract A {}", "// solcheck: disable-end"])

    assert suppressions.spans == []
    [problem] = suppressions.problems
    assert (problem.line, problem.kind) == (2, "parse_error")


def test_rule_scoped_directive_only_silences_named_rules() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    function f() internal {} // solcheck: disable-line(internal_names, test_names)",
            "}",
        ]
    )

    [span] = suppressions.spans
    assert span.rules == frozenset({"internal_names", "test_names"})
    assert suppressions.suppresses("internal_names", 2, 2)
    assert not suppressions.suppresses("constant_names", 2, 2)
    assert suppressions.problems == []


def test_unknown_directive_and_unknown_rule_are_invalid() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    // solcheck: disable-everything",
            "    // solcheck: disable-line(no_such_rule)",
            "}",
        ]
    )

    assert [(problem.line, problem.kind) for problem in suppressions.problems] == [
        (2, "invalid_directive"),
        (3, "invalid_directive"),
    ]
    assert "disable-everything" in suppressions.problems[0].message
    assert "no_such_rule" in suppressions.problems[1].message


def test_overlap_requires_at_least_one_shared_line() -> None:
    suppressions = _scan(["// solcheck: disable-next-line", "x", "y"])

    assert suppressions.suppresses("any_rule", 1, 2)
    assert suppressions.suppresses("any_rule", 2, 5)
    assert not suppressions.suppresses("any_rule", 3, 3)


def test_lines_are_counted_on_newlines_only() -> None:
    suppressions = _scan(
        [
            "contract A {",
            "    // old\rmac\x85line",
            "    // solcheck: disable-next-line",
            "    uint256 constant a = 1;",
            "}",
        ]
    )

    [span] = suppressions.spans
    assert (span.first_line, span.last_line) == (4, 4)


def test_directive_text_in_string_literal_is_not_a_directive() -> None:
    suppressions = _scan(
        [
            "contract A {",
            '    string constant S = "solcheck: disable-everything";',
            "}",
        ]
    )

    assert suppressions.spans == []
    assert suppressions.problems == []


def _scan(lines: list[str]) -> SuppressionSet:
    text = "\n".join(lines)
    return scan_suppressions(text, scan_declarations(text).declarations, known_rules=KNOWN_RULES)
