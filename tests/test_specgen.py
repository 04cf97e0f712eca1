"""Specification generator tests."""

from __future__ import annotations

from pathlib import Path

import click

from solcheck.specgen import (
    build_specifications,
    parse_contracts,
    render_specifications,
    requirement_from_test_name,
)

FIXTURES = Path(__file__).parent / "fixtures" / "projects"

EXPECTED_TREE = [
    "",
    "Contract Specification: ERC20Lite",
    "├── constructor",
    "│   └──  Stored Name Matches Constructor Input",
    "├── approve",
    "│   ├──  Sets Allowance",
    "│   └──  Sets Allowance For Any Amount",
    "├── transfer",
    "│   ├──  Moves Balance",
    "│   └──  Revert If: Spender Has Insufficient Balance",
    "└── _move",
]


def test_requirement_from_test_name() -> None:
    assert requirement_from_test_name("test_StoredName") == " Stored Name"
    assert requirement_from_test_name("testFuzz_RevertIf_ZeroAmount") == (
        " Revert If: Zero Amount"
    )
    assert requirement_from_test_name("testNoUnderscore") is None


def test_parse_contracts_groups_functions_by_contract() -> None:
    text = "\n".join(
        [
            "interface I { function a() external; }",
            "contract A {",
            "    constructor() {}",
            "    function one() public {}",
            "}",
            "library L {",
            "    function two() internal {}",
            "}",
        ]
    )

    contracts = parse_contracts("src/A.sol", text)

    assert [(item.name, [fn.name for fn in item.functions]) for item in contracts] == [
        ("A", ["constructor", "one"]),
        ("L", ["two"]),
    ]
    assert contracts[0].file_stem == "A"


def test_build_and_render_specification_tree() -> None:
    specifications = build_specifications(FIXTURES / "spec_project")

    assert [item.contract.name for item in specifications] == ["ERC20Lite"]
    assert click.unstyle(render_specifications(specifications)).splitlines() == EXPECTED_TREE


def test_functions_without_tests_are_rendered_in_red() -> None:
    specifications = build_specifications(FIXTURES / "spec_project")

    rendered = render_specifications(specifications)

    assert click.style("_move", fg="red") in rendered
    assert specifications[0].requirements_for("_move") is None
    assert specifications[0].requirements_for("APPROVE") == [
        " Sets Allowance",
        " Sets Allowance For Any Amount",
    ]
