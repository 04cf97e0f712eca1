"""Convention rule tests."""

from __future__ import annotations

from solcheck.declarations import scan_declarations
from solcheck.roles import SourceFile
from solcheck.rules import default_rule_set, list_rule_info
from solcheck.rules.base import FileContext, Rule, Violation
from solcheck.rules.constant_names import ConstantNamesRule, is_valid_constant_name
from solcheck.rules.internal_names import InternalNamesRule
from solcheck.rules.script_entrypoint import ScriptEntrypointRule
from solcheck.rules.test_names import TestNamesRule, is_valid_test_name
from solcheck.suppression import SuppressionSet


def test_test_name_pattern_accepts_documented_shapes() -> None:
    for name in [
        "test_Description",
        "testFuzz_Description",
        "test_RevertIf_Condition",
        "test_RevertWhen_Condition",
        "test_RevertOn_Condition",
        "testFuzz_RevertIf_Condition",
        "testForkFuzz_RevertIf_Condition",
        "testForkFuzz_RevertOn_Condition_MoreInfo",
        "test_",
    ]:
        assert is_valid_test_name(name), name


def test_test_name_pattern_rejects_other_shapes() -> None:
    for name in [
        "test",
        "testDescription",
        "testDescriptionMoreInfo",
        "testFuzzDescription",
        "test_Descrip-tion",
        "testFuzzFork_Description",
        "test_Dëscription",
    ]:
        assert not is_valid_test_name(name), name


def test_test_name_pattern_fails_fast_on_long_names() -> None:
    assert not is_valid_test_name("test_" + "a" * 5000 + "!")


def test_test_names_rule_checks_public_test_functions_in_test_contract_files() -> None:
    text = "\n".join(
        [
            "contract CounterTest {",
            "    function setUp() public {}",
            "    function test_Increment() public {}",
            "    function testIncrementBadName() public {}",
            "    function testInternalHelper() internal {}",
            "    function testExternal() external {}",
            "}",
        ]
    )

    violations = _evaluate(TestNamesRule(), "test/Counter.t.sol", text)

    assert [(item.line_start, item.message) for item in violations] == [
        (4, "Invalid test name: testIncrementBadName"),
        (6, "Invalid test name: testExternal"),
    ]


def test_test_names_rule_ignores_helpers_and_other_roles() -> None:
    text = "contract H {\n    function testBad() public {}\n}"

    assert _evaluate(TestNamesRule(), "test/utils/Helpers.sol", text) == []
    assert _evaluate(TestNamesRule(), "src/Counter.t.sol", text) == []


def test_constant_name_pattern() -> None:
    for name in ["MAX", "MAX_SUPPLY", "_GOOD__IMMUTABLE_", "A1", "$VALUE", "$_VALUE_$", "1"]:
        assert is_valid_constant_name(name), name
    for name in ["max", "Max_Supply", "_variable", "VARIABLe", "$VARIABLE_name", "_", "$", "__"]:
        assert not is_valid_constant_name(name), name


def test_constant_names_rule_applies_to_every_role_and_visibility() -> None:
    text = "\n".join(
        [
            "uint256 constant fileLevel = 1;",
            "contract A {",
            "    uint256 public constant GOOD = 1;",
            "    uint256 private constant badPrivate = 2;",
            "    address immutable owner;",
            "    uint256 notConstant;",
            "}",
        ]
    )

    for path in ["src/A.sol", "script/A.s.sol", "test/A.t.sol", "lib/A.sol"]:
        violations = _evaluate(ConstantNamesRule(), path, text)
        assert [(item.line_start, item.message) for item in violations] == [
            (1, "Invalid constant name: fileLevel"),
            (4, "Invalid constant name: badPrivate"),
            (5, "Invalid immutable name: owner"),
        ]


def test_script_entrypoint_rule_flags_extra_public_methods() -> None:
    text = "\n".join(
        [
            "contract Deploy {",
            "    function setUp() public {}",
            "    function run() public {}",
            "    function anotherPublic() public {}",
            "    function thirdPublic(",
            "        uint256 value",
            "    ) external {}",
            "    function _internal() internal {}",
            "}",
        ]
    )

    violations = _evaluate(ScriptEntrypointRule(), "script/Deploy.s.sol", text)

    assert [(item.line_start, item.line_end) for item in violations] == [(4, 4), (5, 7)]
    assert "anotherPublic" in violations[0].message
    assert "thirdPublic" in violations[1].message


def test_script_entrypoint_rule_flags_second_run() -> None:
    text = "\n".join(
        [
            "contract A {",
            "    function run() public {}",
            "}",
            "contract B {",
            "    function run() external {}",
            "}",
        ]
    )

    violations = _evaluate(ScriptEntrypointRule(), "script/Deploy.s.sol", text)

    assert [item.line_start for item in violations] == [5]


def test_script_entrypoint_rule_reports_missing_run() -> None:
    text = "\n\ncontract Deploy {\n    function _deploy() internal {}\n}"

    violations = _evaluate(ScriptEntrypointRule(), "script/Deploy.s.sol", text)

    assert violations == [Violation(line_start=3, line_end=3, message="No public `run` method found")]


def test_script_entrypoint_rule_exempts_helpers() -> None:
    text = "contract Helpers {\n    function a() public {}\n    function b() public {}\n}"

    assert _evaluate(ScriptEntrypointRule(), "script/Helpers.sol", text) == []


def test_internal_names_rule_only_checks_contract_scope_in_contract_files() -> None:
    text = "\n".join(
        [
            "contract Counter {",
            "    constructor() {}",
            "    function _ok() internal {}",
            "    function internalBad() internal {}",
            "    function privateBad() private {}",
            "    function implicitBad() {}",
            "    function publicFine() public {}",
            "}",
            "library Lib {",
            "    function libraryFine() internal {}",
            "}",
            "function freeFine() pure {}",
        ]
    )

    violations = _evaluate(InternalNamesRule(), "src/Counter.sol", text)

    assert [(item.line_start, item.message) for item in violations] == [
        (4, "Invalid src method name: internalBad"),
        (5, "Invalid src method name: privateBad"),
        (6, "Invalid src method name: implicitBad"),
    ]
    assert _evaluate(InternalNamesRule(), "src/libraries/Counter.sol", text) == []
    assert _evaluate(InternalNamesRule(), "test/Counter.t.sol", text) == []


def test_default_rule_set_is_fixed_and_ordered() -> None:
    assert [rule.rule_id for rule in default_rule_set()] == [
        "test_names",
        "constant_names",
        "script_entrypoint",
        "internal_names",
    ]


def test_list_rule_info_uses_docstrings() -> None:
    info = {item.rule_id: item for item in list_rule_info()}

    assert info["script_entrypoint"].name == "ScriptEntrypointRule"
    assert "`run`" in info["script_entrypoint"].description
    assert [str(role) for role in info["internal_names"].roles] == ["contract"]


def _evaluate(rule: Rule, path: str, text: str) -> list[Violation]:
    context = FileContext(
        source=SourceFile.for_path(path),
        declarations=tuple(scan_declarations(text).declarations),
        suppressions=SuppressionSet(),
    )
    return rule.evaluate(context)
