"""Role classification tests."""

from __future__ import annotations

from solcheck.roles import (
    ProjectLayout,
    Role,
    SourceFile,
    classify,
    is_executable_script,
    is_test_contract_file,
)


def test_classify_default_layout() -> None:
    assert classify("src/Counter.sol") is Role.CONTRACT
    assert classify("src/tokens/ERC20.sol") is Role.CONTRACT
    assert classify("src/libraries/Math.sol") is Role.LIBRARY
    assert classify("src/utils/helpers/Format.sol") is Role.LIBRARY
    assert classify("script/Deploy.s.sol") is Role.SCRIPT
    assert classify("script/helpers/Base.sol") is Role.SCRIPT
    assert classify("test/Counter.t.sol") is Role.TEST
    assert classify("./test/utils/Fixtures.sol") is Role.TEST
    assert classify("lib/forge-std/src/Test.sol") is Role.OTHER
    assert classify("Counter.sol") is Role.OTHER


def test_classify_only_matches_whole_directory_components() -> None:
    assert classify("srcs/Counter.sol") is Role.OTHER
    assert classify("tests/Counter.t.sol") is Role.OTHER
    assert classify("src") is Role.OTHER


def test_classify_custom_layout() -> None:
    layout = ProjectLayout(src="contracts", script="deploy", test="spec", library_dirs=("lib",))

    assert classify("contracts/Vault.sol", layout) is Role.CONTRACT
    assert classify("contracts/lib/Math.sol", layout) is Role.LIBRARY
    assert classify("deploy/Run.s.sol", layout) is Role.SCRIPT
    assert classify("spec/Vault.t.sol", layout) is Role.TEST
    assert classify("src/Vault.sol", layout) is Role.OTHER


def test_classify_nested_layout_directories() -> None:
    layout = ProjectLayout(src="packages/core/src")

    assert classify("packages/core/src/Core.sol", layout) is Role.CONTRACT
    assert classify("packages/core/Core.sol", layout) is Role.OTHER


def test_file_name_predicates() -> None:
    assert is_executable_script("script/Deploy.s.sol")
    assert not is_executable_script("script/DeployHelpers.sol")
    assert is_test_contract_file("test/Counter.t.sol")
    assert not is_test_contract_file("test/utils/Fixtures.sol")


def test_source_file_for_path_classifies() -> None:
    assert SourceFile.for_path("test/A.t.sol") == SourceFile(path="test/A.t.sol", role=Role.TEST)
