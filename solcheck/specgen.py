"""Contract specifications rendered from test names.

Every production contract is listed with its functions. A test file named
after the contract (``test/Counter.t.sol`` for ``Counter``) may hold one test
contract per function, named like the function; the public test methods of
that contract become the function's requirements::

    Contract Specification: Counter
    ├── constructor
    │   └──  Sets Initial Number
    └── increment
        └──  Revert If: Overflow
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import click

from solcheck.declarations import Declaration, DeclarationKind, ScanOutcome, scan_declarations
from solcheck.discovery import discover_sources
from solcheck.roles import ProjectLayout, Role, is_test_contract_file
from solcheck.rules.base import EXPOSED_VISIBILITIES

logger = logging.getLogger(__name__)

SPECIFIED_KINDS = {DeclarationKind.CONTRACT, DeclarationKind.LIBRARY}
TEST_PREFIX = "test"


@dataclass(frozen=True, slots=True)
class ParsedContract:
    path: str
    name: str
    functions: tuple[Declaration, ...]

    @property
    def file_stem(self) -> str:
        """File name without ``.sol`` and without a trailing ``.t``."""
        stem = PurePosixPath(self.path).name.removesuffix(".sol")
        return stem.removesuffix(".t")


@dataclass(slots=True)
class ContractSpecification:
    contract: ParsedContract
    test_contracts: list[ParsedContract] = field(default_factory=list)

    def requirements_for(self, function_name: str) -> list[str] | None:
        """Return requirements, or ``None`` when no test contract covers the function."""
        for test_contract in self.test_contracts:
            if test_contract.name.lower() != function_name.lower():
                continue
            requirements: list[str] = []
            for function in test_contract.functions:
                if not function.name.startswith(TEST_PREFIX):
                    continue
                if function.effective_visibility not in EXPOSED_VISIBILITIES:
                    continue
                requirement = requirement_from_test_name(function.name)
                if requirement is not None:
                    requirements.append(requirement)
            return requirements
        return None


def requirement_from_test_name(name: str) -> str | None:
    """Turn ``test_RevertIf_ZeroAmount`` into `` Revert If: Zero Amount``."""
    _, separator, description = name.partition("_")
    if not separator:
        return None
    return "".join(
        f" {char}" if char.isupper() else char for char in description.replace("_", ":")
    )


def parse_contracts(path: str, text: str) -> list[ParsedContract]:
    """Return the contracts and libraries of one file with their functions."""
    return _contracts_from_outcome(path, scan_declarations(text))


def build_specifications(
    root: Path,
    *,
    layout: ProjectLayout | None = None,
    exclude: tuple[str, ...] | list[str] = (),
) -> list[ContractSpecification]:
    """Pair every production contract with the test contracts of its test file."""
    root = Path(root)
    contracts: list[ParsedContract] = []
    test_contracts: list[ParsedContract] = []
    for source in discover_sources(root, layout=layout, exclude=exclude):
        is_test_file = source.role is Role.TEST and is_test_contract_file(source.path)
        if source.role not in {Role.CONTRACT, Role.LIBRARY} and not is_test_file:
            continue
        try:
            text = (root / source.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable %s: %s", source.path, exc)
            continue
        parsed = parse_contracts(source.path, text)
        if is_test_file:
            test_contracts.extend(parsed)
        else:
            contracts.extend(parsed)

    return [
        ContractSpecification(
            contract=contract,
            test_contracts=[item for item in test_contracts if item.file_stem == contract.name],
        )
        for contract in contracts
    ]


def render_specifications(specifications: list[ContractSpecification]) -> str:
    """Render each specification as a tree, functions without tests in red."""
    lines: list[str] = []
    for specification in specifications:
        lines.append("")
        lines.append(
            click.style("Contract Specification: ", bold=True)
            + click.style(specification.contract.name, bold=True)
        )
        functions = specification.contract.functions
        for index, function in enumerate(functions):
            is_last = index == len(functions) - 1
            branch = "└── " if is_last else "├── "
            requirements = specification.requirements_for(function.name)
            if requirements is None:
                lines.append(branch + click.style(function.name, fg="red"))
                continue
            lines.append(branch + function.name)
            stem = "    " if is_last else "│   "
            for position, requirement in enumerate(requirements):
                twig = "└── " if position == len(requirements) - 1 else "├── "
                lines.append(stem + twig + requirement)
    return "\n".join(lines)


def _contracts_from_outcome(path: str, outcome: ScanOutcome) -> list[ParsedContract]:
    contracts: list[ParsedContract] = []
    for container in outcome.declarations:
        if container.kind not in SPECIFIED_KINDS:
            continue
        functions = tuple(
            item
            for item in outcome.declarations
            if item.is_function
            and item.line_start >= container.line_start
            and item.line_end <= container.line_end
            and item.scope.value == container.kind.value
        )
        contracts.append(ParsedContract(path=path, name=container.name, functions=functions))
    return contracts
