"""Base rule protocol, file context and finding models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from solcheck.declarations import Declaration, DeclarationKind, ScopeKind, Visibility
from solcheck.roles import Role, SourceFile
from solcheck.suppression import SuppressionSet

PARSE_ERROR_RULE_ID = "parse_error"
INVALID_DIRECTIVE_RULE_ID = "invalid_directive"

EXPOSED_VISIBILITIES = {Visibility.PUBLIC, Visibility.EXTERNAL}
HIDDEN_VISIBILITIES = {Visibility.INTERNAL, Visibility.PRIVATE}


@dataclass(frozen=True, slots=True)
class Finding:
    """A single convention violation reported against a file line."""

    file: str
    line: int
    rule_id: str
    message: str


@dataclass(frozen=True, slots=True)
class Violation:
    """A rule hit before suppression filtering."""

    line_start: int
    line_end: int
    message: str

    @classmethod
    def at(cls, declaration: Declaration, message: str) -> Violation:
        return cls(line_start=declaration.line_start, line_end=declaration.line_end, message=message)


@dataclass(frozen=True, slots=True)
class FileContext:
    """Everything a rule may look at for one file."""

    source: SourceFile
    declarations: tuple[Declaration, ...]
    suppressions: SuppressionSet

    @property
    def path(self) -> str:
        return self.source.path

    @property
    def role(self) -> Role:
        return self.source.role

    def contract_functions(self) -> Iterator[Declaration]:
        """Yield functions declared directly in a ``contract`` scope."""
        for declaration in self.declarations:
            if declaration.kind is DeclarationKind.FUNCTION and declaration.scope is ScopeKind.CONTRACT:
                yield declaration


class Rule(Protocol):
    """Protocol for naming and layout convention rules."""

    rule_id: str

    def evaluate(self, context: FileContext) -> list[Violation]:
        """Evaluate one file and return violations."""
