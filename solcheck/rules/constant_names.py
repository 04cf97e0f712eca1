"""Constant and immutable naming rule."""

from __future__ import annotations

import re

from solcheck.declarations import DeclarationKind, Mutability
from solcheck.rules.base import FileContext, Violation

CONSTANT_NAME_RE = re.compile(r"[A-Z0-9_$]*[A-Z0-9][A-Z0-9_$]*")


class ConstantNamesRule:
    """Constants and immutables use ALL_CAPS names."""

    rule_id = "constant_names"

    def evaluate(self, context: FileContext) -> list[Violation]:
        violations: list[Violation] = []
        for declaration in context.declarations:
            if declaration.kind is not DeclarationKind.VARIABLE:
                continue
            if declaration.mutability is Mutability.NONE:
                continue
            if is_valid_constant_name(declaration.name):
                continue
            violations.append(
                Violation.at(
                    declaration,
                    f"Invalid {declaration.mutability} name: {declaration.name}",
                )
            )
        return violations


def is_valid_constant_name(name: str) -> bool:
    return CONSTANT_NAME_RE.fullmatch(name) is not None
