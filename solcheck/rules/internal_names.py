"""Internal and private function naming rule."""

from __future__ import annotations

from solcheck.roles import Role
from solcheck.rules.base import HIDDEN_VISIBILITIES, FileContext, Violation

INTERNAL_PREFIX = "_"


class InternalNamesRule:
    """Internal and private functions in production contracts start with an underscore."""

    rule_id = "internal_names"

    def evaluate(self, context: FileContext) -> list[Violation]:
        if context.role is not Role.CONTRACT:
            return []

        violations: list[Violation] = []
        for declaration in context.contract_functions():
            if declaration.effective_visibility not in HIDDEN_VISIBILITIES:
                continue
            if declaration.name.startswith(INTERNAL_PREFIX):
                continue
            violations.append(
                Violation.at(declaration, f"Invalid src method name: {declaration.name}")
            )
        return violations
