"""Script entrypoint rule."""

from __future__ import annotations

from solcheck.declarations import Declaration, DeclarationKind
from solcheck.roles import Role, is_executable_script
from solcheck.rules.base import EXPOSED_VISIBILITIES, FileContext, Violation

ENTRYPOINT_NAME = "run"
SETUP_NAME = "setUp"


class ScriptEntrypointRule:
    """Executable scripts expose a single public or external method named `run`."""

    rule_id = "script_entrypoint"

    def evaluate(self, context: FileContext) -> list[Violation]:
        if context.role is not Role.SCRIPT or not is_executable_script(context.path):
            return []

        exposed = [item for item in context.contract_functions() if _is_exposed(item)]
        if not exposed:
            return [self._missing_entrypoint(context)]

        violations: list[Violation] = []
        entrypoint_seen = False
        for declaration in exposed:
            if declaration.name == ENTRYPOINT_NAME and not entrypoint_seen:
                entrypoint_seen = True
                continue
            violations.append(
                Violation.at(
                    declaration,
                    f"Scripts must have a single public method named `{ENTRYPOINT_NAME}`, "
                    f"found extra public method `{declaration.name}`",
                )
            )
        return violations

    def _missing_entrypoint(self, context: FileContext) -> Violation:
        line = 1
        for declaration in context.declarations:
            if declaration.kind is DeclarationKind.CONTRACT:
                line = declaration.line_start
                break
        return Violation(
            line_start=line,
            line_end=line,
            message=f"No public `{ENTRYPOINT_NAME}` method found",
        )


def _is_exposed(declaration: Declaration) -> bool:
    return (
        declaration.name != SETUP_NAME
        and declaration.effective_visibility in EXPOSED_VISIBILITIES
    )
