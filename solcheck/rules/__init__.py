"""Rules package."""

from collections.abc import Callable
from dataclasses import dataclass

from solcheck.roles import Role
from solcheck.rules.base import Rule
from solcheck.rules.constant_names import ConstantNamesRule
from solcheck.rules.internal_names import InternalNamesRule
from solcheck.rules.script_entrypoint import ScriptEntrypointRule
from solcheck.rules.test_names import TestNamesRule

RuleSet = tuple[Rule, ...]


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing."""

    rule_id: str
    name: str
    description: str
    roles: tuple[Role, ...]


@dataclass(frozen=True, slots=True)
class _RuleSpec:
    rule_id: str
    factory: Callable[[], Rule]
    name: str
    description: str
    roles: tuple[Role, ...]


def default_rule_set() -> RuleSet:
    """Return the fixed, ordered convention rule set."""
    return tuple(spec.factory() for spec in _ordered_rule_specs())


def list_rule_info() -> list[RuleInfo]:
    """Return metadata for every rule in the default set."""
    return [
        RuleInfo(
            rule_id=spec.rule_id,
            name=spec.name,
            description=spec.description,
            roles=spec.roles,
        )
        for spec in _ordered_rule_specs()
    ]


def _ordered_rule_specs() -> list[_RuleSpec]:
    return [
        _spec(TestNamesRule, roles=(Role.TEST,)),
        _spec(ConstantNamesRule, roles=tuple(Role)),
        _spec(ScriptEntrypointRule, roles=(Role.SCRIPT,)),
        _spec(InternalNamesRule, roles=(Role.CONTRACT,)),
    ]


def _spec(rule_cls: type[Rule], *, roles: tuple[Role, ...]) -> _RuleSpec:
    instance = rule_cls()
    return _RuleSpec(
        rule_id=instance.rule_id,
        factory=rule_cls,
        name=rule_cls.__name__,
        description=(rule_cls.__doc__ or "").strip(),
        roles=roles,
    )
