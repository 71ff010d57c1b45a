"""Rule registry: resolves a configuration into the active rule set."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from uilint.kernel.config.models import LintConfig
from uilint.kernel.exceptions import ConfigError
from uilint.kernel.linting.component_rules import BUILTIN_RULES
from uilint.kernel.linting.models import NodeKind, Severity
from uilint.kernel.linting.rules import Rule
from uilint.kernel.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RuleRegistry:
    """The resolved, ordered and immutable rule set for a run.

    A resolved registry holds no mutable state and can be shared by
    reference between concurrent runs.
    """

    rules: tuple[Rule, ...] = ()

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __contains__(self, rule_id: object) -> bool:
        return any(r.id == rule_id for r in self.rules)

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(r.id for r in self.rules)

    def get(self, rule_id: str) -> Rule | None:
        return next((r for r in self.rules if r.id == rule_id), None)

    def for_kind(self, kind: NodeKind) -> tuple[Rule, ...]:
        """Rules that apply to ``kind``, in registry order."""
        return tuple(r for r in self.rules if r.applies(kind))


def _check_known(ids: Sequence[str] | set[str], known: set[str], what: str) -> None:
    for rule_id in sorted(ids):
        if rule_id not in known:
            raise ConfigError(
                f"unknown rule id in {what} (known: {', '.join(sorted(known))})",
                rule_id=rule_id,
            )


def resolve(
    config: LintConfig | None = None,
    catalog: Sequence[Rule] = BUILTIN_RULES,
) -> RuleRegistry:
    """Resolve a configuration against the rule catalog.

    Resolution order: the catalog, minus disabled ids, with severity
    overrides and option overrides applied, followed by the extra rules.

    Parameters
    ----------
    config : LintConfig | None
        Rule configuration; ``None`` means the defaults
    catalog : Sequence[Rule]
        Built-in rules to start from

    Returns
    -------
    RuleRegistry
        The immutable active rule set

    Raises
    ------
    ConfigError
        If a configured id or severity is unknown, an option is undeclared
        or invalid, or an extra rule collides with an existing id
    """
    config = config or LintConfig()
    known = {r.id for r in catalog}

    _check_known(config.disabled_rule_ids, known, "disabled rules")
    _check_known(set(config.severity_overrides), known, "severity overrides")
    _check_known(set(config.rule_options), known, "rule options")

    rules: list[Rule] = []
    for catalog_rule in catalog:
        if catalog_rule.id in config.disabled_rule_ids:
            logger.debug("Rule {rule_id} disabled", rule_id=catalog_rule.id)
            continue
        resolved = catalog_rule
        if (override := config.severity_overrides.get(resolved.id)) is not None:
            try:
                severity = Severity.parse(override)
            except ValueError as e:
                raise ConfigError(str(e), rule_id=resolved.id) from e
            resolved = resolved.with_severity(severity)
        if (options := config.rule_options.get(resolved.id)) is not None:
            if not isinstance(options, Mapping):
                raise ConfigError("options must be a mapping of name to value", rule_id=resolved.id)
            resolved = resolved.with_options(options)
        rules.append(resolved)

    seen = {r.id for r in rules}
    for extra in config.extra_rules:
        if extra.id in seen:
            raise ConfigError("duplicate rule id", rule_id=extra.id)
        seen.add(extra.id)
        rules.append(extra)

    logger.debug(
        "Resolved {count} active rule(s): {ids}",
        count=len(rules),
        ids=", ".join(r.id for r in rules),
    )
    return RuleRegistry(rules=tuple(rules))
