"""Tests for uilint.kernel.linting.registry."""

from __future__ import annotations

import pytest

from uilint.kernel.config.models import LintConfig
from uilint.kernel.exceptions import ConfigError
from uilint.kernel.linting.component_rules import BUILTIN_RULES
from uilint.kernel.linting.models import Match, NodeKind, Severity
from uilint.kernel.linting.registry import RuleRegistry, resolve
from uilint.kernel.linting.rules import Rule, rule


@rule(
    "no-inline-style",
    title="Inline style attribute",
    severity=Severity.INFO,
    applies_to={NodeKind.ATTRIBUTE},
)
def no_inline_style(view, options):  # type: ignore[no-untyped-def]
    return Match("inline style") if view.node.name == "style" else None


class TestResolveDefaults:
    def test_catalog_order(self) -> None:
        registry = resolve()
        assert registry.rule_ids == tuple(r.id for r in BUILTIN_RULES)

    def test_none_and_empty_config_equal(self) -> None:
        assert resolve(None) == resolve(LintConfig())

    def test_registry_is_immutable(self) -> None:
        registry = resolve()
        with pytest.raises(AttributeError):
            registry.rules = ()  # type: ignore[misc]

    def test_container_protocol(self) -> None:
        registry = resolve()
        assert "no-index-as-key" in registry
        assert "nope" not in registry
        assert len(registry) == len(BUILTIN_RULES)
        assert registry.get("nope") is None

    def test_for_kind(self) -> None:
        registry = resolve()
        assert {r.id for r in registry.for_kind(NodeKind.ATTRIBUTE)} == {
            "unsanitized-raw-html",
            "unvalidated-url-reference",
        }


class TestDisable:
    def test_disabled_rule_removed(self) -> None:
        registry = resolve(LintConfig(disabled_rule_ids=frozenset({"no-index-as-key"})))
        assert "no-index-as-key" not in registry
        assert len(registry) == len(BUILTIN_RULES) - 1

    def test_unknown_disabled_id(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            resolve(LintConfig(disabled_rule_ids=frozenset({"no-such-rule"})))
        assert exc_info.value.rule_id == "no-such-rule"


class TestSeverityOverrides:
    def test_override_applied(self) -> None:
        registry = resolve(LintConfig(severity_overrides={"no-index-as-key": Severity.ERROR}))
        resolved = registry.get("no-index-as-key")
        assert resolved is not None
        assert resolved.severity is Severity.ERROR

    def test_catalog_untouched(self) -> None:
        resolve(LintConfig(severity_overrides={"no-index-as-key": Severity.ERROR}))
        original = next(r for r in BUILTIN_RULES if r.id == "no-index-as-key")
        assert original.severity is Severity.WARNING

    def test_unknown_override_id(self) -> None:
        with pytest.raises(ConfigError, match="severity overrides"):
            resolve(LintConfig(severity_overrides={"ghost": Severity.ERROR}))

    def test_label_override(self) -> None:
        config = LintConfig(severity_overrides={"no-index-as-key": "error"})  # type: ignore[dict-item]
        resolved = resolve(config).get("no-index-as-key")
        assert resolved is not None
        assert resolved.severity is Severity.ERROR

    @pytest.mark.parametrize("label", ["critical", 5])
    def test_unknown_severity_label(self, label: object) -> None:
        config = LintConfig(severity_overrides={"no-index-as-key": label})  # type: ignore[dict-item]
        with pytest.raises(ConfigError, match="Unknown severity") as exc_info:
            resolve(config)
        assert exc_info.value.rule_id == "no-index-as-key"


class TestRuleOptions:
    def test_option_applied(self) -> None:
        registry = resolve(LintConfig(rule_options={"duplicate-literal-siblings": {"threshold": 5}}))
        resolved = registry.get("duplicate-literal-siblings")
        assert resolved is not None
        assert resolved.options["threshold"] == 5

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigError, match="unknown option"):
            resolve(LintConfig(rule_options={"duplicate-literal-siblings": {"limit": 5}}))

    def test_unknown_rule(self) -> None:
        with pytest.raises(ConfigError):
            resolve(LintConfig(rule_options={"ghost": {}}))

    @pytest.mark.parametrize("value", ["many", 2.5, True, None])
    def test_option_of_wrong_type(self, value: object) -> None:
        config = LintConfig(rule_options={"duplicate-literal-siblings": {"threshold": value}})
        with pytest.raises(ConfigError, match="threshold") as exc_info:
            resolve(config)
        assert exc_info.value.rule_id == "duplicate-literal-siblings"

    @pytest.mark.parametrize("value", [1, 0, -3])
    def test_threshold_below_two(self, value: int) -> None:
        config = LintConfig(rule_options={"duplicate-literal-siblings": {"threshold": value}})
        with pytest.raises(ConfigError, match="at least 2"):
            resolve(config)

    def test_options_must_be_a_mapping(self) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            resolve(LintConfig(rule_options={"duplicate-literal-siblings": 4}))  # type: ignore[dict-item]

    def test_option_check_on_custom_rule(self) -> None:
        def check(options):  # type: ignore[no-untyped-def]
            if not options["prefix"]:
                raise ValueError("prefix cannot be empty")

        custom = Rule(
            id="prefixed",
            title="prefixed",
            severity=Severity.INFO,
            applies_to=frozenset({NodeKind.ELEMENT}),
            predicate=lambda view, options: None,
            options={"prefix": "ui-"},
            option_check=check,
        )
        assert custom.with_options({"prefix": "app-"}).options["prefix"] == "app-"
        with pytest.raises(ConfigError, match="prefix cannot be empty"):
            custom.with_options({"prefix": ""})


class TestExtraRules:
    def test_appended_after_catalog(self) -> None:
        registry = resolve(LintConfig(extra_rules=(no_inline_style,)))
        assert registry.rule_ids[-1] == "no-inline-style"
        assert len(registry) == len(BUILTIN_RULES) + 1

    def test_duplicate_with_catalog(self) -> None:
        clash = Rule(
            id="no-index-as-key",
            title="clash",
            severity=Severity.INFO,
            applies_to=frozenset({NodeKind.ELEMENT}),
            predicate=lambda view, options: None,
        )
        with pytest.raises(ConfigError, match="duplicate rule id") as exc_info:
            resolve(LintConfig(extra_rules=(clash,)))
        assert exc_info.value.rule_id == "no-index-as-key"

    def test_duplicate_among_extras(self) -> None:
        with pytest.raises(ConfigError, match="no-inline-style"):
            resolve(LintConfig(extra_rules=(no_inline_style, no_inline_style)))

    def test_replacing_disabled_builtin(self) -> None:
        replacement = Rule(
            id="no-index-as-key",
            title="stricter",
            severity=Severity.ERROR,
            applies_to=frozenset({NodeKind.ELEMENT}),
            predicate=lambda view, options: None,
        )
        registry = resolve(
            LintConfig(
                disabled_rule_ids=frozenset({"no-index-as-key"}),
                extra_rules=(replacement,),
            )
        )
        assert registry.get("no-index-as-key") is replacement


class TestRuleRegistry:
    def test_empty(self) -> None:
        registry = RuleRegistry()
        assert len(registry) == 0
        assert list(registry) == []

    def test_custom_catalog(self) -> None:
        registry = resolve(catalog=(no_inline_style,))
        assert registry.rule_ids == ("no-inline-style",)
