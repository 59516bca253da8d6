"""Rule registry for the review engine."""

from __future__ import annotations

from impactguard.rules.base import Rule


class RuleRegistry:
    """Registry of rule classes, kept in registration order.

    Rules are classes decorated with @register_rule; the engine runs them in
    the order they were registered.
    """

    def __init__(self) -> None:
        self._rules: dict[str, type[Rule]] = {}

    def register(self, rule_cls: type[Rule]) -> type[Rule]:
        """Register a rule class under its ``name``."""
        if not rule_cls.name:
            raise ValueError(f"Rule {rule_cls.__name__} has no name")
        if rule_cls.name in self._rules and self._rules[rule_cls.name] is not rule_cls:
            raise ValueError(f"Duplicate rule name: {rule_cls.name}")
        self._rules[rule_cls.name] = rule_cls
        return rule_cls

    def get(self, name: str) -> type[Rule] | None:
        """Get a rule class by name."""
        return self._rules.get(name)

    def list_rules(self) -> list[str]:
        """List all registered rule names."""
        return list(self._rules.keys())

    def create_all(self) -> list[Rule]:
        """Instantiate every registered rule, in registration order."""
        return [rule_cls() for rule_cls in self._rules.values()]


registry = RuleRegistry()


def register_rule(rule_cls: type[Rule]) -> type[Rule]:
    """Decorator adding a rule class to the default registry.

    Usage:
        @register_rule
        class MyRule(Rule):
            name = "my-rule"
            ...
    """
    return registry.register(rule_cls)


def default_rules() -> list[Rule]:
    """Fresh instances of the built-in rule set."""
    import impactguard.rules.builtin  # noqa: F401  (registers the built-ins)

    return registry.create_all()
