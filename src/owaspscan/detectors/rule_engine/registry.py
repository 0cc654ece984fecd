# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rule registration and discovery."""

from __future__ import annotations

from typing import TypeVar

from owaspscan.core.constants import OwaspCategory
from owaspscan.detectors.rule_engine.base_rule import BaseRule

T = TypeVar("T", bound=BaseRule)


class RuleRegistry:
    """Central registry of built-in rule classes, kept in registration order."""

    _rules: dict[str, type[BaseRule]] = {}

    @classmethod
    def register(cls, rule_class: type[T]) -> type[T]:
        if rule_class.rule_id in cls._rules:
            msg = f"Duplicate rule id {rule_class.rule_id}"
            raise ValueError(msg)
        cls._rules[rule_class.rule_id] = rule_class
        return rule_class

    @classmethod
    def get_all(cls) -> list[type[BaseRule]]:
        return list(cls._rules.values())

    @classmethod
    def get_enabled(cls) -> list[BaseRule]:
        return [r() for r in cls._rules.values() if r.enabled]

    @classmethod
    def get_by_category(cls, category: OwaspCategory) -> list[type[BaseRule]]:
        return [r for r in cls._rules.values() if r.category == category]


def rule(cls: type[T]) -> type[T]:
    """Decorator to register a rule class."""
    return RuleRegistry.register(cls)
