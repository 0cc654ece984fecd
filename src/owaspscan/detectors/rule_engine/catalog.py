# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Immutable rule catalog built from the registry plus optional YAML rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from functools import lru_cache
from pathlib import Path

# Import all rule modules to trigger registration
import owaspscan.detectors.rule_engine.rules.access_control
import owaspscan.detectors.rule_engine.rules.authentication
import owaspscan.detectors.rule_engine.rules.cryptographic_failures
import owaspscan.detectors.rule_engine.rules.injection
import owaspscan.detectors.rule_engine.rules.insecure_design
import owaspscan.detectors.rule_engine.rules.integrity
import owaspscan.detectors.rule_engine.rules.logging_failures
import owaspscan.detectors.rule_engine.rules.misconfiguration
import owaspscan.detectors.rule_engine.rules.outdated_components
import owaspscan.detectors.rule_engine.rules.ssrf  # noqa: F401
from owaspscan.core.config import get_settings
from owaspscan.core.constants import Language
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.registry import RuleRegistry
from owaspscan.detectors.rule_engine.yaml_loader import load_yaml_rules_from_directory

logger = logging.getLogger("owaspscan.detectors.rule_engine.catalog")


class RuleCatalog:
    """Read-only, ordered collection of rule instances.

    Rules are ordered by category, then by registration order within their
    module; YAML rules follow the built-in ones. The catalog is never mutated
    after construction and may be shared across threads.
    """

    def __init__(self, rules: Iterable[BaseRule]) -> None:
        ordered: list[BaseRule] = []
        seen: set[str] = set()
        for r in rules:
            if r.rule_id in seen:
                logger.warning("Duplicate rule id %s ignored", r.rule_id)
                continue
            seen.add(r.rule_id)
            ordered.append(r)
        self._rules: tuple[BaseRule, ...] = tuple(ordered)
        self._index = {r.rule_id: i for i, r in enumerate(self._rules)}
        self._by_language: dict[Language, tuple[BaseRule, ...]] = {
            lang: tuple(r for r in self._rules if r.applies_to(lang)) for lang in Language
        }

    @property
    def rules(self) -> tuple[BaseRule, ...]:
        return self._rules

    def rules_for(self, language: Language) -> tuple[BaseRule, ...]:
        return self._by_language[language]

    def get(self, rule_id: str) -> BaseRule | None:
        idx = self._index.get(rule_id)
        return None if idx is None else self._rules[idx]

    def order_of(self, rule_id: str) -> int:
        return self._index.get(rule_id, len(self._rules))

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[BaseRule]:
        return iter(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index


def build_catalog(
    custom_rules_dir: str | Path | None = None,
    disabled_rules: Iterable[str] = (),
) -> RuleCatalog:
    """Build a catalog from the built-in rules plus YAML rules in *custom_rules_dir*."""
    disabled = set(disabled_rules)
    builtin = sorted(RuleRegistry.get_enabled(), key=lambda r: r.category.value)
    rules: list[BaseRule] = [r for r in builtin if r.rule_id not in disabled]
    if custom_rules_dir:
        logger.info("Loading custom YAML rules from %s", custom_rules_dir)
        rules.extend(
            r
            for r in load_yaml_rules_from_directory(custom_rules_dir)
            if r.enabled and r.rule_id not in disabled
        )
    catalog = RuleCatalog(rules)
    logger.debug("Built rule catalog with %d rules", len(catalog))
    return catalog


@lru_cache(maxsize=1)
def get_default_catalog() -> RuleCatalog:
    """Process-wide catalog built once from settings."""
    settings = get_settings()
    return build_catalog(settings.custom_rules_dir or None, settings.disabled_rules)
