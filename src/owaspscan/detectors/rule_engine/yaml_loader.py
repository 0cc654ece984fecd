# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Load and validate YAML-based custom detection rules."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from owaspscan.core.exceptions import RuleDefinitionError
from owaspscan.detectors.rule_engine.yaml_rule import YamlRule, YamlRuleDefinition

logger = logging.getLogger("owaspscan.detectors.rule_engine.yaml_loader")


def load_yaml_rules_from_directory(rules_dir: str | Path) -> list[YamlRule]:
    """Discover and validate YAML rules from *rules_dir*.

    Parameters
    ----------
    rules_dir:
        Path to a directory containing ``.yml`` / ``.yaml`` rule files.

    Returns
    -------
    list[YamlRule]
        Successfully loaded rules, sorted by file name. Invalid files are
        logged and skipped.
    """
    rules_path = Path(rules_dir)

    if not rules_path.is_dir():
        logger.warning("Custom rules directory does not exist: %s", rules_path)
        return []

    loaded_rules: list[YamlRule] = []
    yaml_files = sorted([*rules_path.glob("*.yml"), *rules_path.glob("*.yaml")])

    if not yaml_files:
        logger.info("No YAML rule files found in %s", rules_path)
        return []

    for filepath in yaml_files:
        try:
            loaded_rules.append(load_yaml_rule(filepath))
        except (OSError, RuleDefinitionError) as exc:
            logger.warning("Skipping rule file %s: %s", filepath.name, exc)

    logger.info("Loaded %d custom YAML rules from %s", len(loaded_rules), rules_path)
    return loaded_rules


def load_yaml_rule(filepath: str | Path) -> YamlRule:
    """Parse a single YAML file into a :class:`YamlRule`.

    Raises :class:`RuleDefinitionError` for encoding, syntax, schema, or pattern
    errors.
    """
    path = Path(filepath)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Rule file {path.name} is not valid UTF-8: {exc}"
        raise RuleDefinitionError(msg) from exc

    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML syntax in {path.name}: {exc}"
        raise RuleDefinitionError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Expected a mapping at top level in {path.name}, got {type(data).__name__}"
        raise RuleDefinitionError(msg)

    try:
        definition = YamlRuleDefinition(**data)
    except ValidationError as exc:
        msg = f"Schema validation failed for {path.name}: {exc}"
        raise RuleDefinitionError(msg) from exc

    rule = YamlRule(definition)
    logger.debug("Loaded YAML rule %s from %s", rule.rule_id, path.name)
    return rule
