# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Source language classification."""

from owaspscan.classifier.language import classify, score_languages

__all__ = ["classify", "score_languages"]
