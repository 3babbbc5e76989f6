"""
==============================================================================
Classifier Package
==============================================================================

Regex rule tables assigning categories to decoded barcode values.

Functions:
----------
- classify: (value, mode) -> category label
- rules_for: Rule table lookup by mode

==============================================================================
"""

from .rules import (
    CATEGORY_CHOICES,
    STANDARD_RULES,
    UNIQUE_RULES,
    ClassificationRule,
    classify,
    rules_for,
)

__all__ = [
    "CATEGORY_CHOICES",
    "STANDARD_RULES",
    "UNIQUE_RULES",
    "ClassificationRule",
    "classify",
    "rules_for",
]
