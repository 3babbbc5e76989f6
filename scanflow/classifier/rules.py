"""
==============================================================================
Barcode Classifier Module
==============================================================================

Ordered, first-match-wins rule tables that map a decoded value to a
category label.

Rule Tables:
------------
STANDARD_RULES (BarcodeMode.STANDARD)
    1. Serial Number  3 letters + 4 digits + 4 alphanumerics
    2. Deviation      "DEV", optional dash, 5 digits
    3. MAC Address    6 colon-separated hex pairs
    4. ASY            "ASY" + 5 digits + 2-3 digits + alnum/digit (unanchored)
    5. PCA            "PCA" + 5 digits + 2 digits + alnum/digit (unanchored)

UNIQUE_RULES (BarcodeMode.UNIQUE)
    1. Serial Number  M48L[B]/C96L[B]/C48 - B|C + 1-2 digits - 5 alnum - 1 alnum
    2. Deviation      as above
    3. MAC Address    as above
    4. ASY            as above
    5. ASY-OTL        "JPN" + 4 digits + 1 uppercase letter + 3 digits
    6. PCA            3 letters + 4 digits + 4 alphanumerics

Anything unmatched is "Unknown".

The two tables are declared independently even where patterns coincide:
the 11-character letter/digit shape is a Serial Number in Standard mode and
a PCA in Unique mode.

==============================================================================
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple, Union

from scanflow.domain.models import UNKNOWN_CATEGORY, BarcodeMode


# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """
    One row of a rule table.

    Attributes:
        pattern: Compiled regular expression searched against the value
        category_label: Label returned when the pattern matches
    """

    pattern: Pattern[str]
    category_label: str

    def matches(self, value: str) -> bool:
        return self.pattern.search(value) is not None


# =============================================================================
# STANDARD RULE TABLE
# =============================================================================

STANDARD_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        re.compile(r"^[a-zA-Z]{3}[0-9]{4}[0-9a-zA-Z]{4}$"),
        "Serial Number",
    ),
    ClassificationRule(
        re.compile(r"^[dD][eE][vV]-?[0-9]{5}$"),
        "Deviation",
    ),
    ClassificationRule(
        re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}$"),
        "MAC Address",
    ),
    ClassificationRule(
        re.compile(r"[aA][sS][yY][- ]*([0-9]{5})[- ]*([0-9]{2}[0-9]?)[- ]*([0-9a-zA-Z][0-9])"),
        "ASY",
    ),
    ClassificationRule(
        re.compile(r"[pP][cC][aA][- ]*([0-9]{5})[- ]*([0-9]{2})[- ]*([0-9a-zA-Z][0-9])"),
        "PCA",
    ),
)


# =============================================================================
# UNIQUE RULE TABLE
# =============================================================================

UNIQUE_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        re.compile(r"^(M48L(B)?|C96L(B)?|C48)-[BC]\d{1,2}-[A-Za-z0-9]{5}-[A-Za-z0-9]$"),
        "Serial Number",
    ),
    ClassificationRule(
        re.compile(r"^[dD][eE][vV]-?[0-9]{5}$"),
        "Deviation",
    ),
    ClassificationRule(
        re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}$"),
        "MAC Address",
    ),
    ClassificationRule(
        re.compile(r"[aA][sS][yY][- ]*([0-9]{5})[- ]*([0-9]{2}[0-9]?)[- ]*([0-9a-zA-Z][0-9])"),
        "ASY",
    ),
    ClassificationRule(
        re.compile(r"^JPN[0-9]{4}[A-Z][0-9]{3}$"),
        "ASY-OTL",
    ),
    ClassificationRule(
        re.compile(r"^[a-zA-Z]{3}[0-9]{4}[0-9a-zA-Z]{4}$"),
        "PCA",
    ),
)


# Labels offered for manual category correction
CATEGORY_CHOICES: Tuple[str, ...] = (
    "ASY",
    "ASY-OTL",
    "PCA",
    "Serial Number",
    "MAC Address",
    "Deviation",
    UNKNOWN_CATEGORY,
)


def rules_for(mode: Union[BarcodeMode, str]) -> Tuple[ClassificationRule, ...]:
    """
    Get the rule table for a mode.

    Args:
        mode: BarcodeMode or its string value ("Standard" / "Unique")

    Returns:
        Ordered rule table

    Raises:
        ValueError: If the mode string is not recognized
    """
    mode = BarcodeMode(mode)
    if mode is BarcodeMode.UNIQUE:
        return UNIQUE_RULES
    return STANDARD_RULES


def classify(value: Optional[str], mode: Union[BarcodeMode, str] = BarcodeMode.STANDARD) -> str:
    """
    Assign a category to a decoded value.

    Pure and total: the first matching rule of the selected table wins and
    an unmatched (or missing) value yields "Unknown".

    Args:
        value: Decoded barcode text
        mode: Rule table selector

    Returns:
        Category label, never empty

    Example:
        >>> classify("ABC1234WXYZ", BarcodeMode.STANDARD)
        'Serial Number'
        >>> classify("ABC1234WXYZ", BarcodeMode.UNIQUE)
        'PCA'
    """
    if not value:
        return UNKNOWN_CATEGORY

    for rule in rules_for(mode):
        if rule.matches(value):
            return rule.category_label

    return UNKNOWN_CATEGORY
