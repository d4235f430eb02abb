from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Enum

logger = logging.getLogger(__name__)


class ColumnType(str, Enum):
    NUMERIC = "numeric"
    PERCENTAGE = "percentage"
    DATE_DMY = "date-dmy"
    DATE_MDY = "date-mdy"
    DATE_YMD = "date-ymd"
    ALPHABETIC = "alphabetic"


NUMERIC_RE = re.compile(r"^-?[£$¤€]?[\d,.]+\s*[%KMGTP]?B?$")
ANNOTATED_RE = re.compile(r"^-?[£$¤€]?[\d,.]+[^(]*\(\s*-?[\d,.]+\s*%\s*\)")
YMD_RE = re.compile(r"^(\d{4})-(\d\d?)-(\d\d?)$")
DMY_RE = re.compile(r"^(\d\d?)[/.-](\d\d?)[/.-]((\d\d)?\d\d)$")


def classify_text(text: str) -> ColumnType | None:
    """Classify a single cell, or return None when the cell is blank."""
    value = text.strip()
    if not value:
        return None
    if NUMERIC_RE.match(value):
        return ColumnType.NUMERIC
    if ANNOTATED_RE.match(value):
        return ColumnType.PERCENTAGE
    if YMD_RE.match(value):
        return ColumnType.DATE_YMD
    match = DMY_RE.match(value)
    if match:
        first, second = int(match.group(1)), int(match.group(2))
        if first > 12:
            return ColumnType.DATE_DMY
        if second > 12:
            return ColumnType.DATE_MDY
        # ambiguous, day first
        return ColumnType.DATE_DMY
    return ColumnType.ALPHABETIC


def classify_column(texts: Iterable[str]) -> ColumnType:
    """Pick the column type from the first non-empty cell.

    Later cells are never inspected, so a column that mixes plain numbers
    with free text is classified by whichever comes first.
    """
    for text in texts:
        column_type = classify_text(text)
        if column_type is not None:
            logger.debug("Classified column as %s from cell %r", column_type.value, text)
            return column_type
    return ColumnType.ALPHABETIC
