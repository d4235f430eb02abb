from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import TypeVar

from mon_reporter.sorting.classifier import DMY_RE, YMD_RE, ColumnType

T = TypeVar("T")

SortKey = float | str
Comparator = Callable[[str, str], int]

UNIT_MULTIPLIERS: dict[str, float] = {
    "K": 1e3,
    "M": 1e6,
    "G": 1e9,
    "T": 1e12,
    "P": 1e15,
}

_UNIT_RE = re.compile(r"\d\s*([KMGTP])B?")
_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_LEADING_FLOAT_RE = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")
_ANNOTATION_RE = re.compile(r"\s*<?\s*\([^()]*%\s*\).*$")

MIN_DATE_KEY = 0.0


def parse_or_default(parser: Callable[[str], T | None], text: str, default: T) -> T:
    """Run a parser that signals failure with None and fall back to default."""
    value = parser(text)
    return default if value is None else value


def parse_leading_float(text: str) -> float | None:
    # Longest leading number: "1.2.3" -> 1.2, "-" -> no number.
    match = _LEADING_FLOAT_RE.match(text)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def unit_multiplier(text: str) -> float:
    match = _UNIT_RE.search(text)
    if not match:
        return 1.0
    return UNIT_MULTIPLIERS[match.group(1)]


def strip_annotation(text: str) -> str:
    return _ANNOTATION_RE.sub("", text)


def _magnitude(text: str) -> float:
    digits = _NON_NUMERIC_RE.sub("", text)
    return parse_or_default(parse_leading_float, digits, 0.0)


def numeric_key(text: str) -> float:
    return _magnitude(text) * unit_multiplier(text)


def percentage_key(text: str) -> float:
    return _magnitude(strip_annotation(text))


def _expand_year(year: str) -> int:
    if len(year) == 2:
        return 2000 + int(year) if int(year) < 50 else 1900 + int(year)
    return int(year)


def _date_ordinal(year: int, month: int, day: int) -> float:
    return float(year * 10000 + month * 100 + day)


def _parse_dmy(text: str) -> float | None:
    match = DMY_RE.match(text)
    if not match:
        return None
    return _date_ordinal(_expand_year(match.group(3)), int(match.group(2)), int(match.group(1)))


def _parse_mdy(text: str) -> float | None:
    match = DMY_RE.match(text)
    if not match:
        return None
    return _date_ordinal(_expand_year(match.group(3)), int(match.group(1)), int(match.group(2)))


def _parse_ymd(text: str) -> float | None:
    match = YMD_RE.match(text)
    if not match:
        return None
    return _date_ordinal(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def date_dmy_key(text: str) -> float:
    return parse_or_default(_parse_dmy, text.strip(), MIN_DATE_KEY)


def date_mdy_key(text: str) -> float:
    return parse_or_default(_parse_mdy, text.strip(), MIN_DATE_KEY)


def date_ymd_key(text: str) -> float:
    return parse_or_default(_parse_ymd, text.strip(), MIN_DATE_KEY)


def alphabetic_key(text: str) -> str:
    return text.strip()


def compare_keys(a: SortKey, b: SortKey) -> int:
    return (a > b) - (a < b)


def sort_numeric(a: str, b: str) -> int:
    return compare_keys(numeric_key(a), numeric_key(b))


def sort_percentage(a: str, b: str) -> int:
    return compare_keys(percentage_key(a), percentage_key(b))


def sort_ddmm(a: str, b: str) -> int:
    return compare_keys(date_dmy_key(a), date_dmy_key(b))


def sort_mmdd(a: str, b: str) -> int:
    return compare_keys(date_mdy_key(a), date_mdy_key(b))


def sort_yyyymmdd(a: str, b: str) -> int:
    return compare_keys(date_ymd_key(a), date_ymd_key(b))


def sort_alpha(a: str, b: str) -> int:
    return compare_keys(alphabetic_key(a), alphabetic_key(b))


def comparator_for(column_type: ColumnType) -> Comparator:
    """Text-level comparator for a classified column."""
    match column_type:
        case ColumnType.NUMERIC:
            return sort_numeric
        case ColumnType.PERCENTAGE:
            return sort_percentage
        case ColumnType.DATE_DMY:
            return sort_ddmm
        case ColumnType.DATE_MDY:
            return sort_mmdd
        case ColumnType.DATE_YMD:
            return sort_yyyymmdd
        case ColumnType.ALPHABETIC:
            return sort_alpha
    raise ValueError(f"Unknown column type: {column_type!r}")
