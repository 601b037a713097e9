"""
Value parsing and comparators for the multi-key sorter.

All comparators take trimmed strings and return a negative, zero or positive
int. Unparseable numeric/date values are not errors: they sink after
parseable ones (before the direction is applied).
"""

import math
import re
import unicodedata
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from shared.models.sortly import SortType

Comparator = Callable[[str, str], int]

NON_NUMERIC_CHARS_RE = re.compile(r"[^0-9.\-+eE]")
# Longest leading float literal, e.g. "12.5.3" -> "12.5", "3e" -> "3"
FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

DATE_SEPARATOR_RE = re.compile(r"[-/.]")

DATE_FORMATS = [
    # ISO-like
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    # US formats
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    # European formats
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d.%m.%Y %H:%M",
    # Month names
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
]

# Korean / Japanese / Chinese year-month-day forms
CJK_DATE_PATTERNS = [
    re.compile(r"^(\d{4})년\s*(\d{1,2})월\s*(\d{1,2})일$"),
    re.compile(r"^(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日$"),
]


def _sign(value: float) -> int:
    if value < 0:
        return -1
    if value > 0:
        return 1
    return 0


def parse_number(value: str) -> Optional[float]:
    """
    Strip everything except digits, `.`, `-`, `+`, `e`, `E` and parse the
    leading float literal. "1,234" -> 1234.0, "$5.00" -> 5.0, "abc" -> None.
    """
    stripped = NON_NUMERIC_CHARS_RE.sub("", value)
    match = FLOAT_PREFIX_RE.match(stripped)
    if not match:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


def _to_timestamp(parsed: datetime) -> float:
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def parse_date(value: str) -> Optional[float]:
    """Parse a calendar date/time into an epoch timestamp (naive values read as UTC)"""
    text = value.strip()
    if not text:
        return None

    try:
        return _to_timestamp(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return _to_timestamp(datetime.strptime(text, fmt))
        except ValueError:
            continue

    for pattern in CJK_DATE_PATTERNS:
        match = pattern.match(text)
        if match:
            year, month, day = (int(part) for part in match.groups())
            try:
                return _to_timestamp(datetime(year, month, day))
            except ValueError:
                return None

    return None


def looks_date_like(value: str) -> bool:
    return DATE_SEPARATOR_RE.search(value) is not None and parse_date(value) is not None


def looks_numeric(value: str) -> bool:
    return parse_number(value) is not None


def _base_letters(value: str) -> str:
    """Case and accent folded form: "Élan" -> "elan" """
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def compare_alpha(a: str, b: str) -> int:
    key_a, key_b = _base_letters(a), _base_letters(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def _compare_parsed(a: Optional[float], b: Optional[float]) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return 1  # unparseable sinks
    if b is None:
        return -1
    return _sign(a - b)


def compare_numeric(a: str, b: str) -> int:
    return _compare_parsed(parse_number(a), parse_number(b))


def compare_date(a: str, b: str) -> int:
    return _compare_parsed(parse_date(a), parse_date(b))


def compare_length(a: str, b: str) -> int:
    return _sign(len(a) - len(b))


COMPARATORS: Dict[SortType, Comparator] = {
    SortType.ALPHA: compare_alpha,
    SortType.NUMERIC: compare_numeric,
    SortType.DATE: compare_date,
    SortType.LENGTH: compare_length,
}


def get_comparator(sort_type: SortType) -> Comparator:
    return COMPARATORS[SortType(sort_type)]
