"""
Multi-Key Sorter
Applies an ordered list of sort rules and returns a new, stably sorted list
"""

from functools import cmp_to_key
from typing import List, Sequence

from shared.models.sortly import Row, SortDirection, SortRule
from sortly.services.comparators import get_comparator


class MultiKeySorter:
    """Stable multi-column sorting; earlier rules have higher priority."""

    @staticmethod
    def compare_rows(a: Row, b: Row, rules: Sequence[SortRule]) -> int:
        for rule in rules:
            value_a = (a.get(rule.column) or "").strip()
            value_b = (b.get(rule.column) or "").strip()
            result = get_comparator(rule.type)(value_a, value_b)
            if result != 0:
                return result if rule.direction == SortDirection.ASC else -result
        return 0

    @classmethod
    def sort_rows(cls, rows: Sequence[Row], rules: Sequence[SortRule]) -> List[Row]:
        """
        Sort rows by rules without mutating the input.

        Rows equal under every rule keep their original relative order
        (`sorted` is stable), regardless of direction.
        """
        if not rules:
            return list(rows)

        rules = list(rules)
        return sorted(rows, key=cmp_to_key(lambda a, b: cls.compare_rows(a, b, rules)))
