"""
Sort rule editing
Keeps at most one rule per column; every operation returns a new list.
"""

from typing import List, Optional, Sequence

from shared.models.sortly import ParseResult, Row, SortDirection, SortRule, SortType
from sortly.services.type_inference import SortTypeInferenceService


class SortRuleEditor:

    @staticmethod
    def _new_rule(column: str, rows: Sequence[Row]) -> SortRule:
        return SortRule(
            column=column,
            direction=SortDirection.ASC,
            type=SortTypeInferenceService.detect_sort_type(rows, column),
        )

    @classmethod
    def initial_rules(cls, result: ParseResult) -> List[SortRule]:
        """A freshly parsed dataset starts sorted ascending by its first column"""
        if not result.columns:
            return []
        return [cls._new_rule(result.columns[0], result.rows)]

    @classmethod
    def add_rule(
        cls, rules: Sequence[SortRule], columns: Sequence[str], rows: Sequence[Row]
    ) -> List[SortRule]:
        """Append a rule for the first unused column, or the first column if all are used"""
        if not columns:
            return list(rules)
        used = {rule.column for rule in rules}
        column = next((c for c in columns if c not in used), columns[0])
        return [*rules, cls._new_rule(column, rows)]

    @staticmethod
    def update_rule(
        rules: Sequence[SortRule],
        index: int,
        rows: Sequence[Row],
        column: Optional[str] = None,
        direction: Optional[SortDirection] = None,
        sort_type: Optional[SortType] = None,
    ) -> List[SortRule]:
        """Patch one rule; switching column re-detects the type unless one is given"""
        if not 0 <= index < len(rules):
            raise IndexError(f"rule index {index} out of range")

        patch = {}
        if column is not None and column != rules[index].column:
            patch["column"] = column
            patch["type"] = SortTypeInferenceService.detect_sort_type(rows, column)
        if direction is not None:
            patch["direction"] = SortDirection(direction)
        if sort_type is not None:
            patch["type"] = SortType(sort_type)

        return [
            rule.model_copy(update=patch) if i == index else rule
            for i, rule in enumerate(rules)
        ]

    @staticmethod
    def remove_rule(rules: Sequence[SortRule], index: int) -> List[SortRule]:
        return [rule for i, rule in enumerate(rules) if i != index]

    @staticmethod
    def move_rule(rules: Sequence[SortRule], index: int, new_index: int) -> List[SortRule]:
        """Change a rule's priority"""
        if not 0 <= index < len(rules):
            raise IndexError(f"rule index {index} out of range")
        moved = list(rules)
        rule = moved.pop(index)
        moved.insert(max(0, min(new_index, len(moved))), rule)
        return moved

    @classmethod
    def toggle_column(
        cls, rules: Sequence[SortRule], column: str, rows: Sequence[Row]
    ) -> List[SortRule]:
        """
        Header-click cycle: no rule -> ascending (lowest priority)
        -> descending -> removed.
        """
        existing = next((rule for rule in rules if rule.column == column), None)
        if existing is None:
            return [*rules, cls._new_rule(column, rows)]
        if existing.direction == SortDirection.ASC:
            return [
                rule.model_copy(update={"direction": SortDirection.DESC}) if rule.column == column else rule
                for rule in rules
            ]
        return [rule for rule in rules if rule.column != column]
