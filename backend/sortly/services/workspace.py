"""
Workspace flow
Explicit finite state for the paste/edit cycle: empty <-> editing.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from shared.exceptions.sortly import InvalidTransitionError, ParseEmptyInputError
from shared.models.sortly import HistoryEntry, Row, SharedPayload, SortDataset, SortRule
from sortly.services.rule_editor import SortRuleEditor
from sortly.services.sorter import MultiKeySorter
from sortly.services.tabular_parser import TabularParser


class WorkspaceState(str, Enum):
    EMPTY = "empty"
    EDITING = "editing"


class WorkspaceEvent(str, Enum):
    DATA_PARSED = "data_parsed"
    RESTORED = "restored"
    CLEARED = "cleared"


TRANSITIONS: Dict[Tuple[WorkspaceState, WorkspaceEvent], WorkspaceState] = {
    (WorkspaceState.EMPTY, WorkspaceEvent.DATA_PARSED): WorkspaceState.EDITING,
    (WorkspaceState.EMPTY, WorkspaceEvent.RESTORED): WorkspaceState.EDITING,
    (WorkspaceState.EDITING, WorkspaceEvent.DATA_PARSED): WorkspaceState.EDITING,
    (WorkspaceState.EDITING, WorkspaceEvent.RESTORED): WorkspaceState.EDITING,
    (WorkspaceState.EDITING, WorkspaceEvent.CLEARED): WorkspaceState.EMPTY,
}


class Workspace:
    """Holds the current dataset; a new paste or import supersedes it."""

    def __init__(self) -> None:
        self.state = WorkspaceState.EMPTY
        self.dataset: Optional[SortDataset] = None

    def _dispatch(self, event: WorkspaceEvent) -> None:
        next_state = TRANSITIONS.get((self.state, event))
        if next_state is None:
            raise InvalidTransitionError(self.state.value, event.value)
        self.state = next_state

    def paste(self, raw_text: str) -> SortDataset:
        """Parse text into a fresh dataset (new id) with an initial rule"""
        result = TabularParser.parse(raw_text)
        if result is None:
            raise ParseEmptyInputError()
        self._dispatch(WorkspaceEvent.DATA_PARSED)
        self.dataset = SortDataset.from_parse_result(result, SortRuleEditor.initial_rules(result))
        return self.dataset

    def restore(self, source: Union[HistoryEntry, SharedPayload]) -> SortDataset:
        """Load a history snapshot (keeps its id) or an imported share payload"""
        self._dispatch(WorkspaceEvent.RESTORED)
        if isinstance(source, HistoryEntry):
            self.dataset = source.to_dataset()
        else:
            self.dataset = SortDataset(
                columns=list(source.columns),
                rows=[dict(row) for row in source.rows],
                sort_rules=list(source.sort_rules),
                label=source.label,
            )
        return self.dataset

    def clear(self) -> None:
        self._dispatch(WorkspaceEvent.CLEARED)
        self.dataset = None

    def set_rules(self, rules: List[SortRule]) -> None:
        if self.dataset is None:
            raise InvalidTransitionError(self.state.value, "set_rules")
        self.dataset = self.dataset.model_copy(update={"sort_rules": list(rules)})

    def set_label(self, label: Optional[str]) -> None:
        if self.dataset is None:
            raise InvalidTransitionError(self.state.value, "set_label")
        self.dataset = self.dataset.model_copy(update={"label": label or None})

    def sorted_rows(self) -> List[Row]:
        if self.dataset is None:
            return []
        return MultiKeySorter.sort_rows(self.dataset.rows, self.dataset.sort_rules)
