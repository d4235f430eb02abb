from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key

from mon_reporter.models import ReportTable
from mon_reporter.sorting.classifier import ColumnType, classify_column
from mon_reporter.sorting.comparators import comparator_for

logger = logging.getLogger(__name__)

SORTED_CLASS = "sorttable_sorted"
SORTED_REVERSE_CLASS = "sorttable_sorted_reverse"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def toggled(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING

    @classmethod
    def parse(cls, value: str | SortDirection) -> SortDirection:
        if isinstance(value, SortDirection):
            return value
        normalized = str(value).strip().lower()
        if normalized in {"asc", "ascending"}:
            return cls.ASCENDING
        if normalized in {"desc", "descending"}:
            return cls.DESCENDING
        raise ValueError(f"Unknown sort direction '{value}'. Use ascending or descending.")


@dataclass(slots=True)
class TableSortState:
    column_types: dict[int, ColumnType] = field(default_factory=dict)
    active_column: int | None = None
    direction: SortDirection | None = None

    def reset(self) -> None:
        self.column_types.clear()
        self.active_column = None
        self.direction = None


class TableSorter:
    """Sorts the data rows of one table and remembers its sort state.

    One sorter per table: the column type cache and the active column never
    leak between tables.
    """

    def __init__(
        self,
        table: ReportTable,
        initial_direction: SortDirection = SortDirection.ASCENDING,
    ) -> None:
        self.table = table
        self.initial_direction = initial_direction
        self.state = TableSortState()

    def column_type(self, column_index: int) -> ColumnType:
        self._check_column(column_index)
        cached = self.state.column_types.get(column_index)
        if cached is not None:
            return cached
        column_type = classify_column(_cell(row, column_index) for row in self.table.rows)
        self.state.column_types[column_index] = column_type
        return column_type

    def sort(self, column_index: int) -> SortDirection | None:
        """Header activation: sort a new column, or flip the direction of the active one."""
        self._check_column(column_index)
        if not self._is_sortable(column_index):
            return None
        if self.state.active_column == column_index and self.state.direction is not None:
            return self.sort_by(column_index, self.state.direction.toggled())
        return self.sort_by(column_index, self.initial_direction)

    def sort_by(
        self,
        column_index: int,
        direction: SortDirection | str = SortDirection.ASCENDING,
    ) -> SortDirection | None:
        self._check_column(column_index)
        direction = SortDirection.parse(direction)
        if not self._is_sortable(column_index):
            return None

        column_type = self.column_type(column_index)
        compare = comparator_for(column_type)
        # Keys are parsed from the cell text on every call.
        ordered = sorted(
            self.table.rows,
            key=cmp_to_key(lambda a, b: compare(_cell(a, column_index), _cell(b, column_index))),
        )
        if direction is SortDirection.DESCENDING:
            ordered.reverse()

        self.table.rows[:] = ordered
        self._mark(column_index, direction)
        logger.debug(
            "Sorted table %s on column %d as %s (%s, %d rows)",
            self.table.table_id,
            column_index,
            column_type.value,
            direction.value,
            len(ordered),
        )
        return direction

    def replace_rows(self, rows: Sequence[Sequence[str]]) -> None:
        self.table.rows = [[str(cell) for cell in row] for row in rows]
        self.state.reset()
        self.table.sorted_column = None
        self.table.sort_direction = None

    def _is_sortable(self, column_index: int) -> bool:
        return bool(self.table.rows) and column_index not in self.table.unsortable_columns

    def _check_column(self, column_index: int) -> None:
        width = len(self.table.header) or max((len(row) for row in self.table.rows), default=0)
        if column_index < 0 or column_index >= width:
            raise ValueError(f"Column index {column_index} out of range for table '{self.table.table_id}' ({width} columns)")

    def _mark(self, column_index: int, direction: SortDirection) -> None:
        self.state.active_column = column_index
        self.state.direction = direction
        self.table.sorted_column = column_index
        self.table.sort_direction = direction.value


def header_indicator(table: ReportTable, column_index: int) -> tuple[str, str]:
    """CSS class and arrow glyph for a header cell."""
    if table.sorted_column != column_index or table.sort_direction is None:
        return "", ""
    if table.sort_direction == SortDirection.DESCENDING.value:
        return SORTED_REVERSE_CLASS, "▴"
    return SORTED_CLASS, "▾"


def _cell(row: Sequence[str], column_index: int) -> str:
    if column_index < len(row):
        return str(row[column_index])
    return ""
