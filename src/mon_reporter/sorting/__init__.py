from mon_reporter.sorting.classifier import ColumnType, classify_column
from mon_reporter.sorting.comparators import comparator_for
from mon_reporter.sorting.engine import SortDirection, TableSorter, TableSortState, header_indicator

__all__ = [
    "ColumnType",
    "SortDirection",
    "TableSortState",
    "TableSorter",
    "classify_column",
    "comparator_for",
    "header_indicator",
]
