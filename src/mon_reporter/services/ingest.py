from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from mon_reporter.models import ReportTable

logger = logging.getLogger(__name__)


def load_csv_with_limit(path: str | Path, row_limit: int | None = None) -> pd.DataFrame:
    data_path = Path(path)
    if not data_path.exists():
        raise FileNotFoundError(f"Input file not found: {data_path}")
    if row_limit is None:
        nrows = None
    else:
        if row_limit <= 0:
            raise ValueError("row_limit must be > 0.")
        nrows = row_limit

    if data_path.suffix.lower() not in {".csv", ".tsv", ".txt"}:
        raise ValueError("Unsupported file type. Supported: .csv, .tsv, .txt")
    frame = _read_delimited_auto(data_path, nrows=nrows)
    frame.columns = [str(c).strip() for c in frame.columns]
    logger.debug("Loaded %d rows x %d columns from %s", len(frame), len(frame.columns), data_path)
    return frame


def _read_delimited_auto(path: Path, nrows: int | None) -> pd.DataFrame:
    # Collector exports are either comma or tab separated; keep cells as display text.
    return pd.read_csv(path, nrows=nrows, sep=None, engine="python", dtype=str, na_filter=False)


def validate_required_columns(df: pd.DataFrame, required_columns: list[str]) -> None:
    missing = [col for col in required_columns if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def frame_to_table(
    frame: pd.DataFrame,
    table_id: str,
    title: str = "",
    columns: list[str] | None = None,
    unsortable_columns: list[str] | None = None,
) -> ReportTable:
    selected = list(columns) if columns else [str(c) for c in frame.columns]
    validate_required_columns(frame, selected)
    header = list(selected)
    rows = [["" if cell is None else str(cell).strip() for cell in record] for record in frame[selected].itertuples(index=False)]
    unsortable = [header.index(name) for name in (unsortable_columns or []) if name in header]
    return ReportTable(
        table_id=table_id,
        title=title,
        header=header,
        rows=rows,
        unsortable_columns=unsortable,
    )
