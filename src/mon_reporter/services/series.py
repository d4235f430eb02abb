from __future__ import annotations

import pandas as pd

from mon_reporter.models import ChartSeries
from mon_reporter.services.ingest import validate_required_columns

_EPOCH_MS_THRESHOLD = 1e11


def build_time_series(frame: pd.DataFrame, x_column: str, y_columns: list[str]) -> list[ChartSeries]:
    validate_required_columns(frame, [x_column, *y_columns])
    epochs = _to_epoch_ms(frame[x_column])
    valid = epochs.notna()
    series: list[ChartSeries] = []
    for column in y_columns:
        values = _to_numeric(frame[column])
        points = [(int(x), float(y)) for x, y in zip(epochs[valid], values[valid])]
        series.append(ChartSeries(label=column, points=points))
    return series


def build_category_series(
    frame: pd.DataFrame,
    label_column: str,
    value_column: str,
    y2_column: str | None = None,
) -> list[ChartSeries]:
    required = [label_column, value_column] + ([y2_column] if y2_column else [])
    validate_required_columns(frame, required)
    labels = frame[label_column].astype(str).str.strip()
    series = [
        ChartSeries(
            label=value_column,
            points=[(label, float(v)) for label, v in zip(labels, _to_numeric(frame[value_column]))],
        )
    ]
    if y2_column:
        series.append(
            ChartSeries(
                label=y2_column,
                points=[(label, float(v)) for label, v in zip(labels, _to_numeric(frame[y2_column]))],
            )
        )
    return series


def _to_numeric(column: pd.Series) -> pd.Series:
    cleaned = column.astype(str).str.replace(",", "", regex=False).str.strip()
    return pd.to_numeric(cleaned, errors="coerce").fillna(0.0)


def _to_epoch_ms(column: pd.Series) -> pd.Series:
    text = column.astype(str).str.strip()
    numeric = pd.to_numeric(text, errors="coerce")
    filled = int((text != "").sum())
    if filled and numeric.notna().sum() * 2 >= filled:
        # Bare numbers are epoch seconds unless they are already milliseconds.
        # Blank or garbage cells stay NaN and are dropped by the caller.
        return numeric.where(numeric.abs() >= _EPOCH_MS_THRESHOLD, numeric * 1000).round()
    parsed = pd.to_datetime(column, errors="coerce", utc=True)
    return ((parsed - pd.Timestamp(0, tz="UTC")).dt.total_seconds() * 1000).round()
