from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from mon_reporter.export.csv_exporter import export_csv
from mon_reporter.models import Chart, Report, ReportTable
from mon_reporter.rendering.html_renderer import render_html
from mon_reporter.report_types.registry import ChartDefinition, ReportTypeRegistry, TableDefinition
from mon_reporter.services.ingest import frame_to_table, load_csv_with_limit
from mon_reporter.services.series import build_category_series, build_time_series
from mon_reporter.sorting.engine import SortDirection, TableSorter

logger = logging.getLogger(__name__)


def build_report(
    report_type_id: str,
    registry: ReportTypeRegistry | None = None,
    data_root: str | Path = ".",
    row_limit: int | None = None,
    initial_direction: SortDirection = SortDirection.ASCENDING,
) -> tuple[Report, dict[str, TableSorter]]:
    """Load every table and chart of a report type.

    Returns the report together with one sorter per table, keyed by
    table id, so callers can keep sorting interactively.
    """
    report_registry = registry or ReportTypeRegistry()
    definition = report_registry.get(report_type_id)
    root = Path(data_root)
    frames: dict[Path, pd.DataFrame] = {}

    tables: list[ReportTable] = []
    sorters: dict[str, TableSorter] = {}
    for table_def in definition.tables:
        frame = _load_source(frames, root, table_def.source, row_limit)
        table = frame_to_table(
            frame,
            table_id=table_def.table_id,
            title=table_def.title,
            columns=table_def.columns or None,
            unsortable_columns=table_def.unsortable_columns,
        )
        sorter = TableSorter(table, initial_direction=initial_direction)
        _apply_initial_sort(sorter, table_def)
        tables.append(table)
        sorters[table.table_id] = sorter

    charts = [_build_chart(chart_def, _load_source(frames, root, chart_def.source, row_limit)) for chart_def in definition.charts]

    report = Report(
        report_type_id=definition.report_type_id,
        report_title=definition.title,
        summary=definition.summary,
        tables=tables,
        charts=charts,
        metadata={"schema_version": definition.version},
    )
    return report, sorters


def run_pipeline(
    report_type_id: str,
    output_dir: str | Path = "outputs",
    registry: ReportTypeRegistry | None = None,
    data_root: str | Path = ".",
    row_limit: int | None = None,
) -> tuple[Path, Path]:
    report, _ = build_report(
        report_type_id=report_type_id,
        registry=registry,
        data_root=data_root,
        row_limit=row_limit,
    )

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    generated_at = datetime.now(timezone.utc)
    run_id = generated_at.strftime("%y%m%d_%H%M_%f")
    report.metadata["report_id"] = f"{report_type_id}.{run_id}"
    report.metadata["generated_at_utc"] = generated_at.isoformat()

    json_content = json.dumps(report.model_dump(mode="json"), indent=2)
    html_content = render_html(report)

    json_file = output_path / f"{report_type_id}.{run_id}.report.json"
    html_file = output_path / f"{report_type_id}.{run_id}.report.html"
    latest_json_file = output_path / f"{report_type_id}.report.json"
    latest_html_file = output_path / f"{report_type_id}.report.html"

    json_file.write_text(json_content, encoding="utf-8")
    html_file.write_text(html_content, encoding="utf-8")
    latest_json_file.write_text(json_content, encoding="utf-8")
    latest_html_file.write_text(html_content, encoding="utf-8")
    for chart in report.charts:
        csv_file = output_path / f"{report_type_id}.{chart.chart_id}.csv"
        csv_file.write_text(export_csv(chart), encoding="utf-8")

    logger.info("Wrote report %s to %s", report.metadata["report_id"], output_path)
    return json_file, html_file


def _load_source(
    frames: dict[Path, pd.DataFrame],
    root: Path,
    source: str,
    row_limit: int | None,
) -> pd.DataFrame:
    path = Path(source)
    if not path.is_absolute():
        path = root / path
    if path not in frames:
        frames[path] = load_csv_with_limit(path, row_limit=row_limit)
    return frames[path]


def _apply_initial_sort(sorter: TableSorter, table_def: TableDefinition) -> None:
    if not table_def.sort_column:
        return
    header = sorter.table.header
    if table_def.sort_column not in header:
        raise ValueError(f"Table '{table_def.table_id}' has no column '{table_def.sort_column}' to sort on.")
    sorter.sort_by(header.index(table_def.sort_column), SortDirection.parse(table_def.sort_direction))


def _build_chart(chart_def: ChartDefinition, frame: pd.DataFrame) -> Chart:
    if chart_def.kind == "line":
        series = build_time_series(frame, chart_def.x_column, chart_def.y_columns)
    else:
        series = build_category_series(
            frame,
            chart_def.label_column,
            chart_def.value_column,
            y2_column=chart_def.y2_column or None,
        )
    return Chart(
        chart_id=chart_def.chart_id,
        kind=chart_def.kind,
        title=chart_def.title,
        y_label=chart_def.y_label,
        y2_label=chart_def.y2_label,
        unit_kind=chart_def.unit_kind,
        series=series,
    )
