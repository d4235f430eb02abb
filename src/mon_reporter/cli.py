from __future__ import annotations

import logging
from typing import Optional

import typer
from jsonschema import ValidationError
from rich import print
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from mon_reporter.orchestrator import run_pipeline
from mon_reporter.report_types.registry import ReportTypeRegistry
from mon_reporter.services.ingest import frame_to_table, load_csv_with_limit
from mon_reporter.settings import Settings
from mon_reporter.sorting.engine import SortDirection, TableSorter
from mon_reporter.web import create_app

app = typer.Typer(help="Monitoring CSV -> sortable HTML report")


@app.callback()
def configure(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.command("list-report-types")
def list_report_types(config_dir: Optional[str] = typer.Option(None, help="Report type YAML directory")) -> None:
    settings = Settings.from_env()
    registry = ReportTypeRegistry(config_dir=config_dir or settings.config_dir)
    for rid in registry.list_report_types():
        print(rid)


@app.command("build-report")
def build_report(
    report_type: str = typer.Option(..., help="Report type id"),
    output_dir: Optional[str] = typer.Option(None, help="Output directory"),
    config_dir: Optional[str] = typer.Option(None, help="Report type YAML directory"),
    data_root: Optional[str] = typer.Option(None, help="Directory that relative CSV sources are read from"),
    row_limit: Optional[int] = typer.Option(None, help="Optional max number of rows to load per source"),
) -> None:
    settings = Settings.from_env()
    try:
        report_json_file, report_html_file = run_pipeline(
            report_type_id=report_type,
            output_dir=output_dir or settings.output_dir,
            registry=ReportTypeRegistry(config_dir=config_dir or settings.config_dir),
            data_root=data_root or settings.data_root,
            row_limit=row_limit,
        )
    except (ValueError, FileNotFoundError, ValidationError) as exc:
        print(f"[red]Failed to build report:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    print(f"[green]Report JSON:[/green] {report_json_file}")
    print(f"[green]Report HTML:[/green] {report_html_file}")


@app.command("sort-csv")
def sort_csv(
    csv: str = typer.Option(..., help="Path to input CSV"),
    column: str = typer.Option(..., help="Column name or 0-based index to sort on"),
    descending: bool = typer.Option(False, "--descending", help="Sort in descending order"),
    row_limit: Optional[int] = typer.Option(None, help="Optional max number of rows to load"),
) -> None:
    try:
        frame = load_csv_with_limit(csv, row_limit=row_limit)
    except (ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--csv") from exc
    table = frame_to_table(frame, table_id="csv", title=csv)
    column_index = _resolve_column(table.header, column)

    sorter = TableSorter(table)
    direction = SortDirection.DESCENDING if descending else SortDirection.ASCENDING
    sorter.sort_by(column_index, direction)

    out = Table(title=f"{csv} ({sorter.column_type(column_index).value}, {direction.value})")
    for idx, name in enumerate(table.header):
        out.add_column(f"{name} {'*' if idx == column_index else ''}".strip())
    for row in table.rows:
        out.add_row(*row)
    print(out)


@app.command("run-web")
def run_web(
    host: Optional[str] = typer.Option(None, help="Flask host"),
    port: Optional[int] = typer.Option(None, help="Flask port"),
    debug: bool = typer.Option(False, help="Enable debug mode"),
) -> None:
    settings = Settings.from_env()
    web_app = create_app()
    web_app.run(host=host or settings.host, port=port or settings.port, debug=debug, threaded=False)


def _resolve_column(header: list[str], column: str) -> int:
    if column in header:
        return header.index(column)
    if column.isdigit() and int(column) < len(header):
        return int(column)
    raise typer.BadParameter(f"Unknown column '{column}'. Available: {header}", param_hint="--column")


if __name__ == "__main__":
    app()
