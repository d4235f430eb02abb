from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from flask import Flask, Response, abort, redirect, render_template_string, request, url_for
from jsonschema import ValidationError

from mon_reporter.export.csv_exporter import export_csv
from mon_reporter.models import Report
from mon_reporter.orchestrator import build_report
from mon_reporter.rendering.html_renderer import render_html
from mon_reporter.report_types.registry import ReportTypeRegistry
from mon_reporter.settings import Settings, absolute_path
from mon_reporter.sorting.engine import SortDirection, TableSorter

logger = logging.getLogger(__name__)

_INDEX_TEMPLATE = """
<!doctype html>
<html lang="en">
  <head><meta charset="utf-8" /><title>Monitoring Reports</title></head>
  <body style="font-family: 'Segoe UI', Tahoma, sans-serif; margin: 2rem;">
    <h1>Monitoring Reports</h1>
    {% if report_types %}
    <ul>
      {% for rid in report_types %}
      <li><a href="{{ url_for('view_report', report_type_id=rid) }}">{{ rid }}</a></li>
      {% endfor %}
    </ul>
    {% else %}
    <p>No report types found in {{ config_dir }}.</p>
    {% endif %}
  </body>
</html>
""".strip()

_CACHE_KEY = "mon_reporter.reports"


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    settings = Settings.from_env()
    app = Flask(__name__)
    app.config["REPORT_TYPES_DIR"] = str(settings.config_dir)
    app.config["DATA_ROOT"] = str(settings.data_root)
    app.config["INITIAL_DIRECTION"] = settings.initial_direction.value
    app.config.update(config_overrides or {})
    app.config["REPORT_TYPES_DIR"] = str(absolute_path(app.config["REPORT_TYPES_DIR"]))
    app.config["DATA_ROOT"] = str(absolute_path(app.config["DATA_ROOT"]))
    app.extensions[_CACHE_KEY] = {}

    def registry() -> ReportTypeRegistry:
        return ReportTypeRegistry(config_dir=Path(app.config["REPORT_TYPES_DIR"]))

    def loaded(report_type_id: str) -> tuple[Report, dict[str, TableSorter]]:
        cache: dict[str, tuple[Report, dict[str, TableSorter]]] = app.extensions[_CACHE_KEY]
        if report_type_id not in cache:
            if report_type_id not in registry().list_report_types():
                abort(404, description=f"Unknown report type '{report_type_id}'.")
            try:
                cache[report_type_id] = build_report(
                    report_type_id,
                    registry=registry(),
                    data_root=app.config["DATA_ROOT"],
                    initial_direction=SortDirection.parse(app.config["INITIAL_DIRECTION"]),
                )
            except FileNotFoundError as exc:
                logger.warning("Report %s has a missing source: %s", report_type_id, exc)
                abort(404, description=str(exc))
            except ValidationError as exc:
                logger.warning("Report type %s is invalid: %s", report_type_id, exc.message)
                abort(400, description=f"Invalid report type '{report_type_id}': {exc.message}")
            except ValueError as exc:
                logger.warning("Report %s could not be built: %s", report_type_id, exc)
                abort(400, description=str(exc))
            logger.info("Loaded report %s", report_type_id)
        return cache[report_type_id]

    @app.get("/")
    def index() -> str:
        return render_template_string(
            _INDEX_TEMPLATE,
            report_types=registry().list_report_types(),
            config_dir=app.config["REPORT_TYPES_DIR"],
        )

    @app.get("/reports/<report_type_id>")
    def view_report(report_type_id: str) -> str:
        report, _ = loaded(report_type_id)
        base = f"{request.script_root}/reports/{report_type_id}"
        return render_html(
            report,
            sort_url=base + "/tables/{table_id}/sort/{column}",
            csv_url=base + "/charts/{chart_id}.csv",
        )

    @app.get("/reports/<report_type_id>/tables/<table_id>/sort/<int:column>")
    def sort_table(report_type_id: str, table_id: str, column: int) -> Any:
        _, sorters = loaded(report_type_id)
        sorter = sorters.get(table_id)
        if sorter is None:
            abort(404, description=f"Unknown table '{table_id}'.")
        try:
            sorter.sort(column)
        except ValueError as exc:
            abort(400, description=str(exc))
        return redirect(url_for("view_report", report_type_id=report_type_id, _anchor=table_id))

    @app.get("/reports/<report_type_id>/charts/<chart_id>.csv")
    def chart_csv(report_type_id: str, chart_id: str) -> Response:
        report, _ = loaded(report_type_id)
        try:
            chart = report.chart(chart_id)
        except ValueError as exc:
            abort(404, description=str(exc))
        return Response(
            export_csv(chart),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={chart_id}.csv"},
        )

    @app.post("/reports/<report_type_id>/reload")
    def reload_report(report_type_id: str) -> Any:
        app.extensions[_CACHE_KEY].pop(report_type_id, None)
        return redirect(url_for("view_report", report_type_id=report_type_id))

    return app


def main() -> None:
    settings = Settings.from_env()
    app = create_app()
    # Sorting state lives in process memory; serve requests one at a time.
    app.run(debug=settings.debug, host=settings.host, port=settings.port, threaded=False)


if __name__ == "__main__":
    main()
