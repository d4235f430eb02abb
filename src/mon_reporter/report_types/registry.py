from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mon_reporter.services.validator import validate_report_type


@dataclass(slots=True)
class TableDefinition:
    table_id: str
    source: str
    title: str = ""
    columns: list[str] = field(default_factory=list)
    unsortable_columns: list[str] = field(default_factory=list)
    sort_column: str | None = None
    sort_direction: str = "ascending"


@dataclass(slots=True)
class ChartDefinition:
    chart_id: str
    kind: str
    source: str
    title: str = ""
    x_column: str = ""
    y_columns: list[str] = field(default_factory=list)
    label_column: str = ""
    value_column: str = ""
    y2_column: str = ""
    y_label: str = ""
    y2_label: str = ""
    unit_kind: str = ""


@dataclass(slots=True)
class ReportTypeDefinition:
    report_type_id: str
    version: str
    title: str
    summary: str = ""
    tables: list[TableDefinition] = field(default_factory=list)
    charts: list[ChartDefinition] = field(default_factory=list)


class ReportTypeRegistry:
    def __init__(self, config_dir: str | Path = "configs/report_types") -> None:
        self._config_dir = Path(config_dir)
        self._cache: dict[str, ReportTypeDefinition] = {}

    def list_report_types(self) -> list[str]:
        return sorted(path.stem for path in self._config_dir.glob("*.yaml"))

    def get(self, report_type_id: str) -> ReportTypeDefinition:
        if report_type_id in self._cache:
            return self._cache[report_type_id]

        path = self._config_dir / f"{report_type_id}.yaml"
        if not path.exists():
            raise ValueError(f"Unknown report_type_id '{report_type_id}'.")

        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Report type file {path} must define an object at top level.")
        validate_report_type(raw)
        definition = _definition_from_raw(raw)
        self._cache[report_type_id] = definition
        return definition


def _definition_from_raw(raw: dict[str, Any]) -> ReportTypeDefinition:
    return ReportTypeDefinition(
        report_type_id=raw["report_type_id"],
        version=raw["version"],
        title=raw["title"],
        summary=raw.get("summary", ""),
        tables=[TableDefinition(**item) for item in raw.get("tables", [])],
        charts=[ChartDefinition(**item) for item in raw.get("charts", [])],
    )
