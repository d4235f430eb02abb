from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ChartKind = Literal["line", "pie", "bar"]


class ReportTable(BaseModel):
    table_id: str
    title: str = ""
    header: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    unsortable_columns: list[int] = Field(default_factory=list)
    sorted_column: int | None = None
    sort_direction: str | None = None


class ChartSeries(BaseModel):
    label: str
    points: list[tuple[Any, float]] = Field(default_factory=list)


class Chart(BaseModel):
    chart_id: str
    kind: ChartKind
    title: str = ""
    y_label: str = ""
    y2_label: str = ""
    unit_kind: str = ""
    series: list[ChartSeries] = Field(default_factory=list)

    @property
    def is_time_series(self) -> bool:
        return self.kind == "line"


class Report(BaseModel):
    report_type_id: str
    report_title: str
    summary: str = ""
    tables: list[ReportTable] = Field(default_factory=list)
    charts: list[Chart] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def table(self, table_id: str) -> ReportTable:
        for table in self.tables:
            if table.table_id == table_id:
                return table
        raise ValueError(f"Unknown table_id '{table_id}'.")

    def chart(self, chart_id: str) -> Chart:
        for chart in self.charts:
            if chart.chart_id == chart_id:
                return chart
        raise ValueError(f"Unknown chart_id '{chart_id}'.")
