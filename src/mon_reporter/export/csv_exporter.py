from __future__ import annotations

from mon_reporter.models import Chart
from mon_reporter.rendering.formatting import plain_number

TIME_SERIES_HEADER = '"serie","epoch","value"'
CATEGORY_HEADER = '"serie","value"'


def export_csv(chart: Chart) -> str:
    """Serialize a chart's series as CSV text.

    Rows are emitted point by point, each point for every series. Labels
    are quoted but not escaped.
    """
    lines = [TIME_SERIES_HEADER if chart.is_time_series else CATEGORY_HEADER]
    if not chart.series:
        return "\n".join(lines) + "\n"

    for index in range(len(chart.series[0].points)):
        for serie in chart.series:
            if index >= len(serie.points):
                continue
            x, y = serie.points[index]
            if chart.is_time_series:
                lines.append(f'"{serie.label}",{_value(x)},{_value(y)}')
            else:
                lines.append(f'"{x}",{_value(y)}')
    return "\n".join(lines) + "\n"


def _value(raw: object) -> str:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return plain_number(raw)
    return str(raw)
