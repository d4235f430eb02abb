from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from mon_reporter.models import Chart, ChartSeries
from mon_reporter.rendering.formatting import format_magnitude, format_number

SERIES_COLORS = [
    "#6e9dc9", "#f4ab3a", "#ac7fa8", "#8dbd0f", "#958c12",
    "#953579", "#4b5de4", "#d8b83f", "#ff5800", "#0085cc",
]
PIE_COLORS = SERIES_COLORS + [
    "#4bb2c5", "#c5b47f", "#EAA228", "#579575", "#839557",
    "#498991", "#C08840", "#9F9274", "#546D61", "#646C4A",
]


def chart_config(chart: Chart) -> dict[str, Any]:
    """Chart.js config plus pre-formatted tooltip labels for one chart.

    Returns ``{"config": ..., "formatted": [[...], ...]}`` where
    ``formatted[i][j]`` is the tooltip text of point j in dataset i.
    """
    match chart.kind:
        case "line":
            return _line_config(chart)
        case "pie":
            return _pie_config(chart)
        case "bar":
            return _bar_config(chart)
    raise ValueError(f"Unsupported chart kind '{chart.kind}'.")


def _line_config(chart: Chart) -> dict[str, Any]:
    first = chart.series[0].points if chart.series else []
    labels = [_epoch_label(x) for x, _ in first]
    all_positive = all(y > 0 for serie in chart.series for _, y in serie.points)
    datasets = [
        {
            "label": serie.label,
            "data": [y for _, y in serie.points],
            "borderColor": SERIES_COLORS[idx % len(SERIES_COLORS)],
            "backgroundColor": SERIES_COLORS[idx % len(SERIES_COLORS)],
            "borderWidth": 1,
            "pointRadius": 0,
            "fill": False,
        }
        for idx, serie in enumerate(chart.series)
    ]
    return {
        "config": {
            "type": "line",
            "data": {"labels": labels, "datasets": datasets},
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "plugins": {
                    "title": {"display": bool(chart.title), "text": chart.title},
                    "legend": {"display": True, "position": "right"},
                },
                "scales": {
                    "x": {"ticks": {"maxRotation": 30, "maxTicksLimit": 12}},
                    "y": {
                        "type": "logarithmic" if all_positive and datasets else "linear",
                        "title": {"display": bool(chart.y_label), "text": chart.y_label},
                    },
                },
            },
        },
        "formatted": [_formatted(serie, chart.unit_kind) for serie in chart.series],
    }


def _pie_config(chart: Chart) -> dict[str, Any]:
    serie = chart.series[0] if chart.series else ChartSeries(label="")
    return {
        "config": {
            "type": "pie",
            "data": {
                "labels": [str(x) for x, _ in serie.points],
                "datasets": [
                    {
                        "label": serie.label,
                        "data": [y for _, y in serie.points],
                        "backgroundColor": [PIE_COLORS[i % len(PIE_COLORS)] for i in range(len(serie.points))],
                    }
                ],
            },
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "plugins": {
                    "title": {"display": bool(chart.title), "text": chart.title},
                    "legend": {"display": True, "position": "right"},
                },
            },
        },
        "formatted": [[format_number(y) for _, y in serie.points]],
    }


def _bar_config(chart: Chart) -> dict[str, Any]:
    bars = chart.series[0] if chart.series else ChartSeries(label=chart.y_label)
    datasets: list[dict[str, Any]] = [
        {
            "type": "bar",
            "label": chart.y_label or bars.label,
            "data": [y for _, y in bars.points],
            "backgroundColor": SERIES_COLORS[0],
            "yAxisID": "y",
        }
    ]
    scales: dict[str, Any] = {
        "x": {"grid": {"display": False}, "ticks": {"maxRotation": 30}},
        "y": {"beginAtZero": True, "title": {"display": bool(chart.y_label), "text": chart.y_label}},
    }
    if len(chart.series) > 1:
        line = chart.series[1]
        datasets.append(
            {
                "type": "line",
                "label": chart.y2_label or line.label,
                "data": [y for _, y in line.points],
                "borderColor": SERIES_COLORS[3],
                "backgroundColor": SERIES_COLORS[3],
                "borderWidth": 1,
                "pointRadius": 0,
                "yAxisID": "y2",
            }
        )
        scales["y2"] = {
            "position": "right",
            "beginAtZero": True,
            "grid": {"drawOnChartArea": False},
            "title": {"display": bool(chart.y2_label), "text": chart.y2_label},
        }
    return {
        "config": {
            "type": "bar",
            "data": {"labels": [str(x) for x, _ in bars.points], "datasets": datasets},
            "options": {
                "responsive": True,
                "maintainAspectRatio": False,
                "plugins": {"title": {"display": bool(chart.title), "text": chart.title}},
                "scales": scales,
            },
        },
        "formatted": [_formatted(serie, chart.unit_kind) for serie in chart.series[:2]],
    }


def _formatted(serie: ChartSeries, unit_kind: str) -> list[str]:
    # Series are usually named after their unit ("size", "duration"), so the
    # label doubles as the unit kind when the chart does not set one.
    kind = unit_kind or serie.label
    return [format_magnitude(y, 2, kind) for _, y in serie.points]


def _epoch_label(epoch_ms: Any) -> str:
    try:
        return datetime.fromtimestamp(float(epoch_ms) / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
    except (TypeError, ValueError, OverflowError, OSError):
        return str(epoch_ms)
