from mon_reporter.export.csv_exporter import export_csv
from mon_reporter.models import Chart, ChartSeries


def test_time_series_rows_are_point_major() -> None:
    chart = Chart(
        chart_id="cpu",
        kind="line",
        series=[
            ChartSeries(label="user", points=[(1000, 1.0), (2000, 2.5)]),
            ChartSeries(label="system", points=[(1000, 3.0), (2000, 4.0)]),
        ],
    )
    assert export_csv(chart).splitlines() == [
        '"serie","epoch","value"',
        '"user",1000,1',
        '"system",1000,3',
        '"user",2000,2.5',
        '"system",2000,4',
    ]


def test_category_rows_use_category_as_serie() -> None:
    chart = Chart(
        chart_id="share",
        kind="pie",
        series=[ChartSeries(label="size", points=[("db1", 10.0), ("db2", 5.5)])],
    )
    assert export_csv(chart) == '"serie","value"\n"db1",10\n"db2",5.5\n'


def test_values_are_not_escaped() -> None:
    chart = Chart(chart_id="x", kind="bar", series=[ChartSeries(label="n", points=[("a,b", 1.0)])])
    assert '"a,b",1' in export_csv(chart)


def test_shorter_series_are_skipped_past_their_end() -> None:
    chart = Chart(
        chart_id="x",
        kind="line",
        series=[
            ChartSeries(label="a", points=[(1, 1.0), (2, 2.0)]),
            ChartSeries(label="b", points=[(1, 5.0)]),
        ],
    )
    assert export_csv(chart).splitlines()[1:] == ['"a",1,1', '"b",1,5', '"a",2,2']


def test_empty_chart_has_header_only() -> None:
    assert export_csv(Chart(chart_id="x", kind="line")) == '"serie","epoch","value"\n'
