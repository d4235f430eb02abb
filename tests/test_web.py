from pathlib import Path

from flask import Flask

from mon_reporter.web import create_app


def _app(project_root: Path, config_dir: Path) -> Flask:
    return create_app(
        {
            "TESTING": True,
            "REPORT_TYPES_DIR": str(config_dir),
            "DATA_ROOT": str(project_root),
        }
    )


def _database_names(app: Flask) -> list[str]:
    report, _ = app.extensions["mon_reporter.reports"]["pg_cluster_activity"]
    return [row[0] for row in report.table("database_sizes").rows]


def test_index_lists_report_types(project_root: Path, config_dir: Path) -> None:
    client = _app(project_root, config_dir).test_client()
    response = client.get("/")
    assert response.status_code == 200
    assert b"pg_cluster_activity" in response.data


def test_report_view_links_sortable_headers(project_root: Path, config_dir: Path) -> None:
    client = _app(project_root, config_dir).test_client()
    response = client.get("/reports/pg_cluster_activity")
    assert response.status_code == 200
    assert b"/reports/pg_cluster_activity/tables/database_sizes/sort/0" in response.data
    assert b"/reports/pg_cluster_activity/tables/database_sizes/sort/5" not in response.data
    assert b"/reports/pg_cluster_activity/charts/cpu_usage.csv" in response.data
    assert b"sorttable_sorted_reverse" in response.data


def test_header_activation_sorts_and_toggles(project_root: Path, config_dir: Path) -> None:
    app = _app(project_root, config_dir)
    client = app.test_client()

    response = client.get("/reports/pg_cluster_activity/tables/database_sizes/sort/2")
    assert response.status_code == 302
    assert _database_names(app) == ["template1", "audit", "postgres", "analytics", "billing"]

    client.get("/reports/pg_cluster_activity/tables/database_sizes/sort/2")
    assert _database_names(app) == ["billing", "analytics", "postgres", "audit", "template1"]

    page = client.get("/reports/pg_cluster_activity").data
    assert page.index(b"billing") < page.index(b"template1")


def test_sort_errors(project_root: Path, config_dir: Path) -> None:
    client = _app(project_root, config_dir).test_client()
    assert client.get("/reports/pg_cluster_activity/tables/nope/sort/0").status_code == 404
    assert client.get("/reports/pg_cluster_activity/tables/database_sizes/sort/99").status_code == 400
    assert client.get("/reports/unknown_report").status_code == 404


def test_chart_csv_download(project_root: Path, config_dir: Path) -> None:
    client = _app(project_root, config_dir).test_client()
    response = client.get("/reports/pg_cluster_activity/charts/cpu_usage.csv")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert response.data.startswith(b'"serie","epoch","value"\n')
    assert client.get("/reports/pg_cluster_activity/charts/nope.csv").status_code == 404


def test_reload_restores_configured_order(project_root: Path, config_dir: Path) -> None:
    app = _app(project_root, config_dir)
    client = app.test_client()
    client.get("/reports/pg_cluster_activity/tables/database_sizes/sort/0")
    assert _database_names(app)[0] == "analytics"

    response = client.post("/reports/pg_cluster_activity/reload")
    assert response.status_code == 302
    client.get("/reports/pg_cluster_activity")
    assert _database_names(app)[0] == "billing"


def _broken_app(tmp_path: Path, project_root: Path, body: str) -> Flask:
    config_dir = tmp_path / "report_types"
    config_dir.mkdir()
    (config_dir / "broken.yaml").write_text(
        "report_type_id: broken\nversion: '1'\ntitle: Broken\n" + body,
        encoding="utf-8",
    )
    return create_app({"TESTING": True, "REPORT_TYPES_DIR": str(config_dir), "DATA_ROOT": str(project_root)})


def test_missing_source_is_not_found(tmp_path: Path, project_root: Path) -> None:
    app = _broken_app(tmp_path, project_root, "tables:\n  - table_id: t\n    source: missing.csv\n")
    response = app.test_client().get("/reports/broken")
    assert response.status_code == 404
    assert b"Input file not found" in response.data


def test_unknown_sort_column_is_bad_request(tmp_path: Path, project_root: Path) -> None:
    body = "tables:\n  - table_id: t\n    source: samples/database_sizes.csv\n    sort_column: nope\n"
    response = _broken_app(tmp_path, project_root, body).test_client().get("/reports/broken")
    assert response.status_code == 400


def test_invalid_definition_is_bad_request(tmp_path: Path, project_root: Path) -> None:
    response = _broken_app(tmp_path, project_root, "unknown_key: 1\n").test_client().get("/reports/broken")
    assert response.status_code == 400
