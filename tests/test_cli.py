from pathlib import Path

from typer.testing import CliRunner

from mon_reporter.cli import app

runner = CliRunner()


def test_list_report_types(config_dir: Path) -> None:
    result = runner.invoke(app, ["list-report-types", "--config-dir", str(config_dir)])
    assert result.exit_code == 0
    assert "pg_cluster_activity" in result.output


def test_sort_csv_orders_rows(tmp_path: Path) -> None:
    path = tmp_path / "sizes.csv"
    path.write_text("name,size\nmid,2 MB\nsmall,500 KB\nbig,1 GB\n", encoding="utf-8")

    result = runner.invoke(app, ["sort-csv", "--csv", str(path), "--column", "size"])
    assert result.exit_code == 0
    assert result.output.index("small") < result.output.index("mid") < result.output.index("big")

    result = runner.invoke(app, ["sort-csv", "--csv", str(path), "--column", "1", "--descending"])
    assert result.exit_code == 0
    assert result.output.index("big") < result.output.index("mid") < result.output.index("small")


def test_sort_csv_rejects_unknown_column(tmp_path: Path) -> None:
    path = tmp_path / "sizes.csv"
    path.write_text("name,size\na,1\n", encoding="utf-8")
    result = runner.invoke(app, ["sort-csv", "--csv", str(path), "--column", "missing"])
    assert result.exit_code != 0


def test_build_report_writes_outputs(tmp_path: Path, project_root: Path, config_dir: Path) -> None:
    args = ["--output-dir", str(tmp_path), "--config-dir", str(config_dir), "--data-root", str(project_root)]
    result = runner.invoke(app, ["build-report", "--report-type", "pg_cluster_activity", *args])
    assert result.exit_code == 0
    assert (tmp_path / "pg_cluster_activity.report.html").exists()

    result = runner.invoke(app, ["build-report", "--report-type", "does_not_exist", *args])
    assert result.exit_code == 1


def test_build_report_rejects_invalid_definition(tmp_path: Path, project_root: Path) -> None:
    config_dir = tmp_path / "report_types"
    config_dir.mkdir()
    (config_dir / "broken.yaml").write_text(
        "report_type_id: broken\nversion: '1'\ntitle: Broken\nunknown_key: 1\n",
        encoding="utf-8",
    )
    args = ["--output-dir", str(tmp_path / "out"), "--config-dir", str(config_dir), "--data-root", str(project_root)]
    result = runner.invoke(app, ["build-report", "--report-type", "broken", *args])
    assert result.exit_code == 1
    assert "Failed to build report" in result.output
