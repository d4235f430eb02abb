from pathlib import Path

import pytest
from jsonschema import ValidationError

from mon_reporter.report_types.registry import ReportTypeRegistry


def test_registry_lists_report_types(config_dir: Path) -> None:
    registry = ReportTypeRegistry(config_dir=config_dir)
    assert "pg_cluster_activity" in registry.list_report_types()


def test_registry_loads_definition(config_dir: Path) -> None:
    registry = ReportTypeRegistry(config_dir=config_dir)
    definition = registry.get("pg_cluster_activity")
    assert definition.report_type_id == "pg_cluster_activity"
    assert [t.table_id for t in definition.tables] == ["database_sizes", "query_stats"]
    assert definition.tables[0].sort_column == "size"
    assert definition.tables[0].unsortable_columns == ["owner"]
    assert {c.kind for c in definition.charts} == {"line", "pie", "bar"}
    assert registry.get("pg_cluster_activity") is definition


def test_unknown_report_type(config_dir: Path) -> None:
    with pytest.raises(ValueError, match="Unknown report_type_id"):
        ReportTypeRegistry(config_dir=config_dir).get("does_not_exist")


def test_invalid_definition_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "broken.yaml").write_text(
        "report_type_id: broken\nversion: '1'\ntitle: Broken\n"
        "charts:\n  - chart_id: c\n    kind: line\n    source: x.csv\n",
        encoding="utf-8",
    )
    with pytest.raises(ValidationError):
        ReportTypeRegistry(config_dir=tmp_path).get("broken")
