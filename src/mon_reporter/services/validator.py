from __future__ import annotations

from typing import Any

from jsonschema import validate

_TABLE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["table_id", "source"],
    "properties": {
        "table_id": {"type": "string", "pattern": "^[a-z0-9_]+$"},
        "title": {"type": "string"},
        "source": {"type": "string"},
        "columns": {"type": "array", "items": {"type": "string"}},
        "unsortable_columns": {"type": "array", "items": {"type": "string"}},
        "sort_column": {"type": "string"},
        "sort_direction": {"enum": ["asc", "ascending", "desc", "descending"]},
    },
}

_CHART_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["chart_id", "kind", "source"],
    "properties": {
        "chart_id": {"type": "string", "pattern": "^[a-z0-9_]+$"},
        "kind": {"enum": ["line", "pie", "bar"]},
        "title": {"type": "string"},
        "source": {"type": "string"},
        "x_column": {"type": "string"},
        "y_columns": {"type": "array", "items": {"type": "string"}, "minItems": 1},
        "label_column": {"type": "string"},
        "value_column": {"type": "string"},
        "y2_column": {"type": "string"},
        "y_label": {"type": "string"},
        "y2_label": {"type": "string"},
        "unit_kind": {"type": "string"},
    },
    "allOf": [
        {
            "if": {"properties": {"kind": {"const": "line"}}},
            "then": {"required": ["x_column", "y_columns"]},
            "else": {"required": ["label_column", "value_column"]},
        }
    ],
}

REPORT_TYPE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["report_type_id", "version", "title"],
    "properties": {
        "report_type_id": {"type": "string", "pattern": "^[a-z0-9_]+$"},
        "version": {"type": "string"},
        "title": {"type": "string"},
        "summary": {"type": "string"},
        "tables": {"type": "array", "items": _TABLE_SCHEMA},
        "charts": {"type": "array", "items": _CHART_SCHEMA},
    },
}


def validate_report_type(payload: dict[str, Any]) -> None:
    validate(instance=payload, schema=REPORT_TYPE_SCHEMA)
