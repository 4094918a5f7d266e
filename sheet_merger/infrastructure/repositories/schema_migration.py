"""Upgrades stored configuration documents to the current schema.

Three shapes have been stored over time:

* version 0: ``fields`` with ``mappings`` of ``{recordId, sourceField}``,
  optionally a ``standardFields`` list of targets, ISO ``createdAt`` strings
* version 1: ``fieldMaps`` with ``targetField`` and camelCase
  ``sourceFields``, millisecond ``created``/``updated``
* version 2: ``correspondences`` with ``target`` and ``sources``
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from ...constants import SchemaVersions, SourceColumns
from ...domain.entities.mapping import DataType, now_ms

_TYPE_ALIASES = {
    "text": DataType.TEXT,
    "string": DataType.TEXT,
    "number": DataType.NUMBER,
    "numeric": DataType.NUMBER,
    "date": DataType.DATE,
    "datetime": DataType.DATE,
    "boolean": DataType.BOOLEAN,
    "bool": DataType.BOOLEAN,
}


class MigrationError(ValueError):
    pass


def detect_schema_version(document: Mapping[str, Any]) -> int:
    if "correspondences" in document:
        return SchemaVersions.CURRENT
    if "fieldMaps" in document:
        return SchemaVersions.LEGACY_FIELD_MAPS
    if "fields" in document or "standardFields" in document:
        return SchemaVersions.LEGACY_FIELDS
    raise MigrationError("Unrecognized mapping configuration document")


def migrate_configuration_document(document: object) -> dict[str, Any]:
    """Return ``document`` in the current shape. The input is not modified."""
    if not isinstance(document, Mapping):
        raise MigrationError(
            f"Configuration document must be an object, got {type(document).__name__}"
        )
    doc = cast("Mapping[str, Any]", document)
    version = detect_schema_version(doc)
    if version == SchemaVersions.LEGACY_FIELDS:
        return _from_fields(doc)
    if version == SchemaVersions.LEGACY_FIELD_MAPS:
        return _from_field_maps(doc)
    upgraded = dict(doc)
    upgraded["schema_version"] = SchemaVersions.CURRENT
    return upgraded


def _from_field_maps(doc: Mapping[str, Any]) -> dict[str, Any]:
    correspondences: list[dict[str, Any]] = []
    for item in _as_list(doc.get("fieldMaps"), "fieldMaps"):
        target = item.get("targetField") or {}
        sources = [
            {
                "file_id": str(source.get("fileId") or ""),
                "sheet_name": str(source.get("sheetName") or ""),
                "field_name": str(source.get("fieldName") or ""),
            }
            for source in _as_list(item.get("sourceFields"), "sourceFields")
        ]
        correspondences.append(
            {
                "id": str(item.get("id") or ""),
                "target": _target(target),
                "sources": sources,
            }
        )
    created = _timestamp(doc.get("created", doc.get("createdAt")))
    return _document(
        doc,
        correspondences,
        created_at=created,
        updated_at=_timestamp(doc.get("updated", doc.get("updatedAt")), created),
    )


def _from_fields(doc: Mapping[str, Any]) -> dict[str, Any]:
    correspondences: list[dict[str, Any]] = []
    seen_names: set[str] = set()
    for item in _as_list(doc.get("fields"), "fields"):
        sources = [
            {
                "file_id": str(mapping.get("recordId") or ""),
                "sheet_name": SourceColumns.DEFAULT_SHEET,
                "field_name": str(mapping.get("sourceField") or ""),
            }
            for mapping in _as_list(item.get("mappings"), "mappings")
        ]
        correspondences.append(
            {"id": str(item.get("id") or ""), "target": _target(item), "sources": sources}
        )
        seen_names.add(str(item.get("name") or "").strip().lower())
    for item in _as_list(doc.get("standardFields"), "standardFields"):
        name = str(item.get("name") or "").strip().lower()
        if name in seen_names:
            continue
        seen_names.add(name)
        correspondences.append(
            {"id": str(item.get("id") or ""), "target": _target(item), "sources": []}
        )
    created = _timestamp(doc.get("createdAt"))
    return _document(
        doc,
        correspondences,
        created_at=created,
        updated_at=_timestamp(doc.get("updatedAt"), created),
    )


def _document(
    doc: Mapping[str, Any],
    correspondences: list[dict[str, Any]],
    *,
    created_at: int,
    updated_at: int,
) -> dict[str, Any]:
    return {
        "schema_version": SchemaVersions.CURRENT,
        "id": str(doc.get("id") or ""),
        "name": str(doc.get("name") or ""),
        "description": str(doc.get("description") or ""),
        "created_at": created_at,
        "updated_at": max(updated_at, created_at),
        "correspondences": correspondences,
    }


def _target(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": str(raw.get("name") or ""),
        "description": str(raw.get("description") or ""),
        "data_type": _data_type(raw.get("type")),
        "required": bool(raw.get("required", False)),
    }


def _data_type(value: object) -> DataType:
    if not isinstance(value, str):
        return DataType.TEXT
    return _TYPE_ALIASES.get(value.strip().lower(), DataType.TEXT)


def _timestamp(value: object, default: int | None = None) -> int:
    if isinstance(value, bool):
        return default if default is not None else now_ms()
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.isdigit():
            return int(text)
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            pass
        else:
            return int(parsed.timestamp() * 1000)
    return default if default is not None else now_ms()


def _as_list(value: object, key: str) -> list[Mapping[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MigrationError(f"'{key}' must be a list")
    items = cast("list[object]", value)
    return [cast("Mapping[str, Any]", item) for item in items if isinstance(item, Mapping)]
