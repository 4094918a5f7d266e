"""Tests for stored document migration."""

from datetime import UTC, datetime

import pytest

from sheet_merger.constants import SchemaVersions
from sheet_merger.infrastructure.repositories.schema_migration import (
    MigrationError,
    detect_schema_version,
    migrate_configuration_document,
)

FIELD_MAPS_DOCUMENT = {
    "id": "mapping_1",
    "name": "Customers",
    "description": "Monthly exports",
    "created": 1_700_000_000_000,
    "updated": 1_700_000_500_000,
    "fieldMaps": [
        {
            "id": "fieldmap_a",
            "targetField": {"name": "Customer Name", "type": "string", "required": True},
            "sourceFields": [
                {"fileId": "jan.xlsx", "sheetName": "Sheet1", "fieldName": "customer_name"}
            ],
        },
        {"id": "fieldmap_b", "targetField": {"name": "Amount", "type": "number"}},
    ],
}

FIELDS_DOCUMENT = {
    "id": "mapping_0",
    "name": "Old",
    "createdAt": "2024-01-02T03:04:05Z",
    "fields": [
        {
            "id": "f1",
            "name": "Email",
            "type": "text",
            "mappings": [{"recordId": "rec1", "sourceField": "mail"}],
        }
    ],
    "standardFields": [
        {"id": "s1", "name": "email"},
        {"id": "s2", "name": "Phone", "type": "bool"},
    ],
}


class TestDetectSchemaVersion:
    """Tests for detect_schema_version."""

    @pytest.mark.parametrize(
        ("document", "expected"),
        [
            ({"correspondences": []}, SchemaVersions.CURRENT),
            ({"fieldMaps": []}, SchemaVersions.LEGACY_FIELD_MAPS),
            ({"fields": []}, SchemaVersions.LEGACY_FIELDS),
            ({"standardFields": []}, SchemaVersions.LEGACY_FIELDS),
        ],
    )
    def test_versions(self, document, expected):
        assert detect_schema_version(document) == expected

    def test_unknown_shape(self):
        with pytest.raises(MigrationError):
            detect_schema_version({"name": "x"})


class TestMigrateConfigurationDocument:
    """Tests for migrate_configuration_document."""

    def test_field_maps(self):
        migrated = migrate_configuration_document(FIELD_MAPS_DOCUMENT)

        assert migrated["schema_version"] == SchemaVersions.CURRENT
        assert migrated["created_at"] == 1_700_000_000_000
        assert migrated["updated_at"] == 1_700_000_500_000
        first, second = migrated["correspondences"]
        assert first["id"] == "fieldmap_a"
        assert first["target"] == {
            "name": "Customer Name",
            "description": "",
            "data_type": "text",
            "required": True,
        }
        assert first["sources"] == [
            {"file_id": "jan.xlsx", "sheet_name": "Sheet1", "field_name": "customer_name"}
        ]
        assert second["target"]["data_type"] == "number"
        assert second["sources"] == []

    def test_fields_with_standard_fields(self):
        migrated = migrate_configuration_document(FIELDS_DOCUMENT)

        names = [c["target"]["name"] for c in migrated["correspondences"]]
        assert names == ["Email", "Phone"]
        assert migrated["correspondences"][0]["sources"] == [
            {"file_id": "rec1", "sheet_name": "Sheet1", "field_name": "mail"}
        ]
        assert migrated["correspondences"][1]["target"]["data_type"] == "boolean"
        expected = int(datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC).timestamp() * 1000)
        assert migrated["created_at"] == expected
        assert migrated["updated_at"] == expected

    def test_current_documents_pass_through(self):
        document = {"id": "m", "name": "x", "correspondences": []}

        migrated = migrate_configuration_document(document)

        assert migrated == {**document, "schema_version": SchemaVersions.CURRENT}
        assert "schema_version" not in document

    def test_input_not_modified(self):
        before = repr(FIELD_MAPS_DOCUMENT)

        migrate_configuration_document(FIELD_MAPS_DOCUMENT)

        assert repr(FIELD_MAPS_DOCUMENT) == before

    def test_non_mapping(self):
        with pytest.raises(MigrationError):
            migrate_configuration_document(["not", "a", "document"])

    def test_non_list_field_maps(self):
        with pytest.raises(MigrationError, match="fieldMaps"):
            migrate_configuration_document({"fieldMaps": "oops"})

    def test_numeric_string_timestamps(self):
        migrated = migrate_configuration_document(
            {"id": "m", "fieldMaps": [], "created": "1000", "updated": "500"}
        )

        assert migrated["created_at"] == 1000
        assert migrated["updated_at"] == 1000
