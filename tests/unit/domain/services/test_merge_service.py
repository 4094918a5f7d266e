"""Tests for the merged preview."""

import pandas as pd
from conftest import make_configuration, ref

from sheet_merger.constants import SourceColumns
from sheet_merger.domain.services.merge_service import SheetData, build_merge_preview


def _configuration():
    config = make_configuration("Name", "Amount")
    name, amount = config.correspondences
    name.sources = [ref("name"), ref("customer", file_id="file2")]
    amount.sources = [ref("amt")]
    return config


def _sheets():
    return [
        SheetData("file1", "Sheet1", pd.DataFrame({"name": ["a", "b"], "amt": ["1", "2"]})),
        SheetData("file2", "Sheet1", pd.DataFrame({"customer": ["c"], "extra": ["x"]})),
    ]


class TestBuildMergePreview:
    """Tests for build_merge_preview."""

    def test_stacks_rows_under_targets(self):
        merged = build_merge_preview(_configuration(), _sheets())

        assert list(merged.columns) == [
            "Name",
            "Amount",
            SourceColumns.FILE,
            SourceColumns.SHEET,
        ]
        assert merged["Name"].tolist() == ["a", "b", "c"]
        assert merged[SourceColumns.FILE].tolist() == ["file1", "file1", "file2"]

    def test_missing_values_are_na(self):
        merged = build_merge_preview(_configuration(), _sheets())

        assert merged["Amount"].tolist()[:2] == ["1", "2"]
        assert pd.isna(merged.loc[2, "Amount"])

    def test_without_provenance(self):
        merged = build_merge_preview(
            _configuration(), _sheets(), include_provenance=False
        )

        assert list(merged.columns) == ["Name", "Amount"]

    def test_unmapped_columns_are_dropped(self):
        merged = build_merge_preview(_configuration(), _sheets())

        assert "extra" not in merged.columns

    def test_no_sheets(self):
        merged = build_merge_preview(_configuration(), [])

        assert merged.empty
        assert list(merged.columns) == [
            "Name",
            "Amount",
            SourceColumns.FILE,
            SourceColumns.SHEET,
        ]

    def test_bound_column_missing_from_frame(self):
        config = make_configuration("Name")
        config.correspondences[0].sources = [ref("gone")]
        sheet = SheetData("file1", "Sheet1", pd.DataFrame({"name": ["a"]}))

        merged = build_merge_preview(config, [sheet], include_provenance=False)

        assert pd.isna(merged.loc[0, "Name"])
