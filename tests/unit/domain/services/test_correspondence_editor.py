"""Tests for invariant-preserving configuration edits."""

import pytest
from conftest import make_configuration, ref

from sheet_merger.domain.entities.mapping import (
    DataType,
    SourceFieldRef,
    TargetFieldDescriptor,
)
from sheet_merger.domain.exceptions import (
    CorrespondenceNotFoundError,
    DuplicateTargetNameError,
    InvalidTargetNameError,
    StructuralError,
)
from sheet_merger.domain.services.correspondence_editor import CorrespondenceEditor


@pytest.fixture
def editor():
    return CorrespondenceEditor()


def _owners(config, source):
    return [c.id for c in config.correspondences if source in c.sources]


class TestTargets:
    """Tests for adding, renaming and removing targets."""

    def test_add_target_trims_name(self, editor):
        config = make_configuration()

        correspondence = editor.add_target(
            config, TargetFieldDescriptor(name="  Email ", data_type=DataType.TEXT)
        )

        assert correspondence.target.name == "Email"
        assert config.correspondences == [correspondence]

    def test_add_target_rejects_normalized_duplicate(self, editor):
        config = make_configuration("Customer Name")

        with pytest.raises(DuplicateTargetNameError) as exc_info:
            editor.add_target(config, TargetFieldDescriptor(name="customer_name"))

        assert exc_info.value.existing_id == "fieldmap_0"
        assert len(config.correspondences) == 1

    @pytest.mark.parametrize("name", ["", "   ", "field_123", "fieldmap_abc", "--"])
    def test_add_target_rejects_invalid_names(self, editor, name):
        config = make_configuration()

        with pytest.raises(InvalidTargetNameError):
            editor.add_target(config, TargetFieldDescriptor(name=name))

        assert config.correspondences == []

    def test_rename_keeps_identity_and_sources(self, editor):
        config = make_configuration("Amount")
        config.correspondences[0].sources = [ref("amt")]

        editor.rename_target(config, "fieldmap_0", "Total Amount")

        correspondence = config.correspondences[0]
        assert correspondence.id == "fieldmap_0"
        assert correspondence.target.name == "Total Amount"
        assert correspondence.sources == [ref("amt")]

    def test_rename_to_existing_name_fails(self, editor):
        config = make_configuration("Amount", "Email")

        with pytest.raises(DuplicateTargetNameError):
            editor.rename_target(config, "fieldmap_1", "AMOUNT")

        assert config.correspondences[1].target.name == "Email"

    def test_rename_case_only_is_allowed(self, editor):
        config = make_configuration("amount")

        editor.rename_target(config, "fieldmap_0", "Amount")

        assert config.correspondences[0].target.name == "Amount"

    def test_remove_target(self, editor):
        config = make_configuration("Amount", "Email")

        removed = editor.remove_target(config, "fieldmap_0")

        assert removed.target.name == "Amount"
        assert config.target_names == ["Email"]

    def test_remove_unknown_target(self, editor):
        config = make_configuration("Amount")

        with pytest.raises(CorrespondenceNotFoundError):
            editor.remove_target(config, "fieldmap_missing")

    def test_update_target(self, editor):
        config = make_configuration("Amount")

        editor.update_target(
            config, "fieldmap_0", data_type=DataType.NUMBER, required=True
        )

        target = config.correspondences[0].target
        assert target.data_type == DataType.NUMBER
        assert target.required is True
        assert target.description == ""


class TestBindings:
    """Tests for binding and unbinding source fields."""

    def test_bind_moves_source_between_targets(self, editor):
        config = make_configuration("Target A", "Target B")
        source = ref("col")
        editor.bind(config, "fieldmap_0", source)

        editor.bind(config, "fieldmap_1", source)

        assert _owners(config, source) == ["fieldmap_1"]

    def test_bind_twice_is_noop(self, editor):
        config = make_configuration("Amount")
        editor.bind(config, "fieldmap_0", ref("amt"))
        updated_at = config.updated_at

        changed = editor.bind(config, "fieldmap_0", ref("amt"))

        assert changed is False
        assert config.correspondences[0].sources == [ref("amt")]
        assert config.updated_at == updated_at

    def test_bind_keeps_insertion_order(self, editor):
        config = make_configuration("Amount")

        editor.bind(config, "fieldmap_0", ref("b"))
        editor.bind(config, "fieldmap_0", ref("a"))

        assert [s.field_name for s in config.correspondences[0].sources] == ["b", "a"]

    def test_bind_incomplete_ref_fails(self, editor):
        config = make_configuration("Amount")

        with pytest.raises(StructuralError):
            editor.bind(
                config,
                "fieldmap_0",
                SourceFieldRef(file_id="file1", sheet_name="Sheet1", field_name=""),
            )

    def test_bind_unknown_target(self, editor):
        config = make_configuration("Amount")

        with pytest.raises(CorrespondenceNotFoundError):
            editor.bind(config, "fieldmap_missing", ref("amt"))

    def test_unbind(self, editor):
        config = make_configuration("Amount")
        editor.bind(config, "fieldmap_0", ref("amt"))

        assert editor.unbind(config, "fieldmap_0", ref("amt")) is True
        assert config.correspondences[0].sources == []

    def test_unbind_unknown_source(self, editor):
        config = make_configuration("Amount")

        assert editor.unbind(config, "fieldmap_0", ref("amt")) is False

    def test_mutations_advance_updated_at(self, editor):
        config = make_configuration("Amount", updated_at=5)

        editor.bind(config, "fieldmap_0", ref("amt"))
        after_bind = config.updated_at
        editor.unbind(config, "fieldmap_0", ref("amt"))

        assert 5 < after_bind < config.updated_at

    @pytest.mark.parametrize(
        "sequence",
        [
            [(0, "a"), (1, "a"), (2, "a")],
            [(0, "a"), (0, "b"), (1, "b"), (2, "a"), (0, "a")],
            [(2, "x"), (1, "y"), (0, "x"), (1, "x"), (2, "y")],
        ],
    )
    def test_source_has_at_most_one_owner(self, editor, sequence):
        config = make_configuration("A", "B", "C")

        for index, name in sequence:
            editor.bind(config, f"fieldmap_{index}", ref(name))
            editor.check_invariants(config)

        for name in {name for _, name in sequence}:
            assert len(_owners(config, ref(name))) == 1


class TestCheckInvariants:
    """Tests for the invariant check run before saving."""

    def test_duplicate_names(self, editor):
        config = make_configuration("Amount", "amount")

        with pytest.raises(DuplicateTargetNameError):
            editor.check_invariants(config)

    def test_source_on_two_targets(self, editor):
        config = make_configuration("A", "B")
        config.correspondences[0].sources = [ref("x")]
        config.correspondences[1].sources = [ref("x")]

        with pytest.raises(StructuralError, match="bound to both"):
            editor.check_invariants(config)

    def test_source_listed_twice(self, editor):
        config = make_configuration("A")
        config.correspondences[0].sources = [ref("x"), ref("x")]

        with pytest.raises(StructuralError, match="listed twice"):
            editor.check_invariants(config)

    def test_valid_configuration(self, editor):
        config = make_configuration("A", "B")
        config.correspondences[0].sources = [ref("x"), ref("x", file_id="file2")]

        editor.check_invariants(config)


class TestFindByTargetName:
    """Tests for name lookup."""

    def test_normalized_lookup(self, editor):
        config = make_configuration("Customer Name")

        found = editor.find_by_target_name(config, "CUSTOMER-name")

        assert found is not None
        assert found.id == "fieldmap_0"

    def test_exclude_id(self, editor):
        config = make_configuration("Customer Name")

        assert (
            editor.find_by_target_name(config, "customer name", exclude_id="fieldmap_0")
            is None
        )
