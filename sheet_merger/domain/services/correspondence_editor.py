"""Invariant-preserving edits on a mapping configuration.

All methods mutate the configuration they are given. Callers that need
all-or-nothing semantics work on a deep copy and publish it once the edit
succeeded; the editor raises before touching anything when an edit would
break an invariant.
"""

from collections.abc import Iterable

from ...constants import Placeholders
from ..entities.mapping import (
    DataType,
    FieldCorrespondence,
    MappingConfiguration,
    SourceFieldRef,
    TargetFieldDescriptor,
    is_placeholder_name,
    new_correspondence_id,
)
from ..exceptions import (
    CorrespondenceNotFoundError,
    DuplicateTargetNameError,
    InvalidTargetNameError,
    StructuralError,
)
from .matching.normalizer import normalize_field_name


class CorrespondenceEditor:
    pass

    def __init__(
        self, placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES
    ) -> None:
        super().__init__()
        self._placeholder_prefixes = tuple(placeholder_prefixes)

    @property
    def placeholder_prefixes(self) -> tuple[str, ...]:
        return self._placeholder_prefixes

    def find_by_target_name(
        self,
        config: MappingConfiguration,
        name: str,
        *,
        exclude_id: str | None = None,
    ) -> FieldCorrespondence | None:
        key = normalize_field_name(name)
        for correspondence in config.correspondences:
            if correspondence.id == exclude_id:
                continue
            if normalize_field_name(correspondence.target.name) == key:
                return correspondence
        return None

    def require(
        self, config: MappingConfiguration, correspondence_id: str
    ) -> FieldCorrespondence:
        correspondence = config.get_correspondence(correspondence_id)
        if correspondence is None:
            raise CorrespondenceNotFoundError(config.id, correspondence_id)
        return correspondence

    def add_target(
        self,
        config: MappingConfiguration,
        descriptor: TargetFieldDescriptor,
        *,
        correspondence_id: str | None = None,
    ) -> FieldCorrespondence:
        name = self._checked_name(descriptor.name)
        existing = self.find_by_target_name(config, name)
        if existing is not None:
            raise DuplicateTargetNameError(name, existing.id)
        correspondence = FieldCorrespondence(
            id=correspondence_id or new_correspondence_id(),
            target=descriptor.model_copy(update={"name": name}),
        )
        config.correspondences.append(correspondence)
        config.touch()
        return correspondence

    def remove_target(
        self, config: MappingConfiguration, correspondence_id: str
    ) -> FieldCorrespondence:
        correspondence = self.require(config, correspondence_id)
        config.correspondences = [
            c for c in config.correspondences if c.id != correspondence_id
        ]
        config.touch()
        return correspondence

    def rename_target(
        self, config: MappingConfiguration, correspondence_id: str, new_name: str
    ) -> FieldCorrespondence:
        correspondence = self.require(config, correspondence_id)
        name = self._checked_name(new_name)
        clash = self.find_by_target_name(config, name, exclude_id=correspondence_id)
        if clash is not None:
            raise DuplicateTargetNameError(name, clash.id)
        if correspondence.target.name != name:
            correspondence.target = correspondence.target.model_copy(
                update={"name": name}
            )
            config.touch()
        return correspondence

    def update_target(
        self,
        config: MappingConfiguration,
        correspondence_id: str,
        *,
        description: str | None = None,
        data_type: DataType | None = None,
        required: bool | None = None,
    ) -> FieldCorrespondence:
        correspondence = self.require(config, correspondence_id)
        changes: dict[str, object] = {}
        if description is not None:
            changes["description"] = description
        if data_type is not None:
            changes["data_type"] = DataType(data_type)
        if required is not None:
            changes["required"] = required
        if changes:
            correspondence.target = correspondence.target.model_copy(update=changes)
            config.touch()
        return correspondence

    def bind(
        self,
        config: MappingConfiguration,
        correspondence_id: str,
        ref: SourceFieldRef,
    ) -> bool:
        """Attach ``ref`` to a target, moving it away from any other target.

        Returns True when the configuration changed.
        """
        correspondence = self.require(config, correspondence_id)
        if not ref.is_complete:
            raise StructuralError(f"Incomplete source field reference: {ref.key()}")
        changed = False
        for other in config.correspondences:
            if other.id != correspondence_id and other.contains(ref):
                other.sources = [s for s in other.sources if s != ref]
                changed = True
        if not correspondence.contains(ref):
            correspondence.sources.append(ref)
            changed = True
        if changed:
            config.touch()
        return changed

    def unbind(
        self,
        config: MappingConfiguration,
        correspondence_id: str,
        ref: SourceFieldRef,
    ) -> bool:
        correspondence = self.require(config, correspondence_id)
        if not correspondence.contains(ref):
            return False
        correspondence.sources = [s for s in correspondence.sources if s != ref]
        config.touch()
        return True

    def check_invariants(self, config: MappingConfiguration) -> None:
        seen_names: dict[str, str] = {}
        owners: dict[SourceFieldRef, str] = {}
        for correspondence in config.correspondences:
            key = normalize_field_name(correspondence.target.name)
            if key in seen_names:
                raise DuplicateTargetNameError(
                    correspondence.target.name, seen_names[key]
                )
            seen_names[key] = correspondence.id
            for ref in correspondence.sources:
                owner = owners.get(ref)
                if owner == correspondence.id:
                    raise StructuralError(
                        f"Source {ref.key()} listed twice on {correspondence.id}"
                    )
                if owner is not None:
                    raise StructuralError(
                        f"Source {ref.key()} bound to both {owner} and {correspondence.id}"
                    )
                owners[ref] = correspondence.id

    def _checked_name(self, name: str) -> str:
        cleaned = (name or "").strip()
        if is_placeholder_name(cleaned, self._placeholder_prefixes):
            raise InvalidTargetNameError(
                f"'{name}' is not a valid target field name"
            )
        if not normalize_field_name(cleaned):
            raise InvalidTargetNameError(
                f"'{name}' has no letters or digits to compare on"
            )
        return cleaned
