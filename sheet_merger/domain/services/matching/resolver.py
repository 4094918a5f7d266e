"""Multi-stage auto-mapping of one file/sheet onto a mapping configuration.

This module provides the CorrespondenceResolver class which fills target
fields that have no source from the current file/sheet yet. Stages run in a
fixed order and a target bound by one stage is skipped by all later ones:

1. cross-file reuse of a name already bound from another file/sheet
2. names learned from previously saved configurations
3. case-insensitive literal match, then normalized-name match
4. best similarity score above the similarity threshold
5. greedy one-to-one assignment over whatever is left
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from ....constants import Defaults
from ...entities.mapping import (
    FieldCorrespondence,
    MappingConfiguration,
    SourceFieldRef,
    visible_correspondences,
)
from ..correspondence_editor import CorrespondenceEditor
from .history_advisor import HistoryAdvisor
from .normalizer import normalize_field_name, same_name_ignoring_case
from .similarity import similarity


class AutoMapStage(str, Enum):
    CROSS_FILE = "cross_file"
    HISTORY = "history"
    EXACT = "exact"
    SIMILARITY = "similarity"
    ASSIGNMENT = "assignment"


@dataclass(frozen=True, slots=True)
class Binding:
    correspondence_id: str
    target_name: str
    field_name: str
    stage: AutoMapStage
    score: float = 1.0


def _empty_bindings() -> list[Binding]:
    return []


@dataclass(slots=True)
class AutoMapResult:
    configuration: MappingConfiguration
    bindings: list[Binding] = field(default_factory=_empty_bindings)

    @property
    def new_bindings(self) -> int:
        return len(self.bindings)

    def by_stage(self, stage: AutoMapStage) -> list[Binding]:
        return [b for b in self.bindings if b.stage == stage]


class CorrespondenceResolver:
    """Proposes source→target bindings for one file/sheet.

    The configuration passed to ``auto_map`` is never modified; the result
    carries a deep copy with the new bindings applied, so callers can publish
    the whole pass at once.

    Example:
        >>> resolver = CorrespondenceResolver()
        >>> result = resolver.auto_map(config, "file1", "Sheet1", ["customer_name"])
        >>> result.new_bindings
        1
    """

    def __init__(
        self,
        *,
        similarity_threshold: float = Defaults.SIMILARITY_THRESHOLD,
        assignment_threshold: float = Defaults.ASSIGNMENT_THRESHOLD,
        history_advisor: HistoryAdvisor | None = None,
        editor: CorrespondenceEditor | None = None,
        scorer: Callable[[str, str], float] = similarity,
    ) -> None:
        """Initialize the resolver.

        Args:
            similarity_threshold: Stage 4 accepts scores strictly above this
            assignment_threshold: Stage 5 accepts scores at or above this
            history_advisor: Source of learned names; None disables stage 2
            editor: Editor used to apply bindings
            scorer: Name similarity function returning a score in [0, 1]
        """
        self.similarity_threshold = similarity_threshold
        self.assignment_threshold = assignment_threshold
        self.history_advisor = history_advisor
        self.editor = editor or CorrespondenceEditor()
        self.scorer = scorer

    def auto_map(
        self,
        configuration: MappingConfiguration,
        file_id: str,
        sheet_name: str,
        columns: Sequence[str] | None,
        past_configurations: Iterable[MappingConfiguration] = (),
    ) -> AutoMapResult:
        working = configuration.model_copy(deep=True)
        result = AutoMapResult(configuration=working)
        ordered_columns = _clean_columns(columns)
        if not ordered_columns:
            return result

        run = _ResolverRun(self, working, file_id, sheet_name, ordered_columns)
        run.cross_file_reuse()
        if self.history_advisor is not None:
            history = [c for c in past_configurations if c.id != configuration.id]
            run.history_patterns(history)
        run.exact_matches()
        run.similarity_matches()
        run.greedy_assignment()
        result.bindings = run.bindings
        return result


class _ResolverRun:
    """State of a single auto-map pass over one file/sheet."""

    def __init__(
        self,
        resolver: CorrespondenceResolver,
        config: MappingConfiguration,
        file_id: str,
        sheet_name: str,
        columns: list[str],
    ) -> None:
        self.resolver = resolver
        self.config = config
        self.file_id = file_id
        self.sheet_name = sheet_name
        claimed = config.claimed_columns(file_id, sheet_name)
        self.available: list[str] = [c for c in columns if c not in claimed]
        self.bindings: list[Binding] = []

    def pending(self) -> list[FieldCorrespondence]:
        return [
            c
            for c in visible_correspondences(
                self.config, self.resolver.editor.placeholder_prefixes
            )
            if not c.is_mapped_from(self.file_id, self.sheet_name)
        ]

    def bind(
        self,
        correspondence: FieldCorrespondence,
        column: str,
        stage: AutoMapStage,
        score: float = 1.0,
    ) -> None:
        ref = SourceFieldRef(
            file_id=self.file_id, sheet_name=self.sheet_name, field_name=column
        )
        if self.resolver.editor.bind(self.config, correspondence.id, ref):
            self.available.remove(column)
            self.bindings.append(
                Binding(
                    correspondence_id=correspondence.id,
                    target_name=correspondence.target.name,
                    field_name=column,
                    stage=stage,
                    score=score,
                )
            )

    def cross_file_reuse(self) -> None:
        for correspondence in self.pending():
            for ref in correspondence.sources:
                match = self._first(
                    lambda column, name=ref.field_name: same_name_ignoring_case(
                        column, name
                    )
                )
                if match is not None:
                    self.bind(correspondence, match, AutoMapStage.CROSS_FILE)
                    break

    def history_patterns(self, past: list[MappingConfiguration]) -> None:
        advisor = self.resolver.history_advisor
        if advisor is None or not past:
            return
        suggestions = advisor.suggest(self.available, past)
        if not suggestions:
            return
        for correspondence in self.pending():
            names = suggestions.get(normalize_field_name(correspondence.target.name))
            for name in names or ():
                if name in self.available:
                    self.bind(correspondence, name, AutoMapStage.HISTORY)
                    break

    def exact_matches(self) -> None:
        for correspondence in self.pending():
            target = correspondence.target.name
            match = self._first(
                lambda column: same_name_ignoring_case(column, target)
            )
            if match is None:
                key = normalize_field_name(target)
                if key:
                    match = self._first(
                        lambda column: normalize_field_name(column) == key
                    )
            if match is not None:
                self.bind(correspondence, match, AutoMapStage.EXACT)

    def similarity_matches(self) -> None:
        scorer = self.resolver.scorer
        threshold = self.resolver.similarity_threshold
        for correspondence in self.pending():
            best_column: str | None = None
            best_score = 0.0
            for column in self.available:
                score = scorer(correspondence.target.name, column)
                # Strict comparison keeps the earliest column on ties.
                if best_column is None or score > best_score:
                    best_column = column
                    best_score = score
            if best_column is not None and best_score > threshold:
                self.bind(
                    correspondence, best_column, AutoMapStage.SIMILARITY, best_score
                )

    def greedy_assignment(self) -> None:
        """Greedy approximation of maximum-weight bipartite matching.

        Repeatedly binds the single best remaining (target, column) pair at or
        above the assignment threshold. Ties go to the earlier target, then the
        earlier column.
        """
        scorer = self.resolver.scorer
        threshold = self.resolver.assignment_threshold
        targets = self.pending()
        columns = list(self.available)
        scores = {
            (t.id, c): scorer(t.target.name, c) for t in targets for c in columns
        }
        while targets and columns:
            best: tuple[FieldCorrespondence, str, float] | None = None
            for target in targets:
                for column in columns:
                    score = scores[(target.id, column)]
                    if score < threshold:
                        continue
                    if best is None or score > best[2]:
                        best = (target, column, score)
            if best is None:
                return
            target, column, score = best
            self.bind(target, column, AutoMapStage.ASSIGNMENT, score)
            targets.remove(target)
            columns.remove(column)

    def _first(self, predicate: Callable[[str], bool]) -> str | None:
        for column in self.available:
            if predicate(column):
                return column
        return None


def _clean_columns(columns: Sequence[str] | None) -> list[str]:
    if not columns:
        return []
    return list(dict.fromkeys(c for c in columns if isinstance(c, str) and c))
