"""Learning from previously saved mapping configurations.

The advisor remembers which source column names were bound to which target
names in earlier configurations and offers them back when a new file with the
same column names shows up.
"""

from collections.abc import Iterable, Sequence

from ....constants import Placeholders
from ...entities.mapping import MappingConfiguration, is_placeholder_name
from .normalizer import normalize_field_name


class HistoryAdvisor:
    """Read-only oracle over past configurations.

    Example:
        >>> advisor = HistoryAdvisor()
        >>> advisor.suggest(["cust_nm", "amt"], saved_configurations)
        {'customername': ['cust_nm'], 'amount': ['amt']}
    """

    def __init__(self, placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES):
        self._placeholder_prefixes = tuple(placeholder_prefixes)

    def learn(
        self, past_configurations: Iterable[MappingConfiguration]
    ) -> dict[str, list[str]]:
        """Collect source display names per normalized target name.

        Configurations are visited most recently updated first, so the lists
        come out in recency order.
        """
        ordered = sorted(
            past_configurations, key=lambda config: config.updated_at, reverse=True
        )
        history: dict[str, list[str]] = {}
        for config in ordered:
            for correspondence in config.correspondences:
                name = correspondence.target.name
                if is_placeholder_name(name, self._placeholder_prefixes):
                    continue
                key = normalize_field_name(name)
                if not key:
                    continue
                seen = history.setdefault(key, [])
                for ref in correspondence.sources:
                    if ref.field_name and ref.field_name not in seen:
                        seen.append(ref.field_name)
        return history

    def suggest(
        self,
        source_names: Sequence[str],
        past_configurations: Iterable[MappingConfiguration],
    ) -> dict[str, list[str]]:
        """Historical source names per target that also exist in ``source_names``.

        Matching against the live column list is verbatim and case-sensitive.
        """
        available = set(source_names)
        suggestions: dict[str, list[str]] = {}
        for key, names in self.learn(past_configurations).items():
            present = [name for name in names if name in available]
            if present:
                suggestions[key] = present
        return suggestions
