from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

from .constants import Defaults, Placeholders

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class MergerConfig:
    storage_dir: Path = field(default_factory=lambda: Path(Defaults.STORAGE_DIR))
    similarity_threshold: float = Defaults.SIMILARITY_THRESHOLD
    assignment_threshold: float = Defaults.ASSIGNMENT_THRESHOLD
    history_enabled: bool = Defaults.HISTORY_ENABLED
    required_fields: tuple[str, ...] = ()
    placeholder_prefixes: tuple[str, ...] = Placeholders.PREFIXES

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(
                "similarity_threshold must be between 0.0 and 1.0, "
                + f"got {self.similarity_threshold}"
            )
        if not 0.0 <= self.assignment_threshold <= 1.0:
            raise ValueError(
                "assignment_threshold must be between 0.0 and 1.0, "
                + f"got {self.assignment_threshold}"
            )
        if not self.placeholder_prefixes:
            raise ValueError("placeholder_prefixes must not be empty")

    @classmethod
    def from_env(cls) -> MergerConfig:
        raw_history = os.getenv("SHEET_MERGER_HISTORY")
        history_enabled = Defaults.HISTORY_ENABLED
        if raw_history is not None:
            history_enabled = raw_history.strip().lower() not in _FALSE_VALUES
        return cls(
            storage_dir=Path(
                os.getenv("SHEET_MERGER_STORAGE_DIR", Defaults.STORAGE_DIR)
            ),
            similarity_threshold=float(
                os.getenv(
                    "SHEET_MERGER_SIMILARITY_THRESHOLD",
                    str(Defaults.SIMILARITY_THRESHOLD),
                )
            ),
            assignment_threshold=float(
                os.getenv(
                    "SHEET_MERGER_ASSIGNMENT_THRESHOLD",
                    str(Defaults.ASSIGNMENT_THRESHOLD),
                )
            ),
            history_enabled=history_enabled,
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> MergerConfig:
        config = MergerConfig.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(config_file: Path, base_config: MergerConfig) -> MergerConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        paths = _get_table(data, "paths")
        matching = _get_table(data, "matching")
        storage_dir = base_config.storage_dir
        if value := paths.get("storage_dir"):
            storage_dir = Path(str(value))
        similarity_threshold = base_config.similarity_threshold
        if (value := matching.get("similarity_threshold")) is not None:
            similarity_threshold = _coerce_float(
                value, key="matching.similarity_threshold"
            )
        assignment_threshold = base_config.assignment_threshold
        if (value := matching.get("assignment_threshold")) is not None:
            assignment_threshold = _coerce_float(
                value, key="matching.assignment_threshold"
            )
        history_enabled = base_config.history_enabled
        if (value := matching.get("history_enabled")) is not None:
            history_enabled = _coerce_bool(value, key="matching.history_enabled")
        required_fields = base_config.required_fields
        if (value := matching.get("required_fields")) is not None:
            required_fields = _coerce_names(value, key="matching.required_fields")
        return MergerConfig(
            storage_dir=storage_dir,
            similarity_threshold=similarity_threshold,
            assignment_threshold=assignment_threshold,
            history_enabled=history_enabled,
            required_fields=required_fields,
            placeholder_prefixes=base_config.placeholder_prefixes,
        )


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_float(value: object, *, key: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be numeric, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value)
    raise ValueError(f"{key} must be numeric or string, got {type(value).__name__}")


def _coerce_bool(value: object, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_VALUES
    raise ValueError(f"{key} must be a boolean, got {type(value).__name__}")


def _coerce_names(value: object, *, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        items = cast("list[object]", value)
        return tuple(str(item).strip() for item in items if str(item).strip())
    raise ValueError(f"{key} must be a list of names, got {type(value).__name__}")
