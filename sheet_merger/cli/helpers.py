"""Shared plumbing for CLI commands.

Commands get the use case from the click context, resolve the configuration
they act on and turn engine errors into click errors.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import click

from ..domain.exceptions import MappingEngineError
from ..domain.services.correspondence_editor import CorrespondenceEditor
from ..infrastructure.io.exceptions import MergerInfrastructureError

if TYPE_CHECKING:
    from ..application.mapping_configuration_use_case import (
        MappingConfigurationUseCase,
    )
    from ..domain.entities.mapping import FieldCorrespondence, MappingConfiguration
    from ..infrastructure.container import DependencyContainer


@dataclass(slots=True)
class CliState:
    container: DependencyContainer

    @property
    def use_case(self) -> MappingConfigurationUseCase:
        return self.container.create_mapping_use_case()


def get_state(ctx: click.Context) -> CliState:
    state = ctx.find_object(CliState)
    if state is None:
        raise click.ClickException("CLI context was not initialised")
    return state


@contextmanager
def engine_errors() -> Iterator[None]:
    try:
        yield
    except (MappingEngineError, MergerInfrastructureError) as exc:
        raise click.ClickException(str(exc)) from exc


def resolve_configuration(
    use_case: MappingConfigurationUseCase, configuration_id: str | None
) -> MappingConfiguration:
    """The named configuration, or the active one when no id is given."""
    if configuration_id is None:
        configuration_id = use_case.get_active_configuration_id()
        if configuration_id is None:
            raise click.ClickException(
                "No active configuration. Pass --config or run 'config activate'."
            )
    with engine_errors():
        return use_case.get_configuration(configuration_id)


def resolve_target(
    configuration: MappingConfiguration, target: str
) -> FieldCorrespondence:
    """Look a target up by correspondence id first, then by name."""
    correspondence = configuration.get_correspondence(target)
    if correspondence is None:
        correspondence = CorrespondenceEditor().find_by_target_name(
            configuration, target
        )
    if correspondence is None:
        raise click.ClickException(
            f"Target '{target}' not found in configuration {configuration.id}"
        )
    return correspondence
