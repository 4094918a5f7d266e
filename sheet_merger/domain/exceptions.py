"""Errors raised by the field correspondence engine.

Structural errors reject a mutation and leave the stored configuration
untouched. Not-found errors mean the referenced id does not exist, so the
mutation was a no-op. Validation findings are never raised; they are returned
by the validator.
"""


class MappingEngineError(Exception):
    pass


class StructuralError(MappingEngineError):
    pass


class DuplicateTargetNameError(StructuralError):
    def __init__(self, name: str, existing_id: str) -> None:
        super().__init__(
            f"Target field '{name}' collides with existing correspondence {existing_id}"
        )
        self.name = name
        self.existing_id = existing_id


class InvalidTargetNameError(StructuralError):
    pass


class NotFoundError(MappingEngineError):
    pass


class ConfigurationNotFoundError(NotFoundError):
    def __init__(self, configuration_id: str) -> None:
        super().__init__(f"Mapping configuration not found: {configuration_id}")
        self.configuration_id = configuration_id


class CorrespondenceNotFoundError(NotFoundError):
    def __init__(self, configuration_id: str, correspondence_id: str) -> None:
        super().__init__(
            f"Correspondence {correspondence_id} not found in configuration "
            + configuration_id
        )
        self.configuration_id = configuration_id
        self.correspondence_id = correspondence_id
