"""Domain layer: entities and pure services of the correspondence engine."""
