"""Domain layer: collaborator protocols consumed by the engine."""
