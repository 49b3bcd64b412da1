"""Config – dataclass settings loaded from the environment or a ``.env`` file."""
