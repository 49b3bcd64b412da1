"""Testing fakes – in-memory doubles for application ports."""
from object_service.testing.fakes.repository import InMemoryObjectRepository

__all__ = ["InMemoryObjectRepository"]
