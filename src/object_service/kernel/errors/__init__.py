"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── ValidationError
    │   ├── NotFoundError
    │   └── ImmutableCollectionError
    ├── ApplicationError         (application.py)
    │   ├── UnauthorizedError
    │   └── ForbiddenError
    └── InfrastructureError      (infrastructure.py)
        └── ConnectionError
"""

from object_service.kernel.errors.application import (
    ApplicationError,
    ForbiddenError,
    UnauthorizedError,
)
from object_service.kernel.errors.base import BaseError
from object_service.kernel.errors.domain import (
    DomainError,
    ImmutableCollectionError,
    NotFoundError,
    ValidationError,
)
from object_service.kernel.errors.infrastructure import (
    ConnectionError,
    InfrastructureError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConnectionError",
    "DomainError",
    "ForbiddenError",
    "ImmutableCollectionError",
    "InfrastructureError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
