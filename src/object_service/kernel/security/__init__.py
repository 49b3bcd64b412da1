"""Kernel security – principal, ambient security context and scope policy."""
from object_service.kernel.security.principal import Principal
from object_service.kernel.security.scopes import ScopeAction, ScopePolicy, ScopeResult
from object_service.kernel.security.security_context import SecurityContext

__all__ = [
    "Principal",
    "ScopeAction",
    "ScopePolicy",
    "ScopeResult",
    "SecurityContext",
]
