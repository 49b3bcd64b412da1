"""
object_service – HTTP gateway over schemaless MongoDB document storage.

Import path convention::

    from object_service.application.query import compile_query
    from object_service.adapters.fastapi import create_app
    from object_service.kernel.errors import NotFoundError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
