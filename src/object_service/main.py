"""Service entry point: ``python -m object_service.main`` or the ``object-service`` script.

Settings are read from ``OBJECT_*`` environment variables, with a ``.env``
file in the working directory taking part when present.
"""
from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from object_service.adapters.fastapi import create_app
from object_service.config.settings import DotenvSettingsLoader, ObjectServiceSettings
from object_service.observability.logging import JsonLoggerFactory, get_logger

_log = get_logger(__name__)


def load_settings(env_file: str = ".env") -> ObjectServiceSettings:
    return DotenvSettingsLoader(env_file).load(ObjectServiceSettings)


def app_factory() -> FastAPI:
    """ASGI factory for ``uvicorn --factory object_service.main:app_factory``."""
    settings = load_settings()
    JsonLoggerFactory.configure(settings.log_level)
    return create_app(settings)


def main() -> None:
    settings = load_settings()
    JsonLoggerFactory.configure(settings.log_level)
    app = create_app(settings)
    _log.info("object_service_listening", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
