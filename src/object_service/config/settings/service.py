"""Config settings – ObjectServiceSettings.

Every field is read from ``OBJECT_<FIELD>``, e.g.
``OBJECT_MONGO_CONNECTION_STRING`` or ``OBJECT_IMMUTABLE=bookstore/audit``.
"""
from __future__ import annotations

import dataclasses
import logging

from object_service.config.settings.base import Settings
from object_service.config.validation import InvalidSettingValueError

_MONGO_SCHEMES = ("mongodb://", "mongodb+srv://")


@dataclasses.dataclass
class ObjectServiceSettings(Settings):
    _prefix = "OBJECT"

    mongo_connection_string: str = "mongodb://localhost:27017"
    mongo_use_ssl: bool = False
    immutable: str = ""
    system_name: str = ""
    service_name: str = "object"
    require_auth: bool = False
    health_check_database_name: str = "_healthcheckdatabase_"
    health_check_collection_name: str = "_healthcheckcollection_"
    health_degradation_ms: int = 1000
    health_timeout_ms: int = 2000
    readiness_url: str | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 9090

    def _validate(self) -> None:
        if not self.mongo_connection_string.startswith(_MONGO_SCHEMES):
            raise InvalidSettingValueError(
                "mongo_connection_string",
                self.mongo_connection_string,
                "must start with mongodb:// or mongodb+srv://",
            )
        if self.require_auth and not self.system_name:
            raise InvalidSettingValueError(
                "system_name", self.system_name, "required when require_auth is enabled"
            )
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError("port", self.port, "must be between 1 and 65535")
        if self.health_degradation_ms <= 0 or self.health_timeout_ms <= 0:
            raise InvalidSettingValueError(
                "health_timeout_ms", self.health_timeout_ms, "thresholds must be positive"
            )
        if self.health_degradation_ms > self.health_timeout_ms:
            raise InvalidSettingValueError(
                "health_degradation_ms",
                self.health_degradation_ms,
                "must not exceed health_timeout_ms",
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")


__all__ = ["ObjectServiceSettings"]
