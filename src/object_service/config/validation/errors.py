"""Config validation errors raised while loading the object service settings.

Values of connection-string settings are masked before they reach an error
message, since a MongoDB URI may carry ``user:password@`` credentials.
"""
from __future__ import annotations

import re

from object_service.kernel.errors import ApplicationError

_CREDENTIALS = re.compile(r"(?<=://)[^/@]+@")


def _display(setting_name: str, value: object) -> str:
    if isinstance(value, str) and "connection_string" in setting_name.lower():
        return repr(_CREDENTIALS.sub("***@", value))
    return repr(value)


class ConfigError(ApplicationError):
    """Settings could not be loaded, or a loaded value failed validation."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A settings field without a default has no environment variable."""

    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"Environment variable '{setting_name}' is required",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be coerced or fails validation."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        shown = _display(setting_name, value)
        super().__init__(
            f"Setting '{setting_name}' has invalid value {shown}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
