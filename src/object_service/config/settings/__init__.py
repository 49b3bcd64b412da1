"""Config settings – 12-factor env-based configuration."""
from object_service.config.settings.base import Settings
from object_service.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from object_service.config.settings.service import ObjectServiceSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "ObjectServiceSettings",
    "Settings",
    "SettingsLoader",
]
