import importlib
import os
from types import ModuleType

_ENV_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module() -> str:
    # APP_ENV picks the settings module; unknown values fall back to development.
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENV_MODULES.get(env, "config.development")


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())
