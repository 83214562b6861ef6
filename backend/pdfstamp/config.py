from __future__ import annotations

import os
from pathlib import Path


def _optional_path(env_name: str) -> Path | None:
    raw = os.getenv(env_name)
    return Path(raw) if raw else None


class BaseConfig:
    BASE_DIR = Path.cwd()
    JSON_SORT_KEYS = False
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024
    LOG_LEVEL = os.getenv("PDFSTAMP_LOG_LEVEL", "INFO")
    # Declared version written into every saved document header
    PDF_VERSION = os.getenv("PDFSTAMP_PDF_VERSION", "1.5")
    # Relative input/output paths in a configuration resolve against this root
    OUTPUT_ROOT = Path(os.getenv("PDFSTAMP_OUTPUT_ROOT", Path.cwd() / "data" / "documents"))
    RULES_PATH = _optional_path("PDFSTAMP_RULES_PATH")
    CONFIGURATION_PATH = _optional_path("PDFSTAMP_CONFIGURATION_PATH")


class TestConfig(BaseConfig):
    TESTING = True
    OUTPUT_ROOT = Path("/tmp/pdfstamp-test")
    LOG_LEVEL = "DEBUG"
    RULES_PATH = None
    CONFIGURATION_PATH = None


class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


config_by_name = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": BaseConfig,
}


def get_config(config_name: str | None = None):
    if not config_name:
        config_name = os.getenv("PDFSTAMP_ENV", "development")
    return config_by_name.get(config_name.lower(), BaseConfig)
