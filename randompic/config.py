from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
DEFAULT_CONFIG_FILE = Path("config.json")
CONFIG_ENV_VAR = "RANDOMPIC_CONFIG"

IMAGES_MOUNT = "/images"
DEFAULT_IMAGE_DIRECTORY = "/mnt/photos"
DEFAULT_EXCLUDED_EXTENSIONS = [".mp4", ".mov", ".heic"]
DEFAULT_DISPLAY_SECONDS = 10
MIN_DISPLAY_SECONDS = 1
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_FILE = "randompic.log"
DEFAULT_LOG_MAX_BYTES = 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""


class Settings(BaseModel):
    excluded_extensions: list[str] = list(DEFAULT_EXCLUDED_EXTENSIONS)
    excluded_directories: list[str] = []
    image_directory: str = DEFAULT_IMAGE_DIRECTORY
    display_seconds: int = DEFAULT_DISPLAY_SECONDS

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_file: str = DEFAULT_LOG_FILE
    log_max_bytes: int = DEFAULT_LOG_MAX_BYTES
    log_backup_count: int = DEFAULT_LOG_BACKUP_COUNT
    log_level: str = "INFO"

    @field_validator("excluded_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        # Accept "mov" as well as ".MOV"; compared lower-cased with the dot.
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized

    @field_validator("excluded_directories")
    @classmethod
    def _drop_empty_directories(cls, value: list[str]) -> list[str]:
        # An empty substring would match every directory.
        return [item for item in value if item]

    @field_validator("display_seconds")
    @classmethod
    def _clamp_display_seconds(cls, value: int) -> int:
        return max(MIN_DISPLAY_SECONDS, value)

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError("log_level must be one of " + ", ".join(LOG_LEVELS))
        return level

    @field_validator("image_directory")
    @classmethod
    def _absolute_image_directory(cls, value: str) -> str:
        return os.path.abspath(value)


def resolve_config_path(cli_path: str | None = None) -> tuple[Path, bool]:
    """Return the config path to load and whether it was explicitly requested."""
    if cli_path:
        return Path(cli_path), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_FILE, False


def load_settings(path: Path | None = None, required: bool = False) -> Settings:
    """Load settings from a JSON file.

    A missing file falls back to the hardcoded defaults unless ``required`` is
    set. Unreadable or invalid files always raise ConfigError.
    """
    if path is None:
        path, required = resolve_config_path()

    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        logger.info("no config file at %s, using defaults", path)
        return Settings()

    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc

    try:
        settings = Settings.model_validate_json(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc

    logger.info("loaded config from %s", path)
    return settings
