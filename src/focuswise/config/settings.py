"""Configuration management for focuswise.

One YAML file describes the camera, the presence classifier, session
timing, the report archive, the HTTP server and logging. OpenAI
credentials come from the environment or a local .env file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/focuswise.yaml")


class CaptureConfig(BaseModel):
    device_index: int = Field(default=0, description="OpenCV camera device index")
    resolution_width: int | None = Field(default=None)
    resolution_height: int | None = Field(default=None)


class ClassifierConfig(BaseModel):
    backend: Literal["haar", "openai"] = Field(default="haar")
    # Haar cascade
    cascade_file: str = Field(default="haarcascade_frontalface_default.xml")
    profile_fallback: bool = Field(default=True)
    scale_factor: float = Field(default=1.1, gt=1.0)
    min_neighbors: int = Field(default=5, ge=0)
    min_face_size: int = Field(default=60, gt=0)
    # OpenAI-compatible vision model
    model: str = Field(default="gpt-4o-mini")
    base_url: str | None = Field(default=None)
    max_tokens: int = Field(default=64, gt=0)
    verify_on_load: bool = Field(default=True)


class SessionConfig(BaseModel):
    tick_interval: float = Field(default=1.0, gt=0)
    detection_timeout: float = Field(default=0.9, gt=0)
    preset_minutes: list[int] = Field(default_factory=lambda: [10, 25, 45])


class ArchiveConfig(BaseModel):
    path: str = Field(default="data/focus_reports.json")
    key: str = Field(default="focusReports")


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8765, ge=1, le=65535)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration.

    Fields the YAML file leaves out can be set through FOCUSWISE_
    variables, with "__" separating nested sections, for example
    FOCUSWISE_SESSION__TICK_INTERVAL.
    """

    model_config = {
        "env_prefix": "FOCUSWISE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Only needed for the openai classifier backend
    openai_api_key: SecretStr = Field(default=SecretStr(""))

    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Build Settings from the YAML file, .env and the process environment.

    Values in the YAML file take precedence over FOCUSWISE_ variables. The
    unprefixed OPENAI_API_KEY, OPENAI_BASE_URL and VISION_MODEL variables
    (or their .env entries) only fill fields the YAML file leaves empty.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    _load_dotenv()

    data: dict = {}
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        logger.info("Configuration read from %s", path)
    else:
        logger.warning("No configuration file at %s; using defaults", path)

    _apply_env_overrides(data)
    return Settings(**data)


def _load_dotenv(env_path: Path = Path(".env")) -> None:
    """Copy KEY=VALUE lines from .env into os.environ without clobbering."""
    if not env_path.exists():
        return
    with open(env_path) as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            if not os.environ.get(key):
                os.environ[key] = value.strip()


def _apply_env_overrides(data: dict) -> None:
    """Fill unprefixed OpenAI variables into the YAML data where it is silent."""
    classifier = data.get("classifier") or {}
    data["classifier"] = classifier
    overrides = (
        (data, "openai_api_key", "OPENAI_API_KEY"),
        (classifier, "base_url", "OPENAI_BASE_URL"),
        (classifier, "model", "VISION_MODEL"),
    )
    for section, field, var in overrides:
        value = os.environ.get(var, "")
        if value and not section.get(field):
            section[field] = value
