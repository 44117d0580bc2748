"""
User settings, read from ~/.payform/config.json (or $PAYFORM_CONFIG).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".payform" / "config.json"


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseModel):
    form_specs_path: Optional[str] = None
    address_specs_path: Optional[str] = None
    base_url: Optional[str] = None
    # sent as a bearer token when fetching server form specs
    api_key: Optional[str] = None
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def config_path() -> Path:
    override = os.environ.get("PAYFORM_CONFIG")
    return Path(override) if override else CONFIG_FILE


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Missing or unreadable config falls back to defaults."""
    path = Path(path) if path else config_path()
    try:
        return Settings.model_validate(json.loads(path.read_text()))
    except FileNotFoundError:
        return Settings()
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring invalid config %s: %s", path, e)
        return Settings()


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
    path = Path(path) if path else config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.model_dump(exclude_none=True), indent=2))
