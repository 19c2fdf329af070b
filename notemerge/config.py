from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, field_validator

CONFIG_ENV_VAR = "NOTEMERGE_CONFIG"


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_level: str = "INFO"
    warn_unknown_directives: bool = True
    backup_dir: Optional[str] = None
    index_base: int = 1

    @field_validator("log_level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @field_validator("index_base")
    @classmethod
    def zero_or_one(cls, value: int) -> int:
        if value not in (0, 1):
            raise ValueError("index_base must be 0 or 1")
        return value


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from ``path``, ``$NOTEMERGE_CONFIG`` or the defaults."""
    cfg = path or os.environ.get(CONFIG_ENV_VAR)
    if not cfg:
        return Settings()
    cfg_path = Path(cfg)
    if not cfg_path.exists():
        raise FileNotFoundError(f"Missing config file: {cfg_path}")
    data = orjson.loads(cfg_path.read_bytes())
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object in {cfg_path}")
    return Settings.model_validate(data)
