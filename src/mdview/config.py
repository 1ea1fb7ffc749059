"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDVIEW_"


class Settings(BaseModel):
    app_name:         str = "mdview"
    db_url:           str = "sqlite:///mdview.db"
    parser_config:    str = Field(default="gfm-like",   description="MarkdownIt parser preset name")
    image_scheme:     str = Field(default="localimage", pattern="^[a-z][a-z0-9+.-]*$", description="URL scheme for local images")
    max_recent_files: int = Field(default=10, ge=1,     description="Length cap of the recent files list")
    standalone:       bool = Field(default=False,       description="Wrap rendered HTML in a full page by default")


def load_config(overrides: dict[str, Any] = None, config_file: str | os.PathLike = CONFIG_FILE) -> Settings:
    """Load Settings from config.yaml, then MDVIEW_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    path = Path(config_file)
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {path.name}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {path.name}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
