"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDPOST_"


class Settings(BaseModel):
    app_name:        str  = "mdpost"
    db_url:          str  = "sqlite:///mdpost.db"
    max_versions:    int  = Field(default=10, ge=0, description="Max stored versions per record; 0 disables pruning")
    output_dir:      str  = Field(default="dist",          description="Directory for the exported manifest")
    manifest_name:   str  = Field(default="manifest.json", description="File name of the exported manifest")
    modified_policy: str  = Field(default="warn", pattern="^(warn|reject)$",
                                  description="modifiedAt earlier than publishedAt: warn or reject")
    check_assets:    bool = Field(default=True,            description="Warn about missing thumbnail/body images")
    log_level:       str  = Field(default="WARNING",       description="stdlib logging level name")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDPOST_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
