"""Blog build configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDBLOG_"


class Settings(BaseModel):
    app_name:         str = "mdblog"
    source_dir:       str = Field(default="content/blog",        description="Directory of front-matter tagged .md posts")
    index_path:       str = Field(default="lib/blog-data.json",  description="Aggregate metadata index output file")
    content_dir:      str = Field(default="public/blog-content", description="Directory for per-post content blobs")
    parser_config:    str = Field(default="gfm-like",            description="MarkdownIt parser preset name")
    image_mode:       str = Field(default="publish", pattern="^(publish|preview)$", description="publish strips the asset prefix")
    asset_prefix:     str = Field(default="/public", pattern="^/", description="Static-asset path prefix stripped in publish mode")
    words_per_minute: int = Field(default=225, ge=1, description="Reading speed used for read time")
    default_category: str = Field(default="General",  description="Category when neither category nor tags are set")
    diagram_language: str = Field(default="mermaid",  description="Fence language rendered as a diagram")
    scroll_offset:  float = Field(default=140.0, ge=0, description="Sticky header height used by the scroll spy")
    settle_delay:   float = Field(default=0.05,  ge=0, description="Seconds enhancers wait before scanning")
    diagram_endpoint: str = Field(default="https://kroki.io", description="Kroki server used to render diagrams")


def read_config_file(path: Path) -> dict[str, Any]:
    """Mapping from a YAML config file; an absent file contributes nothing."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {path.name}: expected a mapping")
    return data


def env_overrides(prefix: str = ENV_PREFIX) -> dict[str, str]:
    """Non-empty <prefix><FIELD> environment variables, keyed by field name."""
    return {
        name: value
        for name in Settings.model_fields
        if (value := os.getenv(f"{prefix}{name.upper()}"))
    }


def load_config(overrides: dict[str, Any] = None, path: Path = None) -> Settings:
    """Settings layered from lowest to highest precedence: config file, environment, non-None CLI overrides."""
    layers = [read_config_file(path or Path(CONFIG_FILE)), env_overrides()]
    if overrides:
        layers.append({k: v for k, v in overrides.items() if v is not None})
    data: dict[str, Any] = {}
    for layer in layers:
        data.update(layer)
    return Settings(**data)
