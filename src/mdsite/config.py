"""Application configuration: settings schema and mdsite.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "mdsite.yaml"


class Settings(BaseModel):
    site_name:       str = "mdsite"
    site_url:        str = Field(default="http://localhost:8000", description="Public base URL, no trailing slash")
    author:          str = ""
    author_email:    str = ""
    commit_base_url: str = Field(default="", description="Prefix for commit links, e.g. https://host/repo/commit")
    content_dir:     str = Field(default=".",    description="Content root holding pages and the blog directory")
    output_dir:      str = Field(default="dist", description="Directory for exported JSON + feed files")
    blog_dir:        str = Field(default="blog", description="Blog directory name under the content root")
    skip:            list[str] = Field(default_factory=list, description="Page names to leave out of the scan")
    workers:         int = Field(default=1, ge=1, description="Thread pool size for document parsing")
    feed_file:       str = Field(default="rss.xml", description="Feed filename under the blog output directory")

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("blog_dir")
    @classmethod
    def _strip_slashes(cls, v: str) -> str:
        return v.strip("/")

    @field_validator("skip", mode="before")
    @classmethod
    def _split_skip(cls, v: Any) -> Any:
        # env vars arrive as a comma separated string
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from mdsite.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
