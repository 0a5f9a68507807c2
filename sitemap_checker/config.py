# === FILE: sitemap_checker/config.py ===
"""
Loading and validation of the SitemapChecker configuration.
Pydantic describes the schema, YAML or JSON files provide the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
    model_validator,
)


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of *url*, without path or trailing slash."""
    parts = urlsplit(str(url))
    return f"{parts.scheme}://{parts.netloc}"


class CheckerConfig(BaseModel):
    """Settings for comparing one source site against one target site."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    source_url: HttpUrl = Field(..., description="Origin of the old site.")
    target_url: HttpUrl = Field(..., description="Origin of the new site.")
    sitemap_index_url: Optional[HttpUrl] = Field(
        None, description="Sitemap index of the old site (default <source>/sitemap_index.xml)."
    )
    target_sitemap_url: Optional[HttpUrl] = Field(
        None, description="Sitemap of the new site (default <target>/sitemap.xml)."
    )
    excluded_sitemaps: List[str] = Field(
        default_factory=lambda: ["local-sitemap.xml"],
        description="Sitemap locations containing any of these markers are skipped.",
    )
    timeout: float = Field(120.0, gt=0, description="Timeout of one request (seconds).")
    max_redirects: int = Field(10, ge=0, description="Redirect hops followed before giving up.")
    user_agent: str = Field("SitemapChecker/1.0", min_length=1, description="User-Agent header.")
    detect_content_changes: bool = Field(
        True, description="Report same-location pages with different titles separately."
    )
    cache_dir: str = Field("cache", min_length=1, description="Directory of the file cache.")
    storage_url: Optional[str] = Field(
        None, description="fsspec URL of a remote cache location; overrides cache_dir."
    )

    @field_validator("source_url", "target_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @model_validator(mode="after")
    def _check_distinct_sites(self) -> CheckerConfig:
        if self.source_origin == self.target_origin:
            raise ValueError("source_url and target_url must point to different sites")
        return self

    @property
    def source_origin(self) -> str:
        return origin_of(str(self.source_url))

    @property
    def target_origin(self) -> str:
        return origin_of(str(self.target_url))

    @property
    def index_url(self) -> str:
        if self.sitemap_index_url is not None:
            return str(self.sitemap_index_url)
        return f"{self.source_origin}/sitemap_index.xml"

    @property
    def target_index_url(self) -> str:
        if self.target_sitemap_url is not None:
            return str(self.target_sitemap_url)
        return f"{self.target_origin}/sitemap.xml"

    @property
    def root_page_url(self) -> str:
        return f"{self.source_origin}/"


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CheckerConfig:
    """
    Read YAML or JSON and return a validated CheckerConfig.
    A missing config file raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    try:
        return CheckerConfig(**data)
    except ValidationError:
        raise


__all__ = ["CheckerConfig", "load_config", "origin_of"]
