"""Run configuration: settings defaults, YAML file, environment, CLI flags."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from blockport import settings

# Environment variable -> config field
_ENV_OVERRIDES: dict[str, str] = {
    "BLOCKPORT_CONTENT_DIR": "content_dir",
    "BLOCKPORT_CATALOG": "catalog_path",
    "BLOCKPORT_REPORT": "report_path",
    "BLOCKPORT_DELAY": "delay",
}


class MigrationConfig(BaseModel):
    """Effective settings for one importer run."""

    model_config = ConfigDict(extra="forbid")

    content_dir: Path = Path(settings.CONTENT_DIR)
    catalog_path: Path = Path(settings.CATALOG_PATH)
    report_path: Path = Path(settings.REPORT_PATH)
    delay: float = Field(default=settings.DOWNLOAD_DELAY, ge=0)
    timeout: float = Field(default=settings.DOWNLOAD_TIMEOUT, gt=0)
    max_redirects: int = Field(default=settings.MAX_REDIRECTS, ge=0)
    user_agent: str = settings.USER_AGENT
    min_markdown_length: int = Field(default=settings.MIN_MARKDOWN_LENGTH, ge=0)
    fallback_template: str = settings.FALLBACK_TEMPLATE

    @field_validator("user_agent", "fallback_template", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


def load_config(
    path: str | Path | None = None,
    *,
    environ: dict[str, str] | None = None,
    **overrides: Any,
) -> MigrationConfig:
    """Build a :class:`MigrationConfig`.

    Precedence, lowest first: :mod:`blockport.settings`, the YAML file at
    *path*, ``BLOCKPORT_*`` environment variables, then *overrides* whose
    value is not ``None`` (CLI flags).

    Raises:
        ValueError: unknown keys or invalid values
            (``pydantic.ValidationError`` is a ``ValueError``).
        yaml.YAMLError: the config file is not valid YAML.
        OSError: the config file cannot be read.
    """
    data: dict[str, Any] = {}
    if path is not None:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        data.update(raw)

    env = os.environ if environ is None else environ
    for var, field_name in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            data[field_name] = value

    data.update({k: v for k, v in overrides.items() if v is not None})
    return MigrationConfig(**data)
