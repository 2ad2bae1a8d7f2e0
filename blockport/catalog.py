"""URL catalog: named batches of source URLs, each bound to one template.

File shape::

    {
      "alreadyMigrated": ["https://www.example.com/about/"],
      "batches": {
        "3a-blog": {"template": "blog-article", "urls": ["https://..."]}
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from blockport.errors import CatalogError
from blockport.templates.common import TemplateId

logger = logging.getLogger(__name__)


class Batch(BaseModel):
    template: TemplateId
    urls: list[str] = Field(default_factory=list)

    @field_validator("urls")
    @classmethod
    def strip_urls(cls, v: list[str]) -> list[str]:
        return [u.strip() for u in v if u and u.strip()]


class Catalog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    already_migrated: list[str] = Field(default_factory=list, alias="alreadyMigrated")
    batches: dict[str, Batch] = Field(default_factory=dict)

    def template_for(self, url: str) -> TemplateId | None:
        """Template of the first batch (in file order) that lists *url*."""
        for batch in self.batches.values():
            if url in batch.urls:
                return batch.template
        return None

    def pending_urls(self, batch: Batch) -> list[str]:
        migrated = set(self.already_migrated)
        return [u for u in batch.urls if u not in migrated]


def load_catalog(path: str | Path) -> Catalog:
    """Read and validate the catalog at *path*.

    Raises:
        CatalogError: file missing or unreadable, invalid JSON, wrong shape,
            or a batch bound to an unknown template.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Cannot read catalog {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog {path} is not valid JSON: {exc}") from exc

    try:
        catalog = Catalog.model_validate(data)
    except ValidationError as exc:
        raise CatalogError(f"Catalog {path} is malformed: {exc}") from exc

    logger.debug(
        "Loaded catalog %s: %d batches, %d already migrated",
        path, len(catalog.batches), len(catalog.already_migrated),
    )
    return catalog
