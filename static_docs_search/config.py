from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .ingest.chunker import DEFAULT_HEADING

logger = logging.getLogger(__name__)


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class AppSection(_Section):
    content_root: Path = Path("content")
    index_path: Path = Path("static/static_data.json")


class IngestSection(_Section):
    max_words: int = Field(default=120, ge=1)
    overlap_words: int = Field(default=30, ge=0)
    default_heading: str = Field(default=DEFAULT_HEADING, min_length=1)
    exclude: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _warn_degenerate_overlap(self) -> "IngestSection":
        if self.overlap_words > self.max_words:
            logger.warning(
                "overlap_words (%d) exceeds max_words (%d); every chunk will repeat its predecessor",
                self.overlap_words,
                self.max_words,
            )
        return self


class IndexSection(_Section):
    stemmer: Literal["porter", "snowball", "lancaster", "none"] = "porter"


class RetrievalSection(_Section):
    top_k: int = Field(default=5, ge=1)
    min_score: Optional[float] = None


class SearchConfig(_Section):
    """One config per site/theme; themes differ only in these values."""

    app: AppSection = Field(default_factory=AppSection)
    ingest: IngestSection = Field(default_factory=IngestSection)
    index: IndexSection = Field(default_factory=IndexSection)
    retrieval: RetrievalSection = Field(default_factory=RetrievalSection)


def load_config(path: str | Path | None = None) -> SearchConfig:
    if path is None or not Path(path).exists():
        if path is not None:
            logger.info("Config %s not found; using defaults", path)
        return SearchConfig()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return SearchConfig.model_validate(data)


def with_paths(
    cfg: SearchConfig,
    content_root: str | Path | None = None,
    index_path: str | Path | None = None,
) -> SearchConfig:
    """Copy of `cfg` with the content root / index path overridden by the caller."""
    update = {}
    if content_root is not None:
        update["content_root"] = Path(content_root)
    if index_path is not None:
        update["index_path"] = Path(index_path)
    if not update:
        return cfg
    return cfg.model_copy(update={"app": cfg.app.model_copy(update=update)})
