from __future__ import annotations

import logging
import threading
import time
import warnings
from typing import List, Optional

from .config import SearchConfig
from .errors import EmptyCorpusWarning, IndexStoreError
from .index.schema import SearchHit
from .index.store import load_index, save_index
from .index.tfidf import SearchIndex, build_index
from .ingest.walker import load_documents
from .retrieve.query import search

logger = logging.getLogger(__name__)


def build_from_content(cfg: SearchConfig) -> SearchIndex:
    """Walk the content root, chunk, vectorize and persist a fresh index."""
    t0 = time.perf_counter()
    docs = load_documents(
        cfg.app.content_root,
        max_words=cfg.ingest.max_words,
        overlap_words=cfg.ingest.overlap_words,
        default_heading=cfg.ingest.default_heading,
        exclude=cfg.ingest.exclude,
    )
    if not docs:
        msg = f"No chunks produced from {cfg.app.content_root}; queries will return nothing"
        logger.warning(msg)
        warnings.warn(msg, EmptyCorpusWarning, stacklevel=2)
    index = build_index(docs, stemmer=cfg.index.stemmer)
    save_index(cfg.app.index_path, index)
    logger.info("Index build finished in %d ms", int((time.perf_counter() - t0) * 1000))
    return index


def load_or_build(cfg: SearchConfig) -> SearchIndex:
    try:
        return load_index(cfg.app.index_path, expected_stemmer=cfg.index.stemmer)
    except IndexStoreError as e:
        logger.info("Rebuilding index: %s", e)
    return build_from_content(cfg)


class SearchEngine:
    """
    Holds the active index. Queries read `self.index` without locking; a
    rebuild constructs a new SearchIndex and swaps the reference in one
    assignment, so in-flight queries keep the index they started with.
    """

    def __init__(self, cfg: SearchConfig, index: Optional[SearchIndex] = None):
        self.cfg = cfg
        self._index = index
        self._build_lock = threading.Lock()

    @classmethod
    def bootstrap(cls, cfg: SearchConfig) -> "SearchEngine":
        return cls(cfg, load_or_build(cfg))

    @property
    def index(self) -> SearchIndex:
        if self._index is None:
            with self._build_lock:
                if self._index is None:
                    self._index = load_or_build(self.cfg)
        return self._index

    def rebuild(self) -> SearchIndex:
        with self._build_lock:
            fresh = build_from_content(self.cfg)
            self._index = fresh
        return fresh

    def search(self, query: str, top_k: Optional[int] = None) -> List[SearchHit]:
        k = self.cfg.retrieval.top_k if top_k is None else top_k
        return search(query, self.index, top_k=k, min_score=self.cfg.retrieval.min_score)


def query_text(question: str, engine: SearchEngine, top_k: Optional[int] = None) -> dict:
    """JSON boundary used by the HTTP route: `{"results": [{"doc", "score"}]}`."""
    hits = engine.search(question, top_k=top_k)
    return {"results": [h.to_json_dict() for h in hits]}
