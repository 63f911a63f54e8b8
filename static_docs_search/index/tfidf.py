from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from .schema import DocumentChunkRecord
from .tokenizer import DEFAULT_STEMMER, tokenize, tokenizer_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TfidfMatrix:
    vocabulary: List[str]
    idf: np.ndarray          # [V]
    vectors: np.ndarray      # [N, V]
    stemmer: str = DEFAULT_STEMMER

    @property
    def signature(self) -> str:
        return tokenizer_signature(self.stemmer)


@dataclass(frozen=True, eq=False)
class SearchIndex:
    """Documents plus their vectors; never mutated once built or loaded."""

    documents: List[DocumentChunkRecord]
    matrix: TfidfMatrix
    doc_norms: np.ndarray = field(init=False, repr=False)
    term_positions: Dict[str, int] = field(init=False, repr=False)

    def __post_init__(self):
        if len(self.documents) != self.matrix.vectors.shape[0]:
            raise ValueError(
                f"{len(self.documents)} documents but {self.matrix.vectors.shape[0]} vectors"
            )
        object.__setattr__(self, "doc_norms", np.linalg.norm(self.matrix.vectors, axis=1))
        object.__setattr__(self, "term_positions", {t: i for i, t in enumerate(self.matrix.vocabulary)})

    def __len__(self) -> int:
        return len(self.documents)


def compute_idf(doc_freq: np.ndarray, n_docs: int) -> np.ndarray:
    # idf(t) = 1 + ln(N / (1 + df)); stays > 0 for every df <= N
    return 1.0 + np.log(n_docs / (1.0 + doc_freq))


def build_tfidf(texts: Sequence[str], stemmer: str = DEFAULT_STEMMER) -> TfidfMatrix:
    token_lists = [tokenize(t, stemmer) for t in texts]

    positions: Dict[str, int] = {}
    for toks in token_lists:
        for t in toks:
            positions.setdefault(t, len(positions))
    vocabulary = list(positions)

    counts = np.zeros((len(token_lists), len(vocabulary)), dtype=np.float64)
    for i, toks in enumerate(token_lists):
        for t in toks:
            counts[i, positions[t]] += 1.0

    doc_freq = (counts > 0).sum(axis=0)
    idf = compute_idf(doc_freq, len(token_lists))
    vectors = counts * idf

    logger.info("Built TF-IDF over %d chunks, vocabulary %d terms", len(token_lists), len(vocabulary))
    return TfidfMatrix(vocabulary=vocabulary, idf=idf, vectors=vectors, stemmer=stemmer)


def build_index(documents: Sequence[DocumentChunkRecord], stemmer: str = DEFAULT_STEMMER) -> SearchIndex:
    matrix = build_tfidf([d.chunk.text for d in documents], stemmer)
    return SearchIndex(documents=list(documents), matrix=matrix)
