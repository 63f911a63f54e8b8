from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional

import numpy as np

from ..index.schema import SearchHit
from ..index.tfidf import SearchIndex
from ..index.tokenizer import tokenize

logger = logging.getLogger(__name__)


def vectorize_query(query: str, index: SearchIndex) -> np.ndarray:
    """Query weights over the persisted vocabulary: (count / total tokens) * idf."""
    m = index.matrix
    qv = np.zeros(len(m.vocabulary), dtype=np.float64)
    tokens = tokenize(query, m.stemmer)
    if not tokens:
        return qv
    for term, c in Counter(tokens).items():
        i = index.term_positions.get(term)
        if i is not None:
            qv[i] = c / len(tokens) * m.idf[i]
    return qv


def cosine_scores(qv: np.ndarray, index: SearchIndex) -> np.ndarray:
    """Cosine similarity of `qv` against every document; 0 where a norm is 0."""
    n_docs = len(index)
    if n_docs == 0:
        return np.zeros(0)
    q_norm = float(np.linalg.norm(qv))
    if q_norm == 0.0:
        return np.zeros(n_docs)
    dots = index.matrix.vectors @ qv
    denom = index.doc_norms * q_norm
    sims = np.divide(dots, denom, out=np.zeros(n_docs), where=denom > 0)
    return np.clip(sims, 0.0, 1.0)


def search(
    query: str,
    index: SearchIndex,
    top_k: int = 5,
    min_score: Optional[float] = None,
) -> List[SearchHit]:
    if top_k <= 0 or len(index) == 0:
        return []
    sims = cosine_scores(vectorize_query(query, index), index)
    order = np.argsort(-sims, kind="stable")
    hits: List[SearchHit] = []
    for i in order:
        s = float(sims[i])
        if min_score is not None and s < min_score:
            continue
        hits.append(SearchHit(doc=index.documents[i], score=s))
        if len(hits) >= top_k:
            break
    logger.debug("Query %r -> %d hits", query, len(hits))
    return hits
