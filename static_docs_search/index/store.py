from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np
from pydantic import ValidationError

from ..errors import IndexNotFound, IndexParseError, IndexVersionMismatch
from .schema import PersistedIndex
from .tfidf import SearchIndex, TfidfMatrix
from .tokenizer import DEFAULT_STEMMER, stemmer_from_signature

logger = logging.getLogger(__name__)


def save_index(path: Path, index: SearchIndex) -> Path:
    """Write `{docs, vocabulary, idf, tfidf, tokenizer}` atomically to `path`."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    m = index.matrix
    data = {
        "docs": [d.to_json_dict() for d in index.documents],
        "vocabulary": m.vocabulary,
        "idf": m.idf.tolist(),
        "tfidf": m.vectors.tolist(),
        "tokenizer": m.signature,
    }
    fd, tmp = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    logger.info("Saved index (%d docs, %d terms) to %s", len(index), len(m.vocabulary), path)
    return path


def load_index(path: Path, expected_stemmer: Optional[str] = None) -> SearchIndex:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise IndexNotFound(path, "No persisted index") from e
    except UnicodeDecodeError as e:
        raise IndexParseError(path, "Index is not UTF-8 text") from e
    except OSError as e:
        raise IndexNotFound(path, f"Cannot read persisted index ({e.strerror or e.__class__.__name__})") from e

    try:
        persisted = PersistedIndex.model_validate_json(raw)
    except ValidationError as e:
        raise IndexParseError(path, f"Malformed index ({e.error_count()} errors)") from e

    stemmer = DEFAULT_STEMMER
    if persisted.tokenizer is not None:
        try:
            stemmer = stemmer_from_signature(persisted.tokenizer)
        except ValueError as e:
            raise IndexVersionMismatch(path, str(e)) from e
    if expected_stemmer is not None and stemmer != expected_stemmer:
        raise IndexVersionMismatch(
            path, f"Index built with stemmer {stemmer!r}, configured {expected_stemmer!r}"
        )

    dim = len(persisted.vocabulary)
    vectors = np.asarray(persisted.tfidf, dtype=np.float64).reshape(len(persisted.docs), dim)
    matrix = TfidfMatrix(
        vocabulary=persisted.vocabulary,
        idf=np.asarray(persisted.idf, dtype=np.float64),
        vectors=vectors,
        stemmer=stemmer,
    )
    logger.info("Loaded index (%d docs, %d terms) from %s", len(persisted.docs), dim, path)
    return SearchIndex(documents=persisted.docs, matrix=matrix)
