from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, List

from ..errors import ContentReadError
from ..index.schema import DocumentChunkRecord
from .chunker import DEFAULT_HEADING, chunk_text

logger = logging.getLogger(__name__)


def read_document(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        raise ContentReadError(path, e.strerror or e.__class__.__name__) from e


def _excluded(rel: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(rel, p) for p in patterns)


def load_documents(
    content_root: Path,
    max_words: int = 120,
    overlap_words: int = 30,
    default_heading: str = DEFAULT_HEADING,
    exclude: Iterable[str] = (),
) -> List[DocumentChunkRecord]:
    """Walk `content_root` recursively and chunk every regular file."""
    root = Path(content_root).resolve()
    patterns = list(exclude)
    docs: List[DocumentChunkRecord] = []
    if not root.is_dir():
        logger.warning("Content root %s is not a directory", root)
        return docs

    n_files = 0
    for f in sorted(root.rglob("*")):
        if not f.is_file():
            continue
        rel = f.relative_to(root).as_posix()
        if _excluded(rel, patterns):
            logger.debug("Excluded %s", rel)
            continue
        try:
            content = read_document(f)
        except ContentReadError as e:
            logger.warning("Skipping unreadable file %s: %s", rel, e.reason)
            continue
        n_files += 1
        for chunk in chunk_text(content, max_words, overlap_words, default_heading):
            docs.append(DocumentChunkRecord(path=rel, chunk=chunk))

    logger.info("Read %d files under %s -> %d chunks", n_files, root, len(docs))
    return docs
