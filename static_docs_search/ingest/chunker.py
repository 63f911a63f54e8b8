from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from nltk.tokenize.punkt import PunktSentenceTokenizer

from ..index.schema import Chunk, HeadingInfo
from .clean import strip_markup
from .headings import extract_headings, resolve_heading_path

logger = logging.getLogger(__name__)

DEFAULT_HEADING = "Introduction"


@lru_cache(maxsize=1)
def _sentence_tokenizer() -> PunktSentenceTokenizer:
    # Untrained Punkt: splits on terminal punctuation, needs no downloaded data
    return PunktSentenceTokenizer()


def split_sentences(text: str) -> List[str]:
    if not text.strip():
        return []
    return [s.strip() for s in _sentence_tokenizer().tokenize(text) if s.strip()]


def _estimate_line(sentence_idx: int, total_sentences: int, total_lines: int) -> int:
    return int(sentence_idx / total_sentences * total_lines) + 1


def chunk_text(
    content: str,
    max_words: int = 120,
    overlap_words: int = 30,
    default_heading: str = DEFAULT_HEADING,
) -> List[Chunk]:
    """
    Split a raw document into word-bounded, heading-tagged chunks.

    Headings are read from the raw text so line numbers refer to the source
    file; sentences come from the cleaned prose. Each closed chunk seeds the
    next one with its last `overlap_words` words.
    """
    headings: List[HeadingInfo] = extract_headings(content)
    sentences = split_sentences(strip_markup(content))
    if not sentences:
        return []

    total_sentences = len(sentences)
    total_lines = max(1, len(content.replace("\r\n", "\n").replace("\r", "\n").split("\n")))
    chunks: List[Chunk] = []

    def close(buf: List[str], first: int, last: int) -> Chunk:
        start = _estimate_line(first, total_sentences, total_lines)
        end = min(total_lines, max(start, int((last + 1) / total_sentences * total_lines)))
        return Chunk(
            text=" ".join(buf),
            heading_path=resolve_heading_path(headings, start, default_heading),
            start_line=start,
            end_line=end,
            sentence_start=first,
            sentence_end=last,
        )

    buf: List[str] = []
    word_count = 0
    first = None
    last = None
    for i, sentence in enumerate(sentences):
        n = len(sentence.split())
        if n == 0:
            continue
        if first is not None and word_count + n > max_words:
            chunk = close(buf, first, last)
            chunks.append(chunk)
            tail = chunk.text.split()[-overlap_words:] if overlap_words > 0 else []
            buf = [" ".join(tail)] if tail else []
            word_count = len(tail)
            first = None
        buf.append(sentence)
        word_count += n
        if first is None:
            first = i
        last = i

    if first is not None:
        chunks.append(close(buf, first, last))

    logger.debug("Chunked %d sentences into %d chunks", total_sentences, len(chunks))
    return chunks
