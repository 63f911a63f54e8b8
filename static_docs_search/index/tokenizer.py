"""
Term normalization shared by index build and query time.

Both paths must call `tokenize` with the same stemmer; the persisted index
records `tokenizer_signature(stemmer)` so a query always uses the stemmer the
vocabulary was built with.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, List

from nltk.stem import LancasterStemmer, PorterStemmer, SnowballStemmer

TOKENIZER_VERSION = 1
STEMMERS = ("porter", "snowball", "lancaster", "none")
DEFAULT_STEMMER = "porter"

_WORD_RE = re.compile(r"\w+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


@lru_cache(maxsize=None)
def get_stemmer(name: str = DEFAULT_STEMMER) -> Callable[[str], str]:
    if name == "porter":
        return PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM).stem
    if name == "snowball":
        return SnowballStemmer("english").stem
    if name == "lancaster":
        return LancasterStemmer().stem
    if name == "none":
        return lambda t: t
    raise ValueError(f"Unknown stemmer {name!r}; expected one of {', '.join(STEMMERS)}")


def tokenizer_signature(stemmer: str = DEFAULT_STEMMER) -> str:
    get_stemmer(stemmer)
    return f"v{TOKENIZER_VERSION}:{stemmer}"


def stemmer_from_signature(signature: str) -> str:
    version, _, stemmer = signature.partition(":")
    if version != f"v{TOKENIZER_VERSION}" or stemmer not in STEMMERS:
        raise ValueError(f"Unsupported tokenizer signature {signature!r}")
    return stemmer


def tokenize(text: str, stemmer: str = DEFAULT_STEMMER) -> List[str]:
    stem = get_stemmer(stemmer)
    out: List[str] = []
    for raw in _WORD_RE.findall((text or "").lower()):
        tok = _NON_ALNUM_RE.sub("", raw)
        if len(tok) <= 2:
            continue
        out.append(stem(tok))
    return out
