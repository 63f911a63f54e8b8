import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from static_docs_search.config import SearchConfig, load_config, with_paths


def test_defaults_when_file_missing(tmp_path):
    cfg = load_config(tmp_path / "nope.yaml")
    assert cfg.ingest.max_words == 120
    assert cfg.ingest.overlap_words == 30
    assert cfg.index.stemmer == "porter"
    assert cfg.app.index_path == Path("static/static_data.json")


def test_yaml_overrides(tmp_path):
    p = tmp_path / "theme.yaml"
    p.write_text(
        "app:\n  content_root: docs\ningest:\n  max_words: 10\nretrieval:\n  top_k: 3\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.app.content_root == Path("docs")
    assert cfg.ingest.max_words == 10
    assert cfg.retrieval.top_k == 3


def test_rejects_unknown_keys_and_bad_values():
    with pytest.raises(ValidationError):
        SearchConfig.model_validate({"ingest": {"max_wrods": 10}})
    with pytest.raises(ValidationError):
        SearchConfig.model_validate({"ingest": {"max_words": 0}})
    with pytest.raises(ValidationError):
        SearchConfig.model_validate({"index": {"stemmer": "klingon"}})


def test_overlap_above_max_only_warns(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = SearchConfig.model_validate({"ingest": {"max_words": 10, "overlap_words": 30}})
    assert cfg.ingest.overlap_words == 30
    assert "exceeds max_words" in caplog.text


def test_with_paths_overrides_only_given_values():
    cfg = SearchConfig()
    out = with_paths(cfg, index_path="x/idx.json")
    assert out.app.index_path == Path("x/idx.json")
    assert out.app.content_root == cfg.app.content_root
    assert with_paths(cfg) is cfg
