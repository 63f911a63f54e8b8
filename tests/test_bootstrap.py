import json
from pathlib import Path

import pytest

import static_docs_search.app as app_mod
import static_docs_search.ingest.walker as walker
from static_docs_search.app import SearchEngine, build_from_content, load_or_build, query_text
from static_docs_search.errors import ContentReadError, EmptyCorpusWarning
from static_docs_search.ingest.chunker import DEFAULT_HEADING
from static_docs_search.ingest.walker import load_documents


def test_walker_tags_chunks_with_relative_paths(write_content):
    root = write_content(
        {
            "index.mdx": "# Home\nWelcome home.",
            "guide/setup.md": "Install it. Configure it.",
            "notes.txt": "Plain text is indexed too.",
            "guide/empty.md": "",
        }
    )
    docs = load_documents(root)
    assert [d.path for d in docs] == ["guide/setup.md", "index.mdx", "notes.txt"]
    assert docs[1].chunk.heading_path == ["Home"]
    assert docs[0].chunk.heading_path == [DEFAULT_HEADING]


def test_walker_skips_unreadable_and_excluded_files(write_content, monkeypatch):
    root = write_content({"a.md": "Alpha text.", "b.md": "Beta text.", "drafts/c.md": "Gamma text."})
    real_read = walker.read_document

    def flaky(path):
        if path.name == "b.md":
            raise ContentReadError(path, "Permission denied")
        return real_read(path)

    monkeypatch.setattr(walker, "read_document", flaky)
    docs = load_documents(root, exclude=["drafts/*"])
    assert [d.path for d in docs] == ["a.md"]


def test_missing_content_root_yields_nothing(tmp_path):
    assert load_documents(tmp_path / "missing") == []


def test_bootstrap_builds_then_loads(write_content, make_cfg, monkeypatch):
    write_content({"k8s.md": "Kubernetes " * 5 + "cluster.", "docker.md": "Docker images."})
    cfg = make_cfg()
    built = load_or_build(cfg)
    assert cfg.app.index_path.exists()

    def no_build(_cfg):
        raise AssertionError("should load the persisted index")

    monkeypatch.setattr(app_mod, "build_from_content", no_build)
    loaded = load_or_build(cfg)
    assert loaded.matrix.vocabulary == built.matrix.vocabulary
    assert [d.path for d in loaded.documents] == [d.path for d in built.documents]


def test_corrupt_index_is_rebuilt(write_content, make_cfg):
    write_content({"a.md": "Search engines rank documents."})
    cfg = make_cfg()
    cfg.app.index_path.parent.mkdir(parents=True)
    cfg.app.index_path.write_text("{broken", encoding="utf-8")

    idx = load_or_build(cfg)
    assert len(idx) == 1
    assert json.loads(cfg.app.index_path.read_text(encoding="utf-8"))["docs"][0]["path"] == "a.md"


def test_changed_stemmer_forces_rebuild(write_content, make_cfg):
    write_content({"a.md": "Running runners run."})
    cfg = make_cfg()
    load_or_build(cfg)
    cfg2 = cfg.model_copy(update={"index": cfg.index.model_copy(update={"stemmer": "none"})})
    idx = load_or_build(cfg2)
    assert idx.matrix.stemmer == "none"
    assert "running" in idx.matrix.vocabulary


def test_empty_corpus_warns_and_serves_nothing(write_content, make_cfg):
    write_content({})
    cfg = make_cfg()
    with pytest.warns(EmptyCorpusWarning):
        idx = build_from_content(cfg)
    assert len(idx) == 0
    assert SearchEngine(cfg, idx).search("anything") == []


def test_engine_rebuild_swaps_index(write_content, make_cfg):
    root = write_content({"a.md": "Alpha documentation."})
    engine = SearchEngine.bootstrap(make_cfg())
    old = engine.index
    (root / "b.md").write_text("Beta documentation.", encoding="utf-8")

    fresh = engine.rebuild()
    assert engine.index is fresh
    assert len(old) == 1
    assert len(fresh) == 2


def test_query_boundary_payload(write_content, make_cfg):
    write_content({"k8s.md": "# Ops\n" + "Kubernetes " * 5 + "cluster.", "docker.md": "Docker images."})
    engine = SearchEngine(make_cfg())
    out = query_text("kubernetes", engine, top_k=2)
    assert list(out) == ["results"]
    top = out["results"][0]
    assert top["doc"]["path"] == "k8s.md"
    assert top["doc"]["chunk"]["headingPath"] == ["Ops"]
    assert top["score"] > 0
    assert out["results"][1]["score"] == 0.0


def test_unreadable_index_is_rebuilt(write_content, make_cfg, monkeypatch):
    write_content({"a.md": "Search engines rank documents."})
    cfg = make_cfg()
    load_or_build(cfg)
    index_path = cfg.app.index_path
    real_read_text = Path.read_text

    def denied(self, *args, **kwargs):
        if self == index_path:
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", denied)
    idx = load_or_build(cfg)
    assert [d.path for d in idx.documents] == ["a.md"]
