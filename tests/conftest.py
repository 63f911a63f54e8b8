import sys
from pathlib import Path

import pytest

# Repo root = one level above tests/
REPO_ROOT = Path(__file__).resolve().parents[1]

# Ensure repo root is on sys.path so `cli` and `web.app` import without install.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from static_docs_search.config import SearchConfig  # noqa: E402


@pytest.fixture
def write_content(tmp_path: Path):
    """Create files under tmp_path/content from a {relative_path: text} mapping."""
    root = tmp_path / "content"
    root.mkdir()

    def _write(files: dict) -> Path:
        for rel, text in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def make_cfg(tmp_path: Path):
    def _make(**ingest) -> SearchConfig:
        return SearchConfig.model_validate(
            {
                "app": {
                    "content_root": str(tmp_path / "content"),
                    "index_path": str(tmp_path / "static" / "static_data.json"),
                },
                "ingest": ingest,
            }
        )

    return _make
