from static_docs_search.ingest.clean import strip_markup


def test_removes_fenced_and_inline_code():
    text = "Before.\n```python\nx = 1\n```\nRun `pip install` now."
    assert strip_markup(text) == "Before. Run now."


def test_removes_tags_and_mdx_statements():
    text = "import Note from './note'\n\n<Note type=\"warn\">Be careful.</Note>"
    assert strip_markup(text) == "Be careful."


def test_emphasis_links_and_images_keep_inner_text():
    text = "This is **bold** and _it_ and ~~gone~~. See [the docs](https://x.io/a_b_c) and ![logo](a.png)."
    assert strip_markup(text) == "This is bold and it and gone. See the docs and logo."


def test_markdown_punctuation_and_whitespace():
    text = "# Intro\nA well-known fact.\n\n- item one\n> quoted\n\nTitle\n====="
    assert strip_markup(text) == "Intro A well-known fact. item one quoted Title"


def test_front_matter_dropped():
    assert strip_markup("---\ntitle: X\n---\nHello there.") == "Hello there."


def test_empty_input():
    assert strip_markup("") == ""
    assert strip_markup("```\nonly code\n```") == ""
