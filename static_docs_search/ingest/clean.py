import re

from .headings import front_matter_end

FENCED_CODE_RE = re.compile(r"^[ \t]*(```|~~~).*?^[ \t]*\1[^\n]*$", re.M | re.S)
UNCLOSED_FENCE_RE = re.compile(r"^[ \t]*(```|~~~).*\Z", re.M | re.S)
INLINE_CODE_RE = re.compile(r"`[^`\n]*`")
MDX_ESM_RE = re.compile(r"^(import|export)\s.*$", re.M)
SETEXT_RULE_RE = re.compile(r"^[ \t]*=+[ \t]*$", re.M)
TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>|<!--.*?-->", re.S)
EMPHASIS_RES = [
    re.compile(r"\*\*(.+?)\*\*", re.S),
    re.compile(r"__(.+?)__", re.S),
    re.compile(r"~~(.+?)~~", re.S),
    re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])"),
    re.compile(r"(?<![\w_])_(?!\s)(.+?)(?<!\s)_(?![\w_])"),
]
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
MD_PUNCT_RE = re.compile(r"[#`*_|>~\[\]\(\)\{\}]|(?<!\w)-+|-+(?!\w)")


def strip_markup(s: str) -> str:
    if not s:
        return ""
    # Normalize Windows line endings
    s = s.replace("\r\n", "\n").replace("\r", "\n")
    lines = s.split("\n")
    s = "\n".join(lines[front_matter_end(lines):])

    s = FENCED_CODE_RE.sub(" ", s)
    s = UNCLOSED_FENCE_RE.sub(" ", s)
    s = INLINE_CODE_RE.sub(" ", s)
    s = MDX_ESM_RE.sub(" ", s)
    s = SETEXT_RULE_RE.sub(" ", s)
    s = TAG_RE.sub(" ", s)
    for rx in EMPHASIS_RES:
        s = rx.sub(r"\1", s)
    s = IMAGE_RE.sub(r"\1", s)
    s = LINK_RE.sub(r"\1", s)
    s = MD_PUNCT_RE.sub("", s)
    return re.sub(r"\s+", " ", s).strip()
