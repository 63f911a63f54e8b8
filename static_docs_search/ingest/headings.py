from __future__ import annotations

import re
from typing import List

from ..index.schema import HeadingInfo

ATX_RE = re.compile(r"^(#{1,6})\s+(.+)$")
FENCE_RE = re.compile(r"^\s*(```|~~~)")
SETEXT_H1_RE = re.compile(r"^=+\s*$")
SETEXT_H2_RE = re.compile(r"^-+\s*$")


def front_matter_end(lines: List[str]) -> int:
    """Number of leading lines taken by a YAML front matter block (0 if none)."""
    if not lines or lines[0].strip() != "---":
        return 0
    for i in range(1, len(lines)):
        if lines[i].strip() in ("---", "..."):
            return i + 1
    return 0


def extract_headings(text: str) -> List[HeadingInfo]:
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    headings: List[HeadingInfo] = []
    in_fence = False

    i = front_matter_end(lines)
    while i < len(lines):
        ln = lines[i]
        if FENCE_RE.match(ln):
            in_fence = not in_fence
            i += 1
            continue
        if in_fence:
            i += 1
            continue

        m = ATX_RE.match(ln)
        if m:
            # drop an optional closing run of '#'
            title = re.sub(r"\s+#+\s*$", "", m.group(2)).strip()
            if title:
                headings.append(HeadingInfo(level=len(m.group(1)), text=title, line=i + 1))
            i += 1
            continue

        if ln.strip() and i + 1 < len(lines):
            nxt = lines[i + 1]
            level = 1 if SETEXT_H1_RE.match(nxt) else 2 if SETEXT_H2_RE.match(nxt) else 0
            if level:
                headings.append(HeadingInfo(level=level, text=ln.strip(), line=i + 1))
                i += 2
                continue
        i += 1
    return headings


def resolve_heading_path(headings: List[HeadingInfo], line: int, default: str) -> List[str]:
    """Innermost enclosing heading chain for `line`, outermost first."""
    stack: List[HeadingInfo] = []
    for h in headings:
        if h.line > line:
            break
        while stack and stack[-1].level >= h.level:
            stack.pop()
        stack.append(h)
    return [h.text for h in stack] or [default]
