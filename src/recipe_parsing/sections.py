from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+", re.MULTILINE)


@dataclass(frozen=True)
class SectionSpan:
    heading_level: int
    start: int
    end: int


def _section_heading_re(heading_text: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(#{{1,6}})[ \t]*{re.escape(heading_text)}\b[^\n]*$",
        re.IGNORECASE | re.MULTILINE,
    )


def locate_section(content: str, heading_text: str) -> Optional[SectionSpan]:
    """Find the first section whose heading starts with ``heading_text``.

    The span runs from the start of the heading line to the next heading of
    the same or shallower level, or to the end of the document. Deeper
    headings belong to the section.
    """
    m = _section_heading_re(heading_text).search(content)
    if not m:
        return None

    level = len(m.group(1))
    end = len(content)
    for nxt in _HEADING_RE.finditer(content, m.end()):
        if len(nxt.group(1)) <= level:
            end = nxt.start()
            break
    return SectionSpan(heading_level=level, start=m.start(), end=end)


def section_text(content: str, span: SectionSpan) -> str:
    return content[span.start : span.end]


def replace_section(content: str, span: SectionSpan, new_section: str) -> str:
    """Swap the text of ``span`` for ``new_section`` (trimmed).

    Everything before ``span.start`` and from ``span.end`` on is kept
    byte-for-byte. A newline is added after the new text unless the
    trailing content already starts with one; a document that ended at the
    span gets a single closing newline.
    """
    replacement = new_section.strip()
    trailing = content[span.end :]
    if trailing == "":
        separator = "\n"
    elif trailing.startswith("\n"):
        separator = ""
    else:
        separator = "\n"
    return content[: span.start] + replacement + separator + trailing


def insert_at(content: str, offset: int, text: str) -> str:
    return content[:offset] + text + content[offset:]

