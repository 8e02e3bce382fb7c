from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


# ![[path]] with optional #heading and/or |alias in either order
_WIKI_EMBED_RE = re.compile(r"!\[\[([^\]|#]+)(?:[#|][^\]]*)?\]\]")
# ![alt](path) or ![alt](path "title")
_MARKDOWN_EMBED_RE = re.compile(r"!\[[^\]]*\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)")
# [[target]] not preceded by "!"
_WIKI_LINK_RE = re.compile(r"(?<!!)\[\[([^\]]+)\]\]")

_MARKDOWN_HTTP_LINK_RE = re.compile(r"\[[^\]]*\]\((https?://[^\s)]+)(?:\s+\"[^\"]*\")?\)", re.IGNORECASE)
_BARE_URL_RE = re.compile(r"https?://[^\s)]+", re.IGNORECASE)


@dataclass(frozen=True)
class LinkMatch:
    target_path: str
    start: int
    end: int


@dataclass(frozen=True)
class UrlMatch:
    url: str
    start: int
    end: int


def find_image_links(content: str) -> list[LinkMatch]:
    """Find image embeds in both wiki and markdown dialects.

    Matches are grouped by dialect (wiki embeds first); sort by ``start``
    when position order matters.
    """
    matches: list[LinkMatch] = []
    for regex in (_WIKI_EMBED_RE, _MARKDOWN_EMBED_RE):
        for m in regex.finditer(content):
            matches.append(LinkMatch(target_path=m.group(1), start=m.start(), end=m.end()))
    return matches


def find_note_links(content: str) -> list[LinkMatch]:
    """Find ``[[note]]`` links, skipping ``![[embeds]]``.

    ``target_path`` keeps any ``#heading`` or ``|alias`` suffix.
    """
    return [
        LinkMatch(target_path=m.group(1), start=m.start(), end=m.end())
        for m in _WIKI_LINK_RE.finditer(content)
    ]


def clean_link_target(target: str) -> str:
    # Alias is removed before heading: "a#h|x" -> "a#h" -> "a"
    return target.split("|", 1)[0].split("#", 1)[0]


def unique_link_targets(matches: list[LinkMatch]) -> list[str]:
    """Cleaned link targets in first-seen order, without duplicates."""
    seen: dict[str, None] = {}
    for match in matches:
        cleaned = clean_link_target(match.target_path).strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def find_http_links(content: str) -> list[UrlMatch]:
    """Markdown links to http(s) URLs first, then bare URLs."""
    matches: list[UrlMatch] = []
    for m in _MARKDOWN_HTTP_LINK_RE.finditer(content):
        matches.append(UrlMatch(url=m.group(1), start=m.start(), end=m.end()))
    for m in _BARE_URL_RE.finditer(content):
        matches.append(UrlMatch(url=m.group(0), start=m.start(), end=m.end()))
    return matches


def find_http_link(content: str, preferred_url: Optional[str] = None) -> Optional[UrlMatch]:
    matches = find_http_links(content)
    if not matches:
        return None
    if preferred_url:
        for match in matches:
            if match.url == preferred_url:
                return match
    return matches[0]


def extract_url_from_selection(selection: str) -> Optional[str]:
    if not selection:
        return None
    m = _MARKDOWN_HTTP_LINK_RE.search(selection)
    if m:
        return m.group(1)
    m = _BARE_URL_RE.search(selection)
    return m.group(0) if m else None


def find_line_end_index(content: str, start: int) -> int:
    """Index of the character after the newline ending the line at ``start``."""
    line_end = content.find("\n", start)
    return len(content) if line_end == -1 else line_end + 1
