"""Content cleanup before text is sent to an LLM."""

import re

_WIKI_EMBED_RE = re.compile(r"!\[\[[^\]]+\]\]")
_MARKDOWN_EMBED_RE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
_HTML_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)

_HTML_NOISE_RES = [
    re.compile(rf"<{tag}[\s\S]*?</{tag}>", re.IGNORECASE)
    for tag in ("script", "style", "noscript", "svg")
]

MAX_HTML_CHARS = 120000


def strip_image_embeds(content: str) -> str:
    """Remove wiki embeds, markdown images and HTML <img> tags.

    Matched spans are deleted outright; surrounding text is joined as-is.
    Passes repeat until nothing changes, since joining text can form a new
    embed (``!![[a]][[b]]``).
    """
    while True:
        stripped = _WIKI_EMBED_RE.sub("", content)
        stripped = _MARKDOWN_EMBED_RE.sub("", stripped)
        stripped = _HTML_IMG_RE.sub("", stripped)
        if stripped == content:
            return stripped
        content = stripped


def sanitize_html_for_llm(html: str) -> str:
    """Drop script, style, noscript and svg elements from fetched HTML."""
    for regex in _HTML_NOISE_RES:
        html = regex.sub("", html)
    return html


def truncate_for_llm(content: str, max_chars: int = MAX_HTML_CHARS) -> tuple[str, bool]:
    """Cut content to ``max_chars``.

    Returns:
        Tuple of (text, truncated)
    """
    if len(content) <= max_chars:
        return content, False
    return content[:max_chars], True
