from __future__ import annotations

import logging
import re
from typing import Optional, Protocol

from .links import clean_link_target, find_note_links, unique_link_targets
from .vault import VaultFile

logger = logging.getLogger(__name__)

_EXTERNAL_RE = re.compile(r"^https?://", re.IGNORECASE)


class LinkLookup(Protocol):
    def resolve_link_path(self, linkpath: str, source_path: str) -> Optional[VaultFile]:
        ...


def resolve_link_target(raw_target: str, source_path: str, lookup: LinkLookup) -> Optional[VaultFile]:
    """Resolve a raw link target to a vault file.

    External URLs, data URIs and blank targets never reach the lookup.
    """
    trimmed = raw_target.strip()
    if not trimmed or _EXTERNAL_RE.match(trimmed) or trimmed.startswith("data:"):
        return None

    cleaned = clean_link_target(trimmed)
    destination = lookup.resolve_link_path(cleaned, source_path)
    return destination if isinstance(destination, VaultFile) else None


def resolve_linked_notes(content: str, source_path: str, lookup: LinkLookup) -> list[VaultFile]:
    """Markdown notes linked from ``content``, one per distinct target.

    Unresolved links and non-markdown destinations are dropped.
    """
    files: list[VaultFile] = []
    for target in unique_link_targets(find_note_links(content)):
        destination = resolve_link_target(target, source_path, lookup)
        if destination is None:
            logger.warning(f"Unresolved note link: {target}")
            continue
        if destination.extension != "md":
            logger.debug(f"Skipping non-markdown link target: {destination.path}")
            continue
        files.append(destination)
    return files
