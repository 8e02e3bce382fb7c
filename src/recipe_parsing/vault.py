"""Filesystem vault access for recipe parsing.

Provides the file read/write and link lookup collaborators used by the
workflows. Paths handed in and out are vault-relative and slash-separated.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional


@dataclass(frozen=True)
class VaultFile:
    """A concrete file inside the vault."""

    path: str

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".").lower()

    @property
    def parent(self) -> str:
        parent = PurePosixPath(self.path).parent.as_posix()
        return "" if parent == "." else parent


def _is_hidden(rel: PurePosixPath) -> bool:
    return any(part.startswith(".") for part in rel.parts)


class Vault:
    """A directory of markdown notes and attachments."""

    def __init__(self, root: Path):
        """Initialize vault access.

        Args:
            root: Vault root directory
        """
        self.root = Path(root)

    def _abs(self, file: VaultFile) -> Path:
        return self.root / PurePosixPath(file.path)

    def get_file(self, path: str) -> Optional[VaultFile]:
        """Return the file at a vault-relative path, or None if it does not exist."""
        normalized = posixpath.normpath(path.replace("\\", "/")).lstrip("/")
        if normalized in ("", ".") or normalized.startswith("../"):
            return None
        candidate = self.root / PurePosixPath(normalized)
        if candidate.is_file():
            return VaultFile(path=normalized)
        return None

    def iter_files(self) -> list[VaultFile]:
        """All files in the vault, skipping dot-directories, in path order."""
        files: list[VaultFile] = []
        for p in self.root.rglob("*"):
            if not p.is_file():
                continue
            rel = PurePosixPath(p.relative_to(self.root).as_posix())
            if _is_hidden(rel):
                continue
            files.append(VaultFile(path=rel.as_posix()))
        files.sort(key=lambda f: f.path)
        return files

    def read(self, file: VaultFile) -> str:
        return self._abs(file).read_text(encoding="utf-8")

    def read_binary(self, file: VaultFile) -> bytes:
        return self._abs(file).read_bytes()

    def write(self, file: VaultFile, content: str) -> None:
        """Overwrite the full content of a file."""
        target = self._abs(file)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def resolve_link_path(self, linkpath: str, source_path: str) -> Optional[VaultFile]:
        """Resolve a cleaned link target the way Obsidian does for wiki links.

        The link is tried as written, then with ``.md`` appended, so a note
        name containing dots (``Mr. Smith pie``) still finds its markdown
        file. Each attempt checks, in order:

        1. Relative links (``./`` or ``../``) against the source note's folder
        2. Exact vault-relative path
        3. Any file whose path ends with the link, preferring the source
           note's folder, then the shortest path

        Args:
            linkpath: Link target with alias and heading already removed
            source_path: Vault-relative path of the note containing the link

        Returns:
            VaultFile if a match exists, otherwise None
        """
        link = linkpath.strip().replace("\\", "/")
        if not link:
            return None

        source_dir = VaultFile(path=source_path).parent
        attempts = [link]
        if not link.lower().endswith(".md"):
            attempts.append(f"{link}.md")

        for attempt in attempts:
            found = self._lookup(attempt, source_dir)
            if found is not None:
                return found
        return None

    def _lookup(self, link: str, source_dir: str) -> Optional[VaultFile]:
        if link.startswith("./") or link.startswith("../"):
            return self.get_file(posixpath.join(source_dir, link))

        exact = self.get_file(link)
        if exact is not None:
            return exact

        suffix = "/" + link.lstrip("/").lower()
        candidates = [
            f for f in self.iter_files()
            if ("/" + f.path.lower()).endswith(suffix)
        ]
        if not candidates:
            return None
        candidates.sort(key=lambda f: (f.parent != source_dir, len(f.path), f.path))
        return candidates[0]
