"""Helpers shared by the note workflows."""

from typing import Optional

from ..models.workflow import Notify, WorkflowResult, WorkflowStatus
from ..vault import VaultFile


def is_markdown(note: Optional[VaultFile]) -> bool:
    return note is not None and note.extension == "md"


def error_message(error: Exception) -> str:
    return str(error) or error.__class__.__name__


def finish(
    notify: Notify,
    status: WorkflowStatus,
    message: str,
    note: Optional[VaultFile] = None,
) -> WorkflowResult:
    """Show exactly one notice and build the matching result."""
    notify(message)
    return WorkflowResult(
        status=status,
        message=message,
        note_path=note.path if note is not None else None,
    )
