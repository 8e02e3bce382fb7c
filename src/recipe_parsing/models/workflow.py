"""Pydantic models for workflow outcomes."""

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

Notify = Callable[[str], None]


class WorkflowStatus(str, Enum):
    """Final state of a workflow run."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class WorkflowResult(BaseModel):
    """Result of one workflow run.

    The message is the same text that was shown as the notice.
    """

    status: WorkflowStatus = Field(description="Outcome of the run")
    message: str = Field(description="Notice text shown to the user")
    note_path: Optional[str] = Field(None, description="Vault path of the note the run acted on")

    @property
    def ok(self) -> bool:
        return self.status != WorkflowStatus.FAILED
