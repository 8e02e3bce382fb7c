"""Pydantic models for recipe parsing."""

from .workflow import Notify, WorkflowResult, WorkflowStatus

__all__ = [
    "Notify",
    "WorkflowResult",
    "WorkflowStatus",
]
