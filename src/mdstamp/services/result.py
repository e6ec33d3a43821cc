"""Service results: the contract between services and the CLI.

Batch operations report through :class:`ServiceResult` instead of raising,
so one bad document never hides what happened to the others. The CLI renders
the result; library callers inspect it directly.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class DocumentStatus(StrEnum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class DocumentOutcome(BaseModel):
    """What happened to one document during a stamp run.

    Attributes:
        path: The document path as discovered.
        status: Whether the rendered document changed, or why it failed.
        written: True when a file was written (never on a dry run).
        fields: Names of the fields that produced a value.
        destination: Output path when writing outside the source tree.
        error: ``"ExcType: message"`` for failed documents.
    """

    model_config = {"frozen": True}

    path: str
    status: DocumentStatus
    written: bool = False
    fields: list[str] = Field(default_factory=list)
    destination: str | None = None
    error: str | None = None

    def as_item(self) -> dict[str, Any]:
        """JSON-ready form used in ``ServiceResult.data["items"]``."""
        return self.model_dump(mode="json", exclude_none=True)


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for service operations.

    Attributes:
        ok: False when any part of the operation failed.
        op: Name of the operation (``"stamp"``).
        data: Operation payload; for ``stamp`` the per-document items and
            the changed / unchanged / failed counts.
        warnings: Non-fatal issues, including document diagnostics.
        error: Summary of the failures when ``ok`` is False.
        meta: Settings the operation ran with.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
