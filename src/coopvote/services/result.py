"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All public service methods return ServiceResult. Failures
are per-request values, never exceptions that escape to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Stable failure codes surfaced to the boundary layer."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_VOTED = "ALREADY_VOTED"
    PROPOSAL_CLOSED = "PROPOSAL_CLOSED"
    ALREADY_CLOSED = "ALREADY_CLOSED"
    MEMBER_EXISTS = "MEMBER_EXISTS"
    STORAGE_FAILURE = "STORAGE_FAILURE"


CONFLICT_CODES = frozenset(
    {
        ErrorCode.ALREADY_VOTED,
        ErrorCode.PROPOSAL_CLOSED,
        ErrorCode.ALREADY_CLOSED,
        ErrorCode.MEMBER_EXISTS,
    }
)


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def category(self) -> str:
        """Coarse kind: ``invalid_input``, ``not_found``, ``conflict``, ``storage``."""
        if self.code in CONFLICT_CODES:
            return "conflict"
        if self.code == ErrorCode.STORAGE_FAILURE:
            return "storage"
        return self.code.lower()


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"cast_vote"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, telemetry).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(cls, op: str, data: dict[str, Any], **kwargs: Any) -> ServiceResult:
        return cls(ok=True, op=op, data=data, **kwargs)

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code.value, message=message, detail=detail),
        )
