"""ServiceResult: what every service method hands back to the CLI.

A run never raises for expected conditions (missing snapshot, a held
run lock, an unknown exclusion entry); it returns ``ok=False`` with one
of the :class:`ErrorCode` values instead. Only document store failures
(``OSError``) escape as exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Machine-readable failure codes, stable across releases."""

    NO_SNAPSHOT = "NO_SNAPSHOT"
    INVALID_STATE = "INVALID_STATE"
    IN_FLIGHT = "IN_FLIGHT"
    NOT_FOUND = "NOT_FOUND"
    OUTSIDE_VAULT = "OUTSIDE_VAULT"
    STORE_ERROR = "STORE_ERROR"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, which also selects the renderer
            (``"scan"``, ``"link"``, ``"exclude"``, ...).
        data: Operation-specific payload on success.
        warnings: Non-fatal problems, such as a failing plugin hook.
        error: Set when ``ok`` is False.
        meta: Span tree under ``"telemetry"`` in verbose mode.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        """Build an ``ok=False`` result; *detail* lands in ``error.detail``."""
        error = ServiceError(code=str(code), message=message, detail=detail)
        return cls(ok=False, op=op, error=error)
