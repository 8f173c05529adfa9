"""Result and ResultError: what every CLI operation reports.

The CLI never prints runtime objects directly: each command builds a
Result, and the formatter layer renders it for humans or as JSON.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ResultError(BaseModel):
    """Structured error payload within a Result."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class Result(BaseModel):
    """Outcome of one CLI operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"list_commands"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ResultError | None = None

    @classmethod
    def success(cls, op: str, **data: Any) -> Result:
        return cls(ok=True, op=op, data=data)

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> Result:
        return cls(ok=False, op=op, error=ResultError(code=code, message=message, detail=detail))
