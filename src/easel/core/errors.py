"""Error taxonomy for the extensibility runtime.

Only a few of these ever reach a caller: ``CommandNotFoundError`` and
handler errors from ``execute_command``, plus ``RuntimeDestroyedError``.
Everything else is logged at the runtime/plugin boundary and degrades to a
conservative return value (``False``, ``None`` or a no-op Disposable).
"""

from __future__ import annotations


class EaselError(Exception):
    """Base class for all runtime errors."""


class NotFoundError(EaselError, LookupError):
    """A requested command, extension or contribution id does not exist."""

    kind = "item"

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"{self.kind.capitalize()} {item_id!r} not found")


class CommandNotFoundError(NotFoundError):
    kind = "command"


class ValidationFailedError(EaselError):
    """Contribution data was rejected by its point's validator."""

    def __init__(self, contribution_id: str, point_id: str) -> None:
        self.contribution_id = contribution_id
        self.point_id = point_id
        super().__init__(
            f"Contribution {contribution_id!r} failed validation for point {point_id!r}"
        )


class HookFailureError(EaselError):
    """Plugin-authored code raised while the runtime was calling into it."""

    def __init__(self, owner: str, hook: str) -> None:
        self.owner = owner
        self.hook = hook
        super().__init__(f"{hook} failed for {owner!r}")


class RuntimeDestroyedError(EaselError):
    """Operation attempted on a runtime that has already been destroyed."""
