"""Disposable handles: the single mechanism for undoing a registration.

Every registering operation in the runtime returns a :class:`Disposable`.
Calling ``dispose()`` reverses exactly that registration and nothing else.
INVARIANT: ``dispose()`` is idempotent and never raises for a no-op handle.
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType


class Disposable:
    """Handle whose ``dispose()`` reverses one prior registration."""

    __slots__ = ("_callback", "_disposed")

    def __init__(self, callback: Callable[[], object] | None = None) -> None:
        self._callback = callback
        self._disposed = False

    @classmethod
    def none(cls) -> Disposable:
        """Return a handle that does nothing when disposed."""
        return cls(None)

    @classmethod
    def from_many(cls, *disposables: Disposable) -> Disposable:
        """Combine handles; children are disposed last-in, first-out."""
        children = list(disposables)

        def _dispose_all() -> None:
            for child in reversed(children):
                child.dispose()
            children.clear()

        return cls(_dispose_all)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()

    def __enter__(self) -> Disposable:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "live"
        return f"<Disposable {state}>"
