"""Typed, validated extension points.

Points declare a data shape and optional validator; contributions are items
submitted against a point. The registry knows nothing about commands or
configuration; wiring contributions into those services is the Extension
Manager's job.

INVARIANTS:
- A contribution id is unique across the whole registry, not per point.
  Re-registering an id replaces the previous entry (with a warning).
- A contribution rejected by its point's validator is never stored; the
  caller still receives a Disposable that is safe to dispose.
- Contributing a descriptor to ``ContributionPointIds.CONTRIBUTIONS``
  declares that point immediately (self-hosting bootstrap).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from easel.core.contributions.points import (
    Contribution,
    ContributionPoint,
    ContributionPointIds,
)
from easel.core.disposable import Disposable
from easel.core.errors import ValidationFailedError

if TYPE_CHECKING:
    from easel.core.events import EventBus

logger = logging.getLogger(__name__)


class ContributionRegistry:
    """Stores points and the contributions made against them.

    Parameters:
        event_bus: Optional bus used to announce ``point:register``,
            ``contribution:register`` and ``contribution:unregister``.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._points: dict[str, ContributionPoint] = {}
        self._by_point_id: dict[str, list[Contribution]] = {}
        self._by_id: dict[str, Contribution] = {}
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------

    def register_point(self, point: ContributionPoint | Mapping[str, Any]) -> ContributionPoint:
        """Declare a point, overwriting (with a warning) any previous definition."""
        point = ContributionPoint.coerce(point)
        if point.id in self._points:
            logger.warning(
                "Contribution point %s already exists. Overwriting definitions may cause issues.",
                point.id,
            )
        self._points[point.id] = point
        self._by_point_id.setdefault(point.id, [])
        logger.debug("Registered contribution point: %s", point.id)
        self._emit("point:register", point)
        return point

    def unregister_point(self, point_id: str) -> bool:
        """Forget a point definition. Its bucket and contributions are kept."""
        return self._points.pop(point_id, None) is not None

    def get_point(self, point_id: str) -> ContributionPoint | None:
        return self._points.get(point_id)

    def get_points(self) -> list[ContributionPoint]:
        return list(self._points.values())

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    def register(self, point_id: str, contribution: Contribution) -> Disposable:
        """Submit *contribution* against *point_id*.

        Returns a Disposable that removes the contribution again. If the
        point's validator rejects the data, nothing is stored and the
        returned Disposable is a no-op.
        """
        if contribution.point_id != point_id:
            contribution = Contribution(
                id=contribution.id,
                point_id=point_id,
                data=contribution.data,
                metadata=contribution.metadata,
            )

        previous = self._by_id.get(contribution.id)
        if previous is not None:
            self._remove(previous)
            logger.warning(
                'Contribution with ID "%s" is already registered. Overwriting.',
                contribution.id,
            )

        if point_id not in self._points:
            logger.warning(
                "Contribution point %s does not exist. The contribution %s will be "
                "queued but may not be valid.",
                point_id,
                contribution.id,
            )
            self._by_point_id.setdefault(point_id, [])

        if not self._accepts(point_id, contribution):
            return Disposable.none()

        self._by_point_id[point_id].append(contribution)
        self._by_id[contribution.id] = contribution
        logger.debug("Registered contribution %s on %s", contribution.id, point_id)
        self._emit("contribution:register", contribution)

        declared: ContributionPoint | None = None
        if point_id == ContributionPointIds.CONTRIBUTIONS:
            try:
                declared = self.register_point(contribution.data)
            except TypeError:
                logger.error(
                    "Contribution %s does not describe a point", contribution.id, exc_info=True
                )
                self._remove(contribution)
                return Disposable.none()

        def _dispose() -> None:
            self._remove(contribution)
            if declared is not None and self._points.get(declared.id) is declared:
                self.unregister_point(declared.id)

        return Disposable(_dispose)

    def unregister(self, point_id: str, contribution_id: str) -> bool:
        """Remove a contribution by id. Returns False if it is not on *point_id*."""
        contribution = self._by_id.get(contribution_id)
        if contribution is None or contribution.point_id != point_id:
            return False
        self._remove(contribution)
        return True

    def get(self, point_id: str) -> list[Contribution]:
        """Contributions on *point_id* in registration order (empty if unknown)."""
        return list(self._by_point_id.get(point_id, ()))

    def get_by_id(self, contribution_id: str) -> Contribution | None:
        return self._by_id.get(contribution_id)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _accepts(self, point_id: str, contribution: Contribution) -> bool:
        point = self._points.get(point_id)
        if point is None or point.validate is None:
            return True
        try:
            accepted = point.validate(contribution.data)
        except Exception:
            logger.error(
                "Validation error for contribution %s", contribution.id, exc_info=True
            )
            return False
        if not accepted:
            logger.error("%s", ValidationFailedError(contribution.id, point_id))
            return False
        return True

    def _remove(self, contribution: Contribution) -> None:
        # Identity checks: a stale handle must not remove a newer entry with the same id.
        bucket = self._by_point_id.get(contribution.point_id)
        if bucket is not None:
            for index, candidate in enumerate(bucket):
                if candidate is contribution:
                    del bucket[index]
                    break
            else:
                return
        if self._by_id.get(contribution.id) is contribution:
            del self._by_id[contribution.id]
        logger.debug("Unregistered contribution %s from %s", contribution.id, contribution.point_id)
        self._emit("contribution:unregister", contribution)

    def _emit(self, event: str, *args: Any) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(event, *args)
