"""Stable ids for contributions submitted as raw data.

Preference order: an explicit ``id`` on the item (prefixed with the point id
for point descriptors, whose ``id`` names the declared point), then the item's
``command`` (commands are addressed by it everywhere), then
``<point_id>.<slug>`` derived from a name-like field. A random id is the
last resort; it is logged and the contribution is flagged non-persistable.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Mapping
from typing import Any

from easel.core.contributions.points import (
    Contribution,
    ContributionMetadata,
    ContributionPointIds,
)

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _SLUG_RE.sub("-", value.strip().lower()).strip("-")


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _item_name(item: Any) -> str | None:
    metadata = _field(item, "metadata")
    for candidate in (_field(metadata, "name") if metadata else None, _field(item, "name")):
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return None


def derive_contribution_id(point_id: str, item: Any) -> tuple[str, bool]:
    """Return ``(contribution_id, persistable)`` for a raw contribution item."""
    explicit = _field(item, "id")
    if isinstance(explicit, str) and explicit:
        # A point descriptor's id names the point, not the contribution.
        if point_id == ContributionPointIds.CONTRIBUTIONS:
            return f"{point_id}.{explicit}", True
        return explicit, True
    command = _field(item, "command")
    if isinstance(command, str) and command:
        return command, True

    name = _item_name(item)
    slug = slugify(name) if name else ""
    if slug:
        return f"{point_id}.{slug}", True

    generated = f"{point_id}.{uuid.uuid4().hex[:12]}"
    logger.warning(
        "Contribution on %s has no id, command or name; generated %s. "
        "This id is not stable and must not be persisted.",
        point_id,
        generated,
    )
    return generated, False


def build_contribution(
    point_id: str,
    item: Any,
    *,
    extension_id: str | None = None,
) -> Contribution:
    """Wrap a raw item in a :class:`Contribution` with a derived id."""
    if isinstance(item, Contribution):
        return Contribution(
            id=item.id,
            point_id=point_id,
            data=item.data,
            metadata=ContributionMetadata(
                name=item.metadata.name,
                extension_id=extension_id or item.metadata.extension_id,
                persistable=item.metadata.persistable,
            ),
        )
    contribution_id, persistable = derive_contribution_id(point_id, item)
    label = _item_name(item) or _field(item, "title")
    return Contribution(
        id=contribution_id,
        point_id=point_id,
        data=item,
        metadata=ContributionMetadata(
            name=label if isinstance(label, str) else None,
            extension_id=extension_id,
            persistable=persistable,
        ),
    )
