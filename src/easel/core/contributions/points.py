"""Contribution points, contributions and the built-in point catalogue.

A *point* is a named slot declared in advance with an optional validator;
a *contribution* is one item an extension submits against a point. The
built-in points describe their data shapes as pydantic models, and each
model doubles as the point's validator.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError


class ContributionPointIds:
    """Reserved point ids. Hosts may declare arbitrary additional points."""

    CONTRIBUTIONS = "contribution.point.contributions"
    COMMANDS = "contribution.point.commands"
    TOOLS = "contribution.point.tools"
    VIEWS = "contribution.point.views"
    CONFIGURATIONS = "contribution.point.configurations"


@dataclass(frozen=True)
class ContributionPoint:
    """Declaration of an extension slot."""

    id: str
    description: str | None = None
    validate: Callable[[Any], bool] | None = None

    @classmethod
    def coerce(cls, value: ContributionPoint | Mapping[str, Any]) -> ContributionPoint:
        """Build a point from a descriptor object or a plain mapping."""
        if isinstance(value, ContributionPoint):
            return value
        if not isinstance(value, Mapping) or not isinstance(value.get("id"), str):
            msg = f"Not a contribution point descriptor: {value!r}"
            raise TypeError(msg)
        return cls(
            id=value["id"],
            description=value.get("description"),
            validate=value.get("validate"),
        )


@dataclass(frozen=True)
class ContributionMetadata:
    """Bookkeeping attached to a contribution by whoever submitted it.

    Attributes:
        name: Human-readable label.
        extension_id: Owning extension, if submitted on an extension's behalf.
        persistable: False when the id had to be generated randomly.
    """

    name: str | None = None
    extension_id: str | None = None
    persistable: bool = True


@dataclass(frozen=True, eq=False)
class Contribution:
    """One item submitted against a point. ``id`` is unique registry-wide."""

    id: str
    point_id: str
    data: Any
    metadata: ContributionMetadata = field(default_factory=ContributionMetadata)


# --- Data shapes of the built-in points ---


class _ContributionShape(BaseModel):
    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)


class Keybinding(_ContributionShape):
    win: str | None = None
    mac: str | None = None
    linux: str | None = None
    when: str | None = None


class CommandContribution(_ContributionShape):
    """``{command, title, handler?}``; ``command`` is the stable identifier."""

    command: str
    title: str
    category: str | None = None
    icon: str | None = None
    keybinding: Keybinding | None = None
    handler: Callable[..., Any] | None = None


class ToolContribution(_ContributionShape):
    name: str
    description: str
    parameters: dict[str, Any] | None = None
    execute: Callable[..., Any]


class ViewContribution(_ContributionShape):
    name: str
    type: Literal["sidebar", "panel", "editor", "dialog", "status-bar"]
    component: Any
    location: str | None = None
    icon: str | None = None
    priority: int | None = None


class ConfigurationContribution(_ContributionShape):
    """A tunable setting with an optional default."""

    id: str
    type: Literal["string", "number", "boolean", "color", "select", "json"]
    label: str | None = None
    default: Any = None
    min: float | None = None
    max: float | None = None
    options: list[Any] | None = None


def model_validator(model: type[BaseModel]) -> Callable[[Any], bool]:
    """Adapt a pydantic model into a point validator returning a bool."""

    def _validate(data: Any) -> bool:
        if isinstance(data, model):
            return True
        try:
            model.model_validate(data)
        except ValidationError:
            return False
        return True

    _validate.__qualname__ = f"validate_{model.__name__}"
    return _validate


def _validate_point_descriptor(data: Any) -> bool:
    if isinstance(data, ContributionPoint):
        return True
    if not isinstance(data, Mapping) or not isinstance(data.get("id"), str):
        return False
    validate = data.get("validate")
    return validate is None or callable(validate)


BUILTIN_POINTS: tuple[ContributionPoint, ...] = (
    ContributionPoint(
        id=ContributionPointIds.CONTRIBUTIONS,
        description="Declares new contribution points",
        validate=_validate_point_descriptor,
    ),
    ContributionPoint(
        id=ContributionPointIds.COMMANDS,
        description="Commands exposed to users and other extensions",
        validate=model_validator(CommandContribution),
    ),
    ContributionPoint(
        id=ContributionPointIds.TOOLS,
        description="Callable tools with a parameter schema",
        validate=model_validator(ToolContribution),
    ),
    ContributionPoint(
        id=ContributionPointIds.VIEWS,
        description="UI views hosted by the embedding application",
        validate=model_validator(ViewContribution),
    ),
    ContributionPoint(
        id=ContributionPointIds.CONFIGURATIONS,
        description="Tunable settings with defaults",
        validate=model_validator(ConfigurationContribution),
    ),
)
