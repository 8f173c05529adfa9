"""Contribution points and the registry that stores contributions."""

from easel.core.contributions.points import (
    BUILTIN_POINTS,
    CommandContribution,
    ConfigurationContribution,
    Contribution,
    ContributionMetadata,
    ContributionPoint,
    ContributionPointIds,
    ToolContribution,
    ViewContribution,
)
from easel.core.contributions.registry import ContributionRegistry

__all__ = [
    "BUILTIN_POINTS",
    "CommandContribution",
    "ConfigurationContribution",
    "Contribution",
    "ContributionMetadata",
    "ContributionPoint",
    "ContributionPointIds",
    "ContributionRegistry",
    "ToolContribution",
    "ViewContribution",
]
