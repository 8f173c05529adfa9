"""Extensibility runtime core.

Leaves first: events and disposables, then commands, contributions and
configuration, then the extension manager, the host context and the
runtime that owns them all.
"""

from easel.core.commands import COMMAND_SERVICE, Command, CommandRegistry
from easel.core.configuration import (
    CONFIGURATION_SERVICE,
    ConfigurationChangeEvent,
    ConfigurationStore,
)
from easel.core.context import HostContext
from easel.core.contributions import (
    Contribution,
    ContributionMetadata,
    ContributionPoint,
    ContributionPointIds,
    ContributionRegistry,
)
from easel.core.disposable import Disposable
from easel.core.errors import (
    CommandNotFoundError,
    EaselError,
    HookFailureError,
    NotFoundError,
    RuntimeDestroyedError,
    ValidationFailedError,
)
from easel.core.events import EventBus
from easel.core.extension import (
    BaseExtension,
    Extension,
    ExtensionManager,
    ExtensionMetadata,
    has_contributions,
)
from easel.core.runtime import Runtime
from easel.core.services import Service, ServiceRegistry

__all__ = [
    "COMMAND_SERVICE",
    "CONFIGURATION_SERVICE",
    "BaseExtension",
    "Command",
    "CommandNotFoundError",
    "CommandRegistry",
    "ConfigurationChangeEvent",
    "ConfigurationStore",
    "Contribution",
    "ContributionMetadata",
    "ContributionPoint",
    "ContributionPointIds",
    "ContributionRegistry",
    "Disposable",
    "EaselError",
    "EventBus",
    "Extension",
    "ExtensionManager",
    "ExtensionMetadata",
    "HookFailureError",
    "HostContext",
    "NotFoundError",
    "Runtime",
    "RuntimeDestroyedError",
    "Service",
    "ServiceRegistry",
    "ValidationFailedError",
    "has_contributions",
]
