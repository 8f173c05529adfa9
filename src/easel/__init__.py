"""easel: an embeddable extensibility runtime.

A host exposes extension points; independently authored extensions attach
commands, contributions and event handlers through a restricted context,
and the runtime rolls all of it back when an extension is unregistered.
"""

from easel.core import (
    BaseExtension,
    ContributionPointIds,
    Disposable,
    ExtensionMetadata,
    HostContext,
    Runtime,
)

__version__ = "0.1.0"

__all__ = [
    "BaseExtension",
    "ContributionPointIds",
    "Disposable",
    "ExtensionMetadata",
    "HostContext",
    "Runtime",
    "__version__",
]
