"""Core functionality for fedcompose."""

from .definitions import DefinitionGroup, DefinitionKind, TypeDefinitionFragment
from .exceptions import (
    CompositionError,
    ConfigurationError,
    MalformedDefinitionError,
    SubgraphLoadError,
)
from .logging import (
    CompositionRunLogger,
    bound_context,
    configure_logging,
    get_logger,
)
from .manifest import SubgraphManifest, TypeEntry, TypeKind
from .subgraph_loader import FileSubgraphLoader, SubgraphLoader, SubgraphLoadResult

__all__ = [
    # Definitions
    "DefinitionGroup",
    "DefinitionKind",
    "TypeDefinitionFragment",
    # Exceptions
    "CompositionError",
    "ConfigurationError",
    "MalformedDefinitionError",
    "SubgraphLoadError",
    # Logging
    "CompositionRunLogger",
    "bound_context",
    "configure_logging",
    "get_logger",
    # Manifests and loading
    "FileSubgraphLoader",
    "SubgraphLoadResult",
    "SubgraphLoader",
    "SubgraphManifest",
    "TypeEntry",
    "TypeKind",
]
