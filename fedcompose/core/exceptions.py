"""Exceptions for the composition validation system."""

from .definitions import TypeDefinitionFragment


class CompositionError(Exception):
    """Base exception for all composition operations.

    This is the parent class for all composition-related errors,
    allowing callers to catch all composition issues with a single except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize composition error.

        Args:
            message: Human-readable error description
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class SubgraphLoadError(CompositionError):
    """Error loading subgraph manifests.

    Raised when:
    - A manifest path does not exist
    - A manifest file cannot be read
    - A manifest contains invalid YAML
    - A manifest does not match the expected shape
    """

    pass


class MalformedDefinitionError(CompositionError):
    """One or more type definitions are missing required attributes.

    Raised when the malformed-definition policy is ``error`` and a fragment
    lacks a service name, or declares an enum without a value list.
    """

    def __init__(self, message: str, fragments: list[TypeDefinitionFragment]):
        super().__init__(message)
        self.fragments = fragments


class ConfigurationError(CompositionError):
    """Error in composition configuration.

    Raised when:
    - An unsupported malformed-definition policy is requested
    - Worker counts are out of valid range
    """

    pass
