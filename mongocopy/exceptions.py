"""Exceptions raised by the replication engine."""


class ReplicationError(Exception):
    """Base class for replication errors."""


class ConfigError(ReplicationError, ValueError):
    """A job configuration is invalid."""


class SchemaValidationError(ReplicationError):
    """The target rejected the schema probe document."""


class ArtifactError(ReplicationError):
    """An export artifact could not be read back."""
