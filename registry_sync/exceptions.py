"""Custom exception hierarchy for registry-sync."""


class RegistrySyncError(Exception):
    """Base exception for all registry-sync errors."""


class FormatError(RegistrySyncError):
    """Raised when an import file cannot be interpreted.

    Covers an unresolvable header, too few lines and undecodable input.
    The registry is never modified when this is raised.
    """


class EntityNotFoundError(RegistrySyncError):
    """Raised when a referenced member or account does not exist."""


class PersistenceWriteError(RegistrySyncError):
    """Raised when a persistence tier fails to read or write a snapshot."""


class LocalPersistenceError(PersistenceWriteError):
    """Raised when the durable local store fails."""


class RemotePersistenceError(PersistenceWriteError):
    """Raised when the remote mirror fails."""


class ConfigurationError(RegistrySyncError):
    """Raised when configuration is invalid or missing."""


class IdentityAlreadyClaimedError(RegistrySyncError):
    """Raised when registering against a member that already has a login."""
