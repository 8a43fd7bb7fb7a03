"""Tests for custom exception hierarchy."""

from registry_sync.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    FormatError,
    IdentityAlreadyClaimedError,
    LocalPersistenceError,
    PersistenceWriteError,
    RegistrySyncError,
    RemotePersistenceError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_registry_sync_error_is_exception(self) -> None:
        assert isinstance(RegistrySyncError("test"), Exception)

    def test_format_error_is_registry_sync_error(self) -> None:
        assert isinstance(FormatError("test"), RegistrySyncError)

    def test_entity_not_found_is_registry_sync_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), RegistrySyncError)

    def test_local_persistence_is_persistence_write_error(self) -> None:
        err = LocalPersistenceError("test")
        assert isinstance(err, PersistenceWriteError)
        assert isinstance(err, RegistrySyncError)

    def test_remote_persistence_is_persistence_write_error(self) -> None:
        err = RemotePersistenceError("test")
        assert isinstance(err, PersistenceWriteError)
        assert not isinstance(err, LocalPersistenceError)

    def test_identity_already_claimed_is_registry_sync_error(self) -> None:
        assert isinstance(IdentityAlreadyClaimedError("test"), RegistrySyncError)

    def test_configuration_error_is_registry_sync_error(self) -> None:
        assert isinstance(ConfigurationError("test"), RegistrySyncError)

    def test_exception_message(self) -> None:
        err = EntityNotFoundError("Account P-001 not found")
        assert str(err) == "Account P-001 not found"
