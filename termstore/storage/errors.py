"""Exceptions raised by the storage layer."""

from __future__ import annotations


class StorageError(Exception):
    """Base class for storage failures the caller is expected to handle."""


class SessionOpenError(StorageError):
    """A session file could not be opened for writing."""


class HostKeyStoreError(StorageError):
    """The host key file could not be opened for appending, even after creating its directory."""


class SessionWriteError(StorageError):
    """A staged session could not be saved over the session file."""
