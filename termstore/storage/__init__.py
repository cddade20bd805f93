"""Storage package for sessions, host keys and the random seed."""

from .codec import DEFAULT_SESSION_NAME, decode, encode
from .config import StorageSettings, load_settings
from .errors import HostKeyStoreError, SessionOpenError, SessionWriteError, StorageError
from .hostkeys import HostKeyTrustStore
from .models import HostKeyRecord, HostKeyStatus
from .resources import ResourceOverlay, parse_resource
from .seed import SeedPersistence
from .settings import SessionEnumerator, SettingsReader, SettingsStore, SettingsWriter

__all__ = [
    "decode",
    "DEFAULT_SESSION_NAME",
    "encode",
    "HostKeyRecord",
    "HostKeyStatus",
    "HostKeyStoreError",
    "HostKeyTrustStore",
    "load_settings",
    "parse_resource",
    "ResourceOverlay",
    "SeedPersistence",
    "SessionEnumerator",
    "SessionOpenError",
    "SessionWriteError",
    "SettingsReader",
    "SettingsStore",
    "SettingsWriter",
    "StorageError",
    "StorageSettings",
]
