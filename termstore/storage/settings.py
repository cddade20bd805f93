"""Per-session settings files and the layered lookup over them."""

from __future__ import annotations

import contextlib
import logging
import os
import re
import stat
import tempfile
from dataclasses import dataclass, field
from types import TracebackType
from typing import IO, Iterable, Iterator, Mapping

from .codec import decode
from .config import StorageSettings
from .errors import SessionOpenError, SessionWriteError
from .resources import ResourceOverlay

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*[+-]?[0-9]+")
_LINE_END = re.compile(r"[\r\n]")


def parse_int(value: str) -> int:
    """Return the leading decimal integer of ``value``, or 0 if there is none."""
    match = _LEADING_INT.match(value)
    if match is None:
        return 0
    return int(match.group(0))


def parse_session_lines(lines: Iterable[str]) -> dict[str, str]:
    """Build a snapshot from ``key=value`` lines.

    Lines without ``=`` are skipped. The first line for a key wins.
    """
    snapshot: dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition("=")
        if not sep:
            continue
        value = _LINE_END.split(value, maxsplit=1)[0]
        snapshot.setdefault(key, value)
    return snapshot


class SettingsReader:
    """Read handle over a snapshot of one session file.

    The snapshot is taken when the handle is opened and never refreshed.
    Keys missing from it fall through to the overlay.
    """

    def __init__(self, name: str | None, snapshot: Mapping[str, str], overlay: ResourceOverlay) -> None:
        self.name = name
        self._snapshot: dict[str, str] | None = dict(snapshot)
        self._overlay = overlay

    def read_string(self, key: str) -> str | None:
        if self._snapshot is not None and key in self._snapshot:
            return self._snapshot[key]
        return self._overlay.get(key)

    def read_int(self, key: str, default: int) -> int:
        value = self.read_string(key)
        if value is None:
            return default
        return parse_int(value)

    def keys(self) -> list[str]:
        if self._snapshot is None:
            return []
        return list(self._snapshot)

    @property
    def closed(self) -> bool:
        return self._snapshot is None

    def close(self) -> None:
        self._snapshot = None

    def __enter__(self) -> "SettingsReader":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class SettingsWriter:
    """Write handle for one session file.

    Lines go to a staging file that replaces the session file on
    :meth:`close`, so readers never see a half-written session.
    """

    def __init__(self, name: str | None, target: str, staging: IO[str], staging_path: str) -> None:
        self.name = name
        self._target = target
        self._staging = staging
        self._staging_path = staging_path

    def write_string(self, key: str, value: str) -> None:
        self._staging.write(f"{key}={value}\n")

    def write_int(self, key: str, value: int) -> None:
        self._staging.write(f"{key}={int(value)}\n")

    @property
    def closed(self) -> bool:
        return self._staging.closed

    def close(self) -> None:
        if self._staging.closed:
            return
        try:
            self._staging.flush()
            os.fsync(self._staging.fileno())
        except OSError as exc:
            with contextlib.suppress(OSError):
                self.abort()
            raise SessionWriteError(f"cannot save session {self.name!r}: {exc}") from exc
        self._staging.close()
        try:
            os.replace(self._staging_path, self._target)
        except OSError as exc:
            os.unlink(self._staging_path)
            raise SessionWriteError(f"cannot save session {self.name!r}: {exc}") from exc
        logger.debug("saved session %r to %s", self.name, self._target)

    def abort(self) -> None:
        if self._staging.closed:
            return
        try:
            self._staging.close()
        finally:
            try:
                os.unlink(self._staging_path)
            except FileNotFoundError:
                pass

    def __enter__(self) -> "SettingsWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()


class SessionEnumerator:
    """Iterates the names of stored sessions; close it (or use ``with``) when done."""

    def __init__(self, sessions_dir: str) -> None:
        try:
            self._entries = os.scandir(sessions_dir)
        except (FileNotFoundError, NotADirectoryError):
            self._entries = None

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._entries is None:
            raise StopIteration
        for entry in self._entries:
            try:
                mode = os.stat(entry.path).st_mode
            except OSError:
                continue
            if not stat.S_ISREG(mode):
                continue
            return decode(entry.name)
        raise StopIteration

    def close(self) -> None:
        if self._entries is not None:
            self._entries.close()
            self._entries = None

    def __enter__(self) -> "SessionEnumerator":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


@dataclass
class SettingsStore:
    settings: StorageSettings
    overlay: ResourceOverlay = field(default_factory=ResourceOverlay)

    def open_write(self, name: str | None) -> SettingsWriter:
        sessions_dir = self.settings.sessions_dir
        try:
            sessions_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("could not create %s: %s", sessions_dir, exc)
        if not sessions_dir.is_dir():
            raise SessionOpenError(f"cannot open session {name!r} for writing: {sessions_dir} is not a directory")

        target = self.settings.session_path(name)
        try:
            fd, staging_path = tempfile.mkstemp(prefix=".session-", dir=self.settings.home)
        except OSError as exc:
            raise SessionOpenError(f"cannot open session {name!r} for writing: {exc}") from exc
        staging = os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="\n")
        logger.debug("writing session %r via %s", name, staging_path)
        return SettingsWriter(name=name, target=str(target), staging=staging, staging_path=staging_path)

    def open_read(self, name: str | None) -> SettingsReader | None:
        path = self.settings.session_path(name)
        try:
            handle = open(path, "rb")
        except (FileNotFoundError, NotADirectoryError):
            return None
        with handle:
            snapshot = parse_session_lines(line.decode("utf-8", "surrogateescape") for line in handle)
        logger.debug("loaded %d settings for session %r", len(snapshot), name)
        return SettingsReader(name=name, snapshot=snapshot, overlay=self.overlay)

    def read_string(self, handle: SettingsReader | None, key: str) -> str | None:
        if handle is None:
            return self.overlay.get(key)
        return handle.read_string(key)

    def read_int(self, handle: SettingsReader | None, key: str, default: int) -> int:
        value = self.read_string(handle, key)
        if value is None:
            return default
        return parse_int(value)

    def delete(self, name: str | None) -> None:
        try:
            os.unlink(self.settings.session_path(name))
        except (FileNotFoundError, NotADirectoryError):
            pass

    def enumerate_sessions(self) -> SessionEnumerator:
        return SessionEnumerator(str(self.settings.sessions_dir))

    def list_sessions(self) -> list[str]:
        with self.enumerate_sessions() as sessions:
            return list(sessions)
