"""Append-only store of accepted host keys.

Lines in the host keys file are of the form::

    <keytype>@<port>:<hostname> <key>

e.g. ``rsa@22:foovax.example.org 0x23,0x293487364395345345....2343``.
The first line for an identity decides verification; later lines for the
same identity are ignored until :meth:`HostKeyTrustStore.replace` rewrites
the file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from .errors import HostKeyStoreError
from .models import HostKeyRecord, HostKeyStatus, identity_prefix, parse_record

logger = logging.getLogger(__name__)


def _read_lines(handle: BinaryIO) -> Iterator[str]:
    for raw in handle:
        line = raw.decode("utf-8", "surrogateescape")
        if line.endswith("\n"):
            line = line[:-1]
        yield line


@dataclass
class HostKeyTrustStore:
    path: Path

    def verify(self, hostname: str, port: int, keytype: str, key: str) -> HostKeyStatus:
        prefix = identity_prefix(hostname, port, keytype)
        try:
            handle = open(self.path, "rb")
        except (FileNotFoundError, NotADirectoryError):
            return HostKeyStatus.NO_RECORD
        with handle:
            for line in _read_lines(handle):
                if not line.startswith(prefix):
                    continue
                if line[len(prefix) :] == key:
                    return HostKeyStatus.MATCH
                logger.warning("stored host key for %s does not match", prefix.rstrip())
                return HostKeyStatus.MISMATCH
        return HostKeyStatus.NO_RECORD

    def store(self, hostname: str, port: int, keytype: str, key: str) -> None:
        """Append a record for the identity, leaving any earlier record in place."""
        record = HostKeyRecord(keytype=keytype, port=port, hostname=hostname, key=key)
        fd = self._open_for_append()
        try:
            os.write(fd, record.to_line().encode("utf-8", "surrogateescape"))
        finally:
            os.close(fd)
        logger.debug("stored %s host key for %s:%d", keytype, hostname, port)

    def replace(self, hostname: str, port: int, keytype: str, key: str) -> None:
        """Store a record that supersedes every earlier record for the identity."""
        record = HostKeyRecord(keytype=keytype, port=port, hostname=hostname, key=key)
        kept = [line for line in self._lines() if not line.startswith(record.prefix)]
        kept.append(record.to_line().rstrip("\n"))
        self._ensure_directory()
        fd, staging_path = tempfile.mkstemp(prefix=".sshhostkeys-", dir=self.path.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                for line in kept:
                    handle.write(line.encode("utf-8", "surrogateescape") + b"\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(staging_path, self.path)
        except BaseException:
            try:
                os.unlink(staging_path)
            except FileNotFoundError:
                pass
            raise
        logger.debug("replaced %s host key for %s:%d", keytype, hostname, port)

    def records(self) -> list[HostKeyRecord]:
        parsed = [parse_record(line) for line in self._lines()]
        return [record for record in parsed if record is not None]

    def _lines(self) -> list[str]:
        try:
            with open(self.path, "rb") as handle:
                return list(_read_lines(handle))
        except (FileNotFoundError, NotADirectoryError):
            return []

    def _ensure_directory(self) -> None:
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("could not create %s: %s", self.path.parent, exc)

    def _open_for_append(self) -> int:
        flags = os.O_CREAT | os.O_APPEND | os.O_RDWR
        try:
            return os.open(self.path, flags, 0o600)
        except OSError:
            self._ensure_directory()
        try:
            return os.open(self.path, flags, 0o600)
        except OSError as exc:
            logger.error("%s: %s", self.path, exc.strerror)
            raise HostKeyStoreError(f"cannot open host key file {self.path}: {exc}") from exc
