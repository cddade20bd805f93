"""Persistence for the random seed carried between runs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

CHUNK_SIZE = 512

SeedConsumer = Callable[[bytes], None]


@dataclass
class SeedPersistence:
    path: Path

    def read(self, consumer: SeedConsumer) -> None:
        """Feed the stored seed to ``consumer`` in chunks; a missing seed feeds nothing."""
        try:
            fd = os.open(self.path, os.O_RDONLY)
        except OSError as exc:
            logger.debug("no random seed read from %s: %s", self.path, exc)
            return
        try:
            while True:
                chunk = os.read(fd, CHUNK_SIZE)
                if not chunk:
                    break
                consumer(chunk)
        finally:
            os.close(fd)

    def read_bytes(self) -> bytes:
        chunks: list[bytes] = []
        self.read(chunks.append)
        return b"".join(chunks)

    def write(self, data: bytes) -> None:
        """Write ``data`` over the start of the seed file.

        The file is not truncated first: if writing fails half way, the old
        seed is better than an empty one. Failures are not reported.
        """
        fd = self._open_for_write()
        if fd is None:
            return
        view = memoryview(data)
        try:
            while view:
                written = os.write(fd, view)
                if written <= 0:
                    break
                view = view[written:]
        except OSError as exc:
            logger.debug("stopped writing %s: %s", self.path, exc)
        finally:
            os.close(fd)

    def _open_for_write(self) -> int | None:
        flags = os.O_CREAT | os.O_WRONLY
        try:
            return os.open(self.path, flags, 0o600)
        except OSError:
            try:
                self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            except OSError as exc:
                logger.debug("could not create %s: %s", self.path.parent, exc)
        try:
            return os.open(self.path, flags, 0o600)
        except OSError as exc:
            logger.debug("not saving random seed to %s: %s", self.path, exc)
            return None
