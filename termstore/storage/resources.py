"""In-memory setting overrides parsed from ``path.key: value`` resource strings."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

DefaultResolver = Callable[[str], str | None]


def parse_resource(resource: str) -> tuple[str, str] | None:
    """Split a resource string into ``(key, value)``.

    The key is the component between the last ``.`` or ``*`` before the first
    colon and that colon. Returns ``None`` when there is no colon.
    """
    colon = resource.find(":")
    if colon < 0:
        return None
    start = colon
    while start > 0 and resource[start - 1] not in ".*":
        start -= 1
    return resource[start:colon], resource[colon + 1 :].lstrip()


class ResourceOverlay:
    """Override table consulted when a session file has no value for a key.

    Later resources replace earlier ones for the same key. Keys missing from
    the table are passed to ``resolve_default``, the platform's own default
    lookup, when one is supplied.
    """

    def __init__(self, resolve_default: DefaultResolver | None = None) -> None:
        self._overrides: dict[str, str] = {}
        self._resolve_default = resolve_default

    @classmethod
    def from_strings(
        cls,
        resources: Iterable[str],
        resolve_default: DefaultResolver | None = None,
    ) -> "ResourceOverlay":
        overlay = cls(resolve_default=resolve_default)
        for resource in resources:
            overlay.provide(resource)
        return overlay

    def provide(self, resource: str) -> None:
        parsed = parse_resource(resource)
        if parsed is None:
            logger.warning('expected a colon in resource string "%s"', resource)
            return
        key, value = parsed
        self._overrides[key] = value

    def get(self, key: str) -> str | None:
        value = self._overrides.get(key)
        if value is not None:
            return value
        if self._resolve_default is None:
            return None
        return self._resolve_default(key)

    def __contains__(self, key: object) -> bool:
        return key in self._overrides

    def __len__(self) -> int:
        return len(self._overrides)
