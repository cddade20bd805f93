"""Reversible mapping between session names and filesystem-safe tokens."""

from __future__ import annotations

DEFAULT_SESSION_NAME = "Default Settings"

# Opt-in list: most punctuation is special to some shell or file format.
_SAFE_BYTES = frozenset(
    b"+-.@_"
    b"0123456789"
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    b"abcdefghijklmnopqrstuvwxyz"
)
_HEX_DIGITS = "0123456789ABCDEF"
_PERCENT = ord("%")


def encode(name: str | None) -> str:
    """Encode a session name as a single path segment.

    Bytes outside the safe alphabet become ``%XX`` with uppercase hex digits.
    ``None`` stands for the default session.
    """
    if name is None:
        name = DEFAULT_SESSION_NAME
    out: list[str] = []
    for byte in name.encode("utf-8", "surrogateescape"):
        if byte in _SAFE_BYTES:
            out.append(chr(byte))
        else:
            out.append("%" + _HEX_DIGITS[byte >> 4] + _HEX_DIGITS[byte & 15])
    return "".join(out)


def _hex_value(byte: int) -> int:
    # Uppercase hex only; anything else decodes to an arbitrary value.
    value = byte - ord("0")
    if value > 9:
        value -= 7
    return value


def decode(token: str) -> str:
    """Decode a token produced by :func:`encode`.

    Never fails: a malformed escape yields a garbage byte, and a trailing
    ``%`` with fewer than two bytes after it is copied through.
    """
    raw = token.encode("utf-8", "surrogateescape")
    out = bytearray()
    index = 0
    while index < len(raw):
        if raw[index] == _PERCENT and index + 2 < len(raw):
            high = _hex_value(raw[index + 1])
            low = _hex_value(raw[index + 2])
            out.append(((high << 4) + low) & 0xFF)
            index += 3
        else:
            out.append(raw[index])
            index += 1
    return out.decode("utf-8", "surrogateescape")
