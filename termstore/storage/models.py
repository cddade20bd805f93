"""Domain models for host key records and verification outcomes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HostKeyStatus(str, Enum):
    MATCH = "match"
    NO_RECORD = "no_record"
    MISMATCH = "mismatch"


class HostKeyRecord(BaseModel):
    """One accepted host key, stored as ``<keytype>@<port>:<hostname> <key>``."""

    model_config = ConfigDict(frozen=True)

    keytype: str = Field(min_length=1)
    port: int = Field(ge=0, le=65535)
    hostname: str = Field(min_length=1)
    key: str = Field(min_length=1)

    @field_validator("keytype", "hostname", "key")
    @classmethod
    def _single_line(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("must not contain a line break")
        return value

    @field_validator("keytype")
    @classmethod
    def _no_keytype_separators(cls, value: str) -> str:
        if "@" in value or " " in value:
            raise ValueError("must not contain '@' or spaces")
        return value

    @field_validator("hostname")
    @classmethod
    def _no_hostname_separators(cls, value: str) -> str:
        if " " in value:
            raise ValueError("must not contain spaces")
        return value

    @property
    def prefix(self) -> str:
        return identity_prefix(self.hostname, self.port, self.keytype)

    def to_line(self) -> str:
        return f"{self.prefix}{self.key}\n"


def identity_prefix(hostname: str, port: int, keytype: str) -> str:
    """Return the line prefix shared by every record for one host identity."""
    return f"{keytype}@{port}:{hostname} "


def parse_record(line: str) -> HostKeyRecord | None:
    """Parse a host key line, returning ``None`` for anything malformed."""
    line = line.rstrip("\n")
    head, sep, key = line.partition(" ")
    if not sep:
        return None
    keytype, sep, rest = head.partition("@")
    if not sep:
        return None
    port_text, sep, hostname = rest.partition(":")
    if not sep or not port_text.isdecimal():
        return None
    try:
        return HostKeyRecord(keytype=keytype, port=int(port_text), hostname=hostname, key=key)
    except ValueError:
        return None
