"""Command line access to a termstore directory."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from termstore.storage.config import StorageSettings, load_settings
from termstore.storage.errors import StorageError
from termstore.storage.hostkeys import HostKeyTrustStore
from termstore.storage.models import HostKeyStatus
from termstore.storage.resources import ResourceOverlay
from termstore.storage.seed import SeedPersistence
from termstore.storage.settings import SettingsStore

EXIT_CODES = {
    HostKeyStatus.MATCH: 0,
    HostKeyStatus.NO_RECORD: 1,
    HostKeyStatus.MISMATCH: 2,
}


def _add_host_identity(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("hostname")
    parser.add_argument("port", type=int)
    parser.add_argument("keytype")
    parser.add_argument("key")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="termstore", description="Inspect and edit stored terminal sessions")
    parser.add_argument("--home", default=None, help="Store directory (default: $TERMSTORE_HOME or ~/.termstore)")
    parser.add_argument(
        "-xrm",
        "--resource",
        action="append",
        default=[],
        help="Override a setting with a 'path.key: value' resource string. Can be repeated.",
    )
    sub = parser.add_subparsers(dest="area", required=True)

    sessions = sub.add_parser("sessions", help="Saved sessions")
    sessions_sub = sessions.add_subparsers(dest="command", required=True)
    sessions_sub.add_parser("list", help="List saved sessions")
    show = sessions_sub.add_parser("show", help="Print settings of a session")
    show.add_argument("name")
    show.add_argument("keys", nargs="*", help="Keys to look up (default: every key in the session file)")
    set_parser = sessions_sub.add_parser("set", help="Rewrite a session from KEY=VALUE pairs")
    set_parser.add_argument("name")
    set_parser.add_argument("pairs", nargs="+", metavar="KEY=VALUE")
    delete = sessions_sub.add_parser("delete", help="Delete a session")
    delete.add_argument("name")

    hostkey = sub.add_parser("hostkey", help="Accepted host keys")
    hostkey_sub = hostkey.add_subparsers(dest="command", required=True)
    verify = hostkey_sub.add_parser("verify", help="Check a host key (exit 0 match, 1 unknown, 2 mismatch)")
    _add_host_identity(verify)
    store = hostkey_sub.add_parser("store", help="Record a host key as accepted")
    _add_host_identity(store)
    store.add_argument(
        "--replace",
        action="store_true",
        help="Drop earlier records for this host so the new key takes effect",
    )
    hostkey_sub.add_parser("list", help="List stored host keys")

    seed = sub.add_parser("seed", help="Random seed file")
    seed_sub = seed.add_subparsers(dest="command", required=True)
    seed_sub.add_parser("size", help="Print the size of the stored seed in bytes")

    return parser.parse_args(argv)


def resolve_settings(home: str | None) -> StorageSettings:
    settings = load_settings()
    if home:
        settings = replace(settings, home=Path(home).expanduser())
    return settings


def run_sessions(args: argparse.Namespace, settings: StorageSettings) -> int:
    store = SettingsStore(settings=settings, overlay=ResourceOverlay.from_strings(args.resource))
    if args.command == "list":
        for name in store.list_sessions():
            print(name)
        return 0
    if args.command == "show":
        reader = store.open_read(args.name)
        keys = args.keys or (reader.keys() if reader is not None else [])
        try:
            for key in keys:
                value = store.read_string(reader, key)
                print(f"{key}={value}" if value is not None else f"{key} (unset)")
        finally:
            if reader is not None:
                reader.close()
        return 0
    if args.command == "set":
        pairs: list[tuple[str, str]] = []
        for pair in args.pairs:
            if "=" not in pair:
                print(f"Invalid pair '{pair}' (expected KEY=VALUE)", file=sys.stderr)
                return 1
            key, value = pair.split("=", 1)
            pairs.append((key, value))
        with store.open_write(args.name) as writer:
            for key, value in pairs:
                writer.write_string(key, value)
        return 0
    store.delete(args.name)
    return 0


def run_hostkey(args: argparse.Namespace, settings: StorageSettings) -> int:
    trust_store = HostKeyTrustStore(path=settings.host_keys_path)
    if args.command == "list":
        for record in trust_store.records():
            print(record.to_line(), end="")
        return 0
    if args.command == "verify":
        status = trust_store.verify(args.hostname, args.port, args.keytype, args.key)
        print(status.value)
        return EXIT_CODES[status]
    if args.replace:
        trust_store.replace(args.hostname, args.port, args.keytype, args.key)
    else:
        trust_store.store(args.hostname, args.port, args.keytype, args.key)
    return 0


def run_seed(args: argparse.Namespace, settings: StorageSettings) -> int:
    print(len(SeedPersistence(path=settings.seed_path).read_bytes()))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = resolve_settings(args.home)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    handlers = {"sessions": run_sessions, "hostkey": run_hostkey, "seed": run_seed}
    try:
        return handlers[args.area](args, settings)
    except ValidationError as exc:
        print(f"Invalid host key record: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
