"""Command line tools for ADB public keys."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .auth import (
    PublicKeyError,
    parse_public_key,
    public_key_to_openssh,
    public_key_to_pem,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="adbcli")
    commands = parser.add_subparsers(dest="command")

    convert = commands.add_parser(
        "pubkey-convert",
        help="Converts an ADB-generated public key into PEM format.",
    )
    convert.add_argument("file")
    convert.add_argument(
        "-f", "--format", default="pem", help="format (pem or openssh)"
    )

    fingerprint = commands.add_parser(
        "pubkey-fingerprint",
        help="Outputs the fingerprint of an ADB-generated public key.",
    )
    fingerprint.add_argument("file")
    return parser


def _load_key(path: str):
    return parse_public_key(Path(path).read_bytes())


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        key = _load_key(args.file)
    except OSError as exc:
        print(f"failed to read public key: {exc}", file=sys.stderr)
        return 1
    except PublicKeyError as exc:
        print(f"failed to parse public key: {exc}", file=sys.stderr)
        return 1

    if args.command == "pubkey-fingerprint":
        print(f"{key.fingerprint} {key.comment}")
        return 0

    try:
        if args.format == "pem":
            print(public_key_to_pem(key).rstrip("\n"))
        elif args.format == "openssh":
            print(public_key_to_openssh(key, "adbkey"))
        else:
            print(f"unsupported format '{args.format}'", file=sys.stderr)
            return 1
    except PublicKeyError as exc:
        print(f"failed to convert public key: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())