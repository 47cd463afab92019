#!/usr/bin/env python3
"""
Skynet Registry Command Line Interface

Usage:
    skyregistry keygen [--length N | --seed-hex HEX]
    skyregistry child-seed --master-hex HEX --label TEXT
    skyregistry hash-datakey DATAKEY
    skyregistry get --public-key ed25519:HEX --data-key KEY [--hashed]
    skyregistry set --seed-hex HEX --data-key KEY --data TEXT --revision N [--hashed]
"""

import argparse
import json
import sys

from . import config
from .client import ClientOptions, SkynetClient
from .crypto import derive_child_seed, derive_keypair, gen_keypair_and_seed
from .entry import RegistryEntry
from .errors import InvalidSignatureError, SkynetError
from .hashing import normalize_data_key
from .keys import PublicKey
from .logging_config import configure_logging
from .registry import EntryOptions, get_registry_entry, set_registry_entry
from .util import hex_decode, hex_encode


def print_json(data: dict):
    print(json.dumps(data, indent=2))


def _make_client(args) -> SkynetClient:
    options = ClientOptions(
        api_key=args.api_key or config.API_KEY,
        custom_user_agent=args.user_agent or config.USER_AGENT,
    )
    return SkynetClient(portal_url=args.portal, options=options)


def _entry_options(args) -> EntryOptions:
    return EntryOptions(hashed_data_key_hex=args.hashed)


def _seed_from_hex(seed_hex: str) -> bytes:
    seed = hex_decode(seed_hex)
    if not seed:
        raise ValueError("seed must not be empty")
    return seed


def cmd_keygen(args) -> int:
    """Generate a keypair, from a new random seed or a given one."""
    if args.seed_hex is not None:
        seed = _seed_from_hex(args.seed_hex)
        keypair = derive_keypair(seed)
    else:
        keypair, seed = gen_keypair_and_seed(args.length)

    print_json({
        "seed": hex_encode(seed),
        "public_key": hex_encode(keypair.public_key),
        "public_key_tagged": keypair.public.to_tagged(),
        "private_key": hex_encode(keypair.private_key),
    })
    return 0


def cmd_child_seed(args) -> int:
    """Derive a child seed from a master seed and a label."""
    child = derive_child_seed(hex_decode(args.master_hex), args.label.encode("utf-8"))
    print_json({"child_seed": hex_encode(child)})
    return 0


def cmd_hash_datakey(args) -> int:
    """Print the on-wire form of a data key."""
    print_json({"data_key": args.data_key, "hashed_data_key": normalize_data_key(args.data_key)})
    return 0


def cmd_get(args) -> int:
    """Fetch and verify a registry entry."""
    public_key = PublicKey.from_tagged(args.public_key)
    with _make_client(args) as client:
        try:
            signed = get_registry_entry(client, public_key, args.data_key, _entry_options(args))
        except InvalidSignatureError as e:
            print(f"\n✗ {e}", file=sys.stderr)
            return 1
        except SkynetError as e:
            print(f"\n✗ Fetch failed: {e}", file=sys.stderr)
            return 1

    print_json(signed.to_dict())
    print("\n✓ Signature verified", file=sys.stderr)
    return 0


def cmd_set(args) -> int:
    """Derive keys from a seed and publish an entry."""
    keypair = derive_keypair(_seed_from_hex(args.seed_hex))
    entry = RegistryEntry(
        data_key=args.data_key,
        data=args.data.encode("utf-8"),
        revision=args.revision,
    )
    with _make_client(args) as client:
        try:
            signed = set_registry_entry(
                client, keypair.public, keypair.private_key, entry, _entry_options(args)
            )
        except SkynetError as e:
            print(f"\n✗ Publish failed: {e}", file=sys.stderr)
            return 1

    result = signed.to_dict()
    result["public_key"] = keypair.public.to_tagged()
    print_json(result)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skyregistry",
        description="Skynet signed registry client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skyregistry keygen
  skyregistry hash-datakey data
  skyregistry set --seed-hex 00ff... --data-key data --data "hello world" --revision 0
  skyregistry get --public-key ed25519:ab12... --data-key data
        """
    )
    parser.add_argument("--portal", default=config.PORTAL_URL, help="Portal URL")
    parser.add_argument("--api-key", help="Portal API key")
    parser.add_argument("--user-agent", help="Custom User-Agent header")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Log level")
    parser.add_argument("--log-json", action="store_true", default=config.LOG_JSON,
                        help="Emit JSON log lines")
    parser.add_argument("--log-file", help="Also write log lines to this file")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # keygen
    keygen_parser = subparsers.add_parser("keygen", help="Generate a keypair")
    keygen_parser.add_argument("-n", "--length", type=int, default=config.DEFAULT_SEED_LENGTH,
                               help="Seed length in bytes")
    keygen_parser.add_argument("-s", "--seed-hex", help="Derive from this seed instead")

    # child-seed
    child_parser = subparsers.add_parser("child-seed", help="Derive a child seed")
    child_parser.add_argument("-m", "--master-hex", required=True, help="Master seed as hex")
    child_parser.add_argument("-l", "--label", required=True, help="Child label")

    # hash-datakey
    hash_parser = subparsers.add_parser("hash-datakey", help="Hash a data key")
    hash_parser.add_argument("data_key", help="Raw data key")

    # get
    get_parser = subparsers.add_parser("get", help="Fetch and verify an entry")
    get_parser.add_argument("-p", "--public-key", required=True, help="ed25519:<hex> public key")
    get_parser.add_argument("-k", "--data-key", required=True, help="Data key")
    get_parser.add_argument("--hashed", action="store_true", help="Data key is already hashed hex")

    # set
    set_parser = subparsers.add_parser("set", help="Sign and publish an entry")
    set_parser.add_argument("-s", "--seed-hex", required=True, help="Seed as hex")
    set_parser.add_argument("-k", "--data-key", required=True, help="Data key")
    set_parser.add_argument("-d", "--data", required=True, help="Entry data (UTF-8 text)")
    set_parser.add_argument("-r", "--revision", required=True, type=int, help="Revision")
    set_parser.add_argument("--hashed", action="store_true", help="Data key is already hashed hex")

    return parser


COMMANDS = {
    "keygen": cmd_keygen,
    "child-seed": cmd_child_seed,
    "hash-datakey": cmd_hash_datakey,
    "get": cmd_get,
    "set": cmd_set,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 2

    level = "DEBUG" if config.is_debug() else args.log_level
    configure_logging(level=level, json_format=args.log_json, log_file=args.log_file)

    try:
        return COMMANDS[args.command](args)
    except (ValueError, TypeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
