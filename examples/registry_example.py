#!/usr/bin/env python3
"""
Skynet Registry Example - Keys, Signing and Verification

Derives a per-application key from a master seed, signs a registry
entry, shows that tampering is detected, and, when a portal URL is
given, publishes the entry and fetches it back.

Run with: python examples/registry_example.py [PORTAL_URL]
"""

import sys

from skyregistry import (
    RegistryEntry,
    SignedRegistryEntry,
    SkynetClient,
    derive_child_seed,
    derive_keypair,
    gen_keypair_and_seed,
    get_registry_entry,
    set_registry_entry,
)


def main():
    print("=" * 60)
    print("Skynet Registry - Signed Entry Demonstration")
    print("=" * 60)

    _, master_seed = gen_keypair_and_seed(64)
    app_seed = derive_child_seed(master_seed, b"example-app")
    keypair = derive_keypair(app_seed)
    print(f"\nApplication key: {keypair.public.to_tagged()}")

    entry = RegistryEntry(data_key="data", data=b"hello world", revision=0)
    signed = entry.sign(keypair.private_key)
    print(f"Canonical hash:  {entry.hash().hex()}")
    print(f"Signature:       {signed.signature.hex()[:40]}...")
    print(f"Verifies:        {signed.verify(keypair.public)}")

    # Scenario: portal bumps the revision without a new signature
    tampered = SignedRegistryEntry(
        entry=RegistryEntry(entry.data_key, entry.data, entry.revision + 1),
        signature=signed.signature,
    )
    print(f"Tampered copy verifies: {tampered.verify(keypair.public)}")

    if len(sys.argv) > 1:
        print("\n" + "-" * 60)
        print(f"Publishing to {sys.argv[1]}")
        print("-" * 60)
        with SkynetClient(portal_url=sys.argv[1]) as client:
            set_registry_entry(client, keypair.public, keypair.private_key, entry)
            fetched = get_registry_entry(client, keypair.public, "data")
        print(f"Fetched revision {fetched.entry.revision}: {fetched.entry.data!r}")

    print("\n" + "=" * 60)
    print("Demonstration complete.")
    print("=" * 60)


if __name__ == "__main__":
    main()
