"""
Key derivation tests.

Determinism of keypairs, child seed properties, and the injected
entropy source. Pinned vectors were computed independently with
OpenSSL (PBKDF2-HMAC-SHA256, Ed25519) and b2sum (BLAKE2b).
"""

import unittest

from skyregistry import (
    EntropySource,
    KeyPair,
    derive_child_seed,
    derive_keypair,
    gen_keypair_and_seed,
    generate_seed,
)
from skyregistry.crypto import SystemEntropy

# bytes 0x00..0x3f
MASTER_SEED = bytes(range(64))

EXPECTED_PUBLIC_KEY = bytes.fromhex(
    "7c6206111e2c7e53383c269b8a07b141f37315558919b2a20ca34780746918e1"
)
EXPECTED_DERIVED_KEY = bytes.fromhex(
    "a3d734a85170bc77f22a78c1fad8d2b35b10ebeb1bf6b47fea73f6648dd05046"
)
EXPECTED_CHILD_FOO = bytes.fromhex(
    "3acf759960a9ddd797e100d9287338104675f9f20d52ddf94ada30a813281dac"
    "c99570a51822482b4a6139ffd6a04f29ab932b01c226efa4344a1bb15a2c462c"
)


class CountingEntropy(EntropySource):
    """Deterministic entropy: 0, 1, 2, ... wrapping at 256."""

    def __init__(self):
        self.calls = 0

    def fill_bytes(self, length: int) -> bytes:
        self.calls += 1
        return bytes(i % 256 for i in range(length))


class ShortEntropy(EntropySource):
    def fill_bytes(self, length: int) -> bytes:
        return b"\x00" * (length - 1)


class TestGenerateSeed(unittest.TestCase):

    def test_length(self):
        self.assertEqual(len(generate_seed(64)), 64)
        self.assertEqual(len(generate_seed(1)), 1)

    def test_system_entropy_differs(self):
        self.assertNotEqual(generate_seed(32), generate_seed(32))

    def test_injected_entropy(self):
        """A test double replaces the OS random source."""
        entropy = CountingEntropy()
        self.assertEqual(generate_seed(64, entropy), MASTER_SEED)
        self.assertEqual(entropy.calls, 1)

    def test_rejects_non_positive_length(self):
        with self.assertRaises(ValueError):
            generate_seed(0)

    def test_short_entropy_is_fatal(self):
        with self.assertRaises(RuntimeError):
            generate_seed(16, ShortEntropy())

    def test_system_entropy_is_default_source(self):
        self.assertEqual(len(SystemEntropy().fill_bytes(8)), 8)


class TestDeriveKeypair(unittest.TestCase):

    def test_pinned_vector(self):
        """PBKDF2 stretch then ed25519 expansion matches an independent computation."""
        keypair = derive_keypair(MASTER_SEED)
        self.assertEqual(keypair.public_key, EXPECTED_PUBLIC_KEY)
        self.assertEqual(keypair.private_key, EXPECTED_DERIVED_KEY + EXPECTED_PUBLIC_KEY)

    def test_deterministic(self):
        seed = generate_seed(64)
        self.assertEqual(derive_keypair(seed), derive_keypair(seed))

    def test_distinct_seeds_distinct_keys(self):
        self.assertNotEqual(
            derive_keypair(b"seed one").public_key,
            derive_keypair(b"seed two").public_key,
        )

    def test_arbitrary_seed_lengths(self):
        for length in (1, 7, 32, 64, 200):
            keypair = derive_keypair(b"\xaa" * length)
            self.assertEqual(len(keypair.public_key), 32)
            self.assertEqual(len(keypair.private_key), 64)

    def test_gen_keypair_and_seed_roundtrip(self):
        keypair, seed = gen_keypair_and_seed(64)
        self.assertEqual(len(seed), 64)
        self.assertEqual(derive_keypair(seed), keypair)

    def test_tagged_public_key(self):
        keypair = derive_keypair(MASTER_SEED)
        self.assertEqual(keypair.public.to_tagged(), "ed25519:" + EXPECTED_PUBLIC_KEY.hex())

    def test_repr_hides_private_key(self):
        keypair = derive_keypair(MASTER_SEED)
        self.assertNotIn(keypair.private_key.hex(), repr(keypair))
        self.assertIn("redacted", repr(keypair))

    def test_keypair_rejects_bad_lengths(self):
        with self.assertRaises(ValueError):
            KeyPair(public_key=b"\x00" * 31, private_key=b"\x00" * 64)
        with self.assertRaises(ValueError):
            KeyPair(public_key=b"\x00" * 32, private_key=b"\x00" * 32)


class TestDeriveChildSeed(unittest.TestCase):

    def test_pinned_vector(self):
        self.assertEqual(derive_child_seed(MASTER_SEED, b"foo"), EXPECTED_CHILD_FOO)

    def test_same_length_as_master(self):
        for length in (1, 16, 32, 64):
            master = b"\x01" * length
            self.assertEqual(len(derive_child_seed(master, b"label")), length)

    def test_distinct_labels(self):
        self.assertNotEqual(
            derive_child_seed(MASTER_SEED, b"app-one"),
            derive_child_seed(MASTER_SEED, b"app-two"),
        )

    def test_deterministic(self):
        self.assertEqual(
            derive_child_seed(MASTER_SEED, b"app"),
            derive_child_seed(MASTER_SEED, b"app"),
        )

    def test_child_does_not_contain_master(self):
        child = derive_child_seed(MASTER_SEED, b"")
        self.assertNotEqual(child, MASTER_SEED)

    def test_child_keys_differ_from_master_keys(self):
        child = derive_child_seed(MASTER_SEED, b"app")
        self.assertNotEqual(derive_keypair(child).public_key, EXPECTED_PUBLIC_KEY)

    def test_master_size_bounds(self):
        with self.assertRaises(ValueError):
            derive_child_seed(b"", b"label")
        with self.assertRaises(ValueError):
            derive_child_seed(b"\x00" * 65, b"label")


if __name__ == "__main__":
    unittest.main()
