"""Tests for the twox and blake2b hash functions."""

import pytest

from grandma.crypto import blake2b_512, twox_64, twox_128


class TestTwox128:
    """Reference vectors for pallet and storage item name prefixes."""

    @pytest.mark.parametrize(
        "name, expected_hex",
        [
            (b"System", "26aa394eea5630e07c48ae0c9558cef7"),
            (b"Account", "b99d880ec681799c0cf30e8886371da9"),
            (b"Session", "cec5070d609dd3497f72bde07fc96ba0"),
            (b"Timestamp", "f0c365c3cf59d671eb72da0e7a4113c4"),
            (b"Now", "9f1f0515f462cdcf84e0f1d6045dfcbb"),
        ],
    )
    def test_known_vectors(self, name: bytes, expected_hex: str) -> None:
        assert twox_128(name).hex() == expected_hex

    def test_is_two_seeded_lanes(self) -> None:
        """The digest is the seed-0 lane followed by the seed-1 lane."""
        data = b"QueuedKeys"
        assert twox_128(data) == twox_64(data, 0) + twox_64(data, 1)

    def test_lanes_differ(self) -> None:
        assert twox_64(b"Session", 0) != twox_64(b"Session", 1)

    def test_length(self) -> None:
        assert len(twox_64(b"")) == 8
        assert len(twox_128(b"")) == 16


class TestBlake2b512:
    """The checksum hash used by SS58 addresses."""

    def test_digest_length(self) -> None:
        assert len(blake2b_512(b"")) == 64

    def test_empty_input_vector(self) -> None:
        """BLAKE2b-512 of the empty string (RFC 7693 test vector prefix)."""
        assert blake2b_512(b"").hex().startswith("786a02f742015903c6c6fd852552d272")

    def test_deterministic(self) -> None:
        assert blake2b_512(b"SS58PRE") == blake2b_512(b"SS58PRE")
        assert blake2b_512(b"SS58PRE") != blake2b_512(b"SS58PRF")
