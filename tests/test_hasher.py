"""
Tests for the personalized BLAKE2b hasher.
"""
import hashlib

import pytest
from ckb_smt.core.config import SmtConfig
from ckb_smt.core.hasher import DEFAULT_PERSONALIZATION, Blake2bHasher, hash_chunks


def test_hash_known_leaf(fixed_vectors):
    """Test a single leaf hash matches the recorded root of a one-leaf tree."""
    key, value, root = fixed_vectors[0]
    digest = hash_chunks(bytes.fromhex(key[2:]), bytes.fromhex(value[2:]))
    assert digest.hex() == root[2:]


def test_hash_chunks_are_concatenated():
    """Test chunks are fed raw, so splitting points do not matter."""
    assert hash_chunks(b"ab", b"cd") == hash_chunks(b"abcd")
    assert hash_chunks(b"a", b"bcd") == hash_chunks(b"abc", b"d")


def test_hash_uses_personalization():
    """Test the digest is BLAKE2b-256 personalized with ckb-default-hash."""
    expected = hashlib.blake2b(b"data", digest_size=32, person=b"ckb-default-hash").digest()
    assert DEFAULT_PERSONALIZATION == b"ckb-default-hash"
    assert hash_chunks(b"data") == expected
    assert len(expected) == 32
    assert Blake2bHasher(b"other").digest(b"data") != expected


def test_hasher_from_config():
    hasher = Blake2bHasher.from_config(SmtConfig(hash_personalization="test-domain"))
    assert hasher.personalization == b"test-domain"


def test_hasher_rejects_long_personalization():
    with pytest.raises(ValueError):
        Blake2bHasher(b"x" * 17)
