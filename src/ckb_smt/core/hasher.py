"""
BLAKE2b hashing for the sparse Merkle tree.

Every leaf is hashed as H(key, value) and every branch as H(left, right),
where H is BLAKE2b with a 32-byte digest and the "ckb-default-hash"
personalization. Chunks are fed to the hash one after another with no
length prefix.
"""

import hashlib

from ckb_smt.core.config import SmtConfig

DIGEST_SIZE = 32
DEFAULT_PERSONALIZATION = b"ckb-default-hash"


class Blake2bHasher:
    """A personalized BLAKE2b-256 hash backend.

    The tree only calls ``digest``, so any object with the same method can
    stand in for this one.
    """

    digest_size = DIGEST_SIZE

    def __init__(self, personalization: bytes = DEFAULT_PERSONALIZATION):
        """Initialize the hasher.

        Args:
            personalization: Up to 16 bytes of BLAKE2b personalization

        Raises:
            ValueError: If the personalization is too long
        """
        if len(personalization) > hashlib.blake2b.PERSON_SIZE:
            raise ValueError(
                f"Personalization must be at most {hashlib.blake2b.PERSON_SIZE} bytes"
            )
        self.personalization = bytes(personalization)

    @classmethod
    def from_config(cls, settings: SmtConfig) -> "Blake2bHasher":
        return cls(settings.hash_personalization.encode("ascii"))

    def new(self):
        """Return a fresh streaming hash object."""
        return hashlib.blake2b(digest_size=self.digest_size, person=self.personalization)

    def digest(self, *chunks: bytes) -> bytes:
        """Hash the chunks in order and return the 32-byte digest."""
        hasher = self.new()
        for chunk in chunks:
            hasher.update(chunk)
        return hasher.digest()

    def __repr__(self) -> str:
        return f"Blake2bHasher(personalization={self.personalization!r})"


default_hasher = Blake2bHasher()


def hash_chunks(*chunks: bytes) -> bytes:
    """Hash chunks with the default "ckb-default-hash" personalization."""
    return default_hasher.digest(*chunks)
