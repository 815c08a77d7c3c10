"""
Sparse Merkle Tree implementation for 256-bit key-value state commitments.

This module provides a Sparse Merkle Tree (SMT) over 32-byte keys and
values, producing a 32-byte root hash and compact membership proofs.

Only non-empty subtrees are cached. A subtree with a single occupied child
has the same hash as that child, so a lone leaf's hash passes straight up
until it meets a non-empty sibling. Proofs carry only the siblings that
actually exist, plus a mask recording their depths.
"""

import logging
from typing import Dict, Iterator, Optional

from ckb_smt.core.bits import KEY_BITS, Address, clear_bit, flip_bit, is_bit_set, is_zero, \
    sibling_address
from ckb_smt.core.codec import BytesLike, require_h256, to_bytes, to_hex
from ckb_smt.core.config import config
from ckb_smt.core.hasher import Blake2bHasher
from ckb_smt.core.models.proof import EMPTY_ROOT_HASH, SmtProof, verify_proof_length

logger = logging.getLogger(__name__)


class SparseMerkleTree:
    """
    A Sparse Merkle Tree over 32-byte keys and values.

    The tree keeps two maps:
    - leaves: key to value, holding only non-zero values
    - branches: (depth, prefix) to the hash of that non-empty subtree

    Writing the all-zero value deletes a key. The tree is not thread-safe;
    callers serialize mutations or work on a ``copy()``.
    """

    EMPTY_ROOT_HASH = EMPTY_ROOT_HASH

    def __init__(self, hasher: Optional[Blake2bHasher] = None):
        """Initialize an empty Sparse Merkle Tree.

        Args:
            hasher: Hash backend, defaults to BLAKE2b with the configured
                personalization
        """
        self.hasher = hasher or Blake2bHasher.from_config(config)

        # Map from (depth, prefix) to the hash of a non-empty subtree
        self.branches: Dict[Address, bytes] = {}

        # Map from leaf key to value
        self.leaves: Dict[bytes, bytes] = {}

        self._root_hash = self.EMPTY_ROOT_HASH

    def _merge(self, key: bytes, depth: int, current_hash: bytes, sibling_hash: bytes) -> bytes:
        """Hash a subtree with its sibling at ``depth``.

        Bit ``depth`` of the key says whether the subtree is the right child.
        """
        if is_bit_set(key, depth):
            return self.hasher.digest(sibling_hash, current_hash)
        return self.hasher.digest(current_hash, sibling_hash)

    def current_root_hash(self) -> bytes:
        """Get the current root hash of the tree.

        Returns:
            bytes: 32-byte root, all zero for an empty tree
        """
        return self._root_hash

    def fetch(self, key: BytesLike) -> Optional[bytes]:
        """Get the value stored for a key.

        Args:
            key: 32-byte key

        Returns:
            Optional[bytes]: Value or None if the key is absent
        """
        return self.leaves.get(require_h256(key, "key"))

    def update(self, key: BytesLike, value: BytesLike) -> None:
        """Add or update a leaf in the tree.

        Args:
            key: 32-byte key
            value: 32-byte value, all zero to delete the key

        Raises:
            InvalidLengthError: If key or value is not 32 bytes
        """
        key = require_h256(key, "key")
        value = require_h256(value, "value")
        if is_zero(value):
            self.delete(key)
            return

        self.leaves[key] = value

        current_hash = self.hasher.digest(key, value)
        current_key = key
        for depth in range(KEY_BITS - 1, -1, -1):
            self.branches[sibling_address(current_key, depth + 1)] = current_hash
            sibling_hash = self.branches.get(
                sibling_address(flip_bit(current_key, depth), depth + 1)
            )
            if sibling_hash is not None:
                current_hash = self._merge(key, depth, current_hash, sibling_hash)
            current_key = clear_bit(current_key, depth)

        self._root_hash = current_hash
        logger.debug(f"Updated {to_hex(key)}, root is now {to_hex(self._root_hash)}")

    def delete(self, key: BytesLike) -> None:
        """Remove a leaf from the tree.

        Removing an absent key leaves the root unchanged. Branch entries on
        the key's path are recomputed, and dropped once their subtree is empty.

        Args:
            key: 32-byte key

        Raises:
            InvalidLengthError: If key is not 32 bytes
        """
        key = require_h256(key, "key")
        self.leaves.pop(key, None)

        current_hash = None
        current_key = key
        for depth in range(KEY_BITS - 1, -1, -1):
            address = sibling_address(current_key, depth + 1)
            if current_hash is None:
                self.branches.pop(address, None)
            else:
                self.branches[address] = current_hash

            sibling_hash = self.branches.get(
                sibling_address(flip_bit(current_key, depth), depth + 1)
            )
            if sibling_hash is not None:
                if current_hash is None:
                    # Other side is empty now, the sibling moves up
                    current_hash = sibling_hash
                else:
                    current_hash = self._merge(key, depth, current_hash, sibling_hash)
            current_key = clear_bit(current_key, depth)

        self._root_hash = current_hash if current_hash is not None else self.EMPTY_ROOT_HASH
        logger.debug(f"Deleted {to_hex(key)}, root is now {to_hex(self._root_hash)}")

    def proof(self, key: BytesLike) -> bytes:
        """Generate a Merkle proof for the given key.

        The key need not be present; the same proof shows membership with
        its value or non-membership with None or the all-zero value.

        Args:
            key: 32-byte key

        Returns:
            bytes: 32-byte mask followed by the sibling hashes, leaf-adjacent first
        """
        key = require_h256(key, "key")

        siblings = []
        current_key = key
        for depth in range(KEY_BITS - 1, -1, -1):
            sibling_hash = self.branches.get(
                sibling_address(flip_bit(current_key, depth), depth + 1)
            )
            if sibling_hash is not None:
                siblings.append((depth, sibling_hash))
            current_key = clear_bit(current_key, depth)

        return SmtProof.from_siblings(siblings).to_bytes()

    @staticmethod
    def verify(
        key: BytesLike,
        value: Optional[BytesLike],
        proof: BytesLike,
        root_hash: BytesLike,
        hasher: Optional[Blake2bHasher] = None,
    ) -> bool:
        """Verify a Merkle proof against a specific root hash.

        Args:
            key: 32-byte key
            value: 32-byte value, None or all zero to check non-membership.
                A passing non-membership check is only as trustworthy as the
                source of the proof, since a crafted proof can make any key
                look absent.
            proof: Proof bytes from ``proof``
            root_hash: Root hash to verify against
            hasher: Hash backend, defaults to BLAKE2b with the configured
                personalization

        Returns:
            bool: True if the proof leads to root_hash

        Raises:
            InvalidLengthError: If key, value or root_hash is not 32 bytes
            MalformedProofError: If the proof is shorter than 32 bytes
            InvalidProofLengthError: If the proof length disagrees with its mask
        """
        key = require_h256(key, "key")
        if value is not None:
            value = require_h256(value, "value")
        root_hash = require_h256(root_hash, "root hash")
        hasher = hasher or Blake2bHasher.from_config(config)

        calculated_root = SmtProof.from_bytes(proof).compute_root(key, value, hasher)
        if calculated_root != root_hash:
            logger.debug(
                f"Proof for {to_hex(key)} leads to {to_hex(calculated_root)}, "
                f"expected {to_hex(root_hash)}"
            )
            return False
        return True

    verify_proof_length = staticmethod(verify_proof_length)

    def verify_against_root(
        self, key: BytesLike, value: Optional[BytesLike], proof: BytesLike
    ) -> bool:
        """Verify a proof against this tree's current root."""
        return self.verify(key, value, proof, self._root_hash, self.hasher)

    def copy(self) -> "SparseMerkleTree":
        """Return an independent snapshot of the tree."""
        snapshot = SparseMerkleTree(hasher=self.hasher)
        snapshot.branches = dict(self.branches)
        snapshot.leaves = dict(self.leaves)
        snapshot._root_hash = self._root_hash
        return snapshot

    def keys(self) -> Iterator[bytes]:
        return iter(self.leaves)

    def __len__(self) -> int:
        return len(self.leaves)

    def __contains__(self, key: object) -> bool:
        try:
            return to_bytes(key) in self.leaves
        except (TypeError, ValueError):
            return False
