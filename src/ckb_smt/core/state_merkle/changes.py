"""
Read and write sets recorded against a sparse Merkle tree.

A host replaying a program against the tree records each key it reads and
each key it writes here. The recorded writes can then be previewed,
committed, or turned into proofs that a third party checks against the
root published before the writes.
"""

import logging
from typing import Dict

from ckb_smt.core.codec import BytesLike, require_h256, to_hex
from ckb_smt.core.models.changes import StateChangesProof
from ckb_smt.core.state_merkle.smt import SparseMerkleTree

logger = logging.getLogger(__name__)

ZERO_VALUE = bytes(32)


class StateChanges:
    """Values read from and written to a tree during one state transition."""

    def __init__(self):
        self.read_values: Dict[bytes, bytes] = {}
        self.write_values: Dict[bytes, bytes] = {}

    def record_read(self, key: BytesLike, value: BytesLike) -> None:
        self.read_values[require_h256(key, "key")] = require_h256(value, "value")

    def record_write(self, key: BytesLike, value: BytesLike) -> None:
        """Record a write; the all-zero value records a deletion."""
        self.write_values[require_h256(key, "key")] = require_h256(value, "value")

    def _apply(self, tree: SparseMerkleTree) -> None:
        for key in sorted(self.write_values):
            tree.update(key, self.write_values[key])

    def committed_root_hash(self, tree: SparseMerkleTree) -> bytes:
        """Root the tree would have after the writes, leaving the tree untouched.

        Args:
            tree: Tree the writes apply to

        Returns:
            bytes: Root hash after the writes
        """
        snapshot = tree.copy()
        self._apply(snapshot)
        return snapshot.current_root_hash()

    def commit(self, tree: SparseMerkleTree) -> None:
        """Apply the recorded writes to the tree."""
        self._apply(tree)
        logger.info(
            f"Committed {len(self.write_values)} writes, root is now "
            f"{to_hex(tree.current_root_hash())}"
        )

    def generate_proofs(self, tree: SparseMerkleTree) -> StateChangesProof:
        """Prove the read values and the pre-write values of written keys.

        Must be called before ``commit`` so the proofs match the old root.
        Keys that were absent before the write get a non-membership proof
        with an all-zero old value.

        Args:
            tree: Tree in its state before the writes

        Returns:
            StateChangesProof: Sorted pairs and their proofs
        """
        read_values = sorted(self.read_values.items())
        write_values = [
            (key, tree.fetch(key) or ZERO_VALUE, self.write_values[key])
            for key in sorted(self.write_values)
        ]
        return StateChangesProof(
            read_values=read_values,
            read_proofs=[tree.proof(key) for key, _ in read_values],
            write_values=write_values,
            write_old_proofs=[tree.proof(key) for key, _, _ in write_values],
        )
