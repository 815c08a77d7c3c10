from typing import Optional, List, Tuple

from pydantic import BaseModel, Field

from ckb_smt.core.codec import BytesLike, require_h256
from ckb_smt.core.hasher import Blake2bHasher
from ckb_smt.core.models.proof import SmtProof


class StateChangesProof(BaseModel):
    read_values: List[Tuple[bytes, bytes]] = Field(
        default_factory=list, description="(key, value) pairs read, sorted by key"
    )
    read_proofs: List[bytes] = Field(
        default_factory=list, description="Proof for each read pair"
    )
    write_values: List[Tuple[bytes, bytes, bytes]] = Field(
        default_factory=list, description="(key, old value, new value), sorted by key"
    )
    write_old_proofs: List[bytes] = Field(
        default_factory=list, description="Proof of each old value before the writes"
    )

    def verify(self, root_hash: BytesLike, hasher: Optional[Blake2bHasher] = None) -> bool:
        """Check every read pair and every old written value against a root.

        Args:
            root_hash: Root hash of the tree before the writes
            hasher: Hash backend, defaults to the "ckb-default-hash" BLAKE2b

        Returns:
            bool: True if all proofs match root_hash
        """
        root_hash = require_h256(root_hash, "root hash")
        if len(self.read_proofs) != len(self.read_values):
            return False
        if len(self.write_old_proofs) != len(self.write_values):
            return False

        checks = [
            (key, value, proof)
            for (key, value), proof in zip(self.read_values, self.read_proofs)
        ]
        checks.extend(
            (key, old_value, proof)
            for (key, old_value, _), proof in zip(self.write_values, self.write_old_proofs)
        )
        return all(
            SmtProof.from_bytes(proof).compute_root(key, value, hasher) == root_hash
            for key, value, proof in checks
        )
