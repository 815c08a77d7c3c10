"""
Compact sparse Merkle proof encoding.

A proof is a 32-byte mask followed by one 32-byte sibling hash per set bit
in the mask. Mask bit ``i`` (most significant bit first) marks a sibling at
trie depth ``255 - i``, so siblings are stored leaf-adjacent first.
"""

from typing import Optional, List, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from ckb_smt.core.bits import KEY_BITS, is_bit_set, is_zero, popcount, set_bit
from ckb_smt.core.codec import H256_SIZE, BytesLike, require_h256, to_bytes, to_hex
from ckb_smt.core.errors import InvalidProofLengthError, MalformedProofError
from ckb_smt.core.hasher import Blake2bHasher, default_hasher

MASK_SIZE = 32
EMPTY_ROOT_HASH = bytes(H256_SIZE)


def verify_proof_length(proof: BytesLike) -> bool:
    """Check that a proof's length matches the popcount of its mask.

    Args:
        proof: Encoded proof bytes

    Returns:
        bool: True if the proof is exactly 32 + 32 * popcount(mask) bytes
    """
    data = to_bytes(proof)
    if len(data) < MASK_SIZE:
        return False
    return len(data) == MASK_SIZE + H256_SIZE * popcount(data[:MASK_SIZE])


class SmtProof(BaseModel):
    mask: bytes = Field(..., description="Bitmap of trie depths that carry a sibling")
    siblings: Tuple[bytes, ...] = Field(
        default=(), description="Sibling hashes, leaf-adjacent first"
    )

    model_config = {"frozen": True}

    @field_validator("mask")
    def validate_mask(cls, value):
        if len(value) != MASK_SIZE:
            raise ValueError(f"Mask must be {MASK_SIZE} bytes")
        return value

    @field_validator("siblings")
    def validate_siblings(cls, value):
        for sibling in value:
            if len(sibling) != H256_SIZE:
                raise ValueError(f"Sibling hashes must be {H256_SIZE} bytes")
        return value

    @model_validator(mode="after")
    def validate_sibling_count(self):
        if len(self.siblings) != popcount(self.mask):
            raise ValueError("Number of siblings does not match the mask")
        return self

    @classmethod
    def from_siblings(cls, siblings: List[Tuple[int, bytes]]) -> "SmtProof":
        """Build a proof from (depth, hash) pairs ordered leaf-adjacent first."""
        mask = bytes(MASK_SIZE)
        for depth, _ in siblings:
            mask = set_bit(mask, KEY_BITS - 1 - depth)
        return cls(mask=mask, siblings=tuple(sibling for _, sibling in siblings))

    @classmethod
    def from_bytes(cls, data: BytesLike) -> "SmtProof":
        """Parse an encoded proof.

        Raises:
            MalformedProofError: If the proof is shorter than its mask
            InvalidProofLengthError: If the trailing bytes disagree with the mask
        """
        data = to_bytes(data)
        if len(data) < MASK_SIZE:
            raise MalformedProofError(
                f"Proof must be at least {MASK_SIZE} bytes, got {len(data)}"
            )
        if not verify_proof_length(data):
            raise InvalidProofLengthError(
                f"Proof of {len(data)} bytes does not match a mask with "
                f"{popcount(data[:MASK_SIZE])} siblings"
            )
        siblings = tuple(
            data[offset:offset + H256_SIZE]
            for offset in range(MASK_SIZE, len(data), H256_SIZE)
        )
        return cls(mask=data[:MASK_SIZE], siblings=siblings)

    @classmethod
    def from_hex(cls, text: str) -> "SmtProof":
        return cls.from_bytes(text)

    def to_bytes(self) -> bytes:
        return self.mask + b"".join(self.siblings)

    def to_hex(self) -> str:
        return to_hex(self.to_bytes())

    def depths(self) -> List[int]:
        """Return the trie depths that carry a sibling, leaf-adjacent first."""
        return [
            KEY_BITS - 1 - offset
            for offset in range(KEY_BITS)
            if is_bit_set(self.mask, offset)
        ]

    def compute_root(
        self,
        key: BytesLike,
        value: Optional[BytesLike],
        hasher: Optional[Blake2bHasher] = None,
    ) -> bytes:
        """Replay the proof from a leaf up to the root.

        A missing or all-zero value starts from an empty subtree and the first
        sibling is promoted instead of combined. Anyone can build a proof that
        passes this way for any key, including a present one, so a
        non-membership result is only as trustworthy as the proof's source.

        Args:
            key: 32-byte key
            value: 32-byte value, None or all zero for non-membership
            hasher: Hash backend, defaults to the "ckb-default-hash" BLAKE2b

        Returns:
            bytes: The root hash implied by this proof
        """
        key = require_h256(key, "key")
        if value is not None:
            value = require_h256(value, "value")
        hasher = hasher or default_hasher

        if value is None or is_zero(value):
            current_hash = None
        else:
            current_hash = hasher.digest(key, value)
        siblings = iter(self.siblings)
        for offset in range(KEY_BITS):
            if not is_bit_set(self.mask, offset):
                continue
            sibling = next(siblings)
            if current_hash is None:
                current_hash = sibling
            elif is_bit_set(key, KEY_BITS - 1 - offset):
                current_hash = hasher.digest(sibling, current_hash)
            else:
                current_hash = hasher.digest(current_hash, sibling)

        return current_hash if current_hash is not None else EMPTY_ROOT_HASH
