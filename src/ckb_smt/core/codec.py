"""
Conversion between hex strings and raw bytes at the tree boundary.

Keys, values, roots and proofs may be given either as raw bytes or as hex
strings (case-insensitive, optional ``0x`` prefix). Inside the tree
everything is ``bytes``.
"""

import binascii
import logging
from typing import Union

from ckb_smt.core.errors import InvalidLengthError

logger = logging.getLogger(__name__)

H256_SIZE = 32

BytesLike = Union[bytes, bytearray, memoryview, str]


def to_bytes(data: BytesLike) -> bytes:
    """Convert bytes or a hex string to bytes.

    Args:
        data: Raw bytes or a hex string, with or without 0x

    Returns:
        bytes: The decoded bytes

    Raises:
        ValueError: If a string is not valid hex
        TypeError: If data is neither bytes-like nor a string
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        text = data[2:] if data[:2].lower() == "0x" else data
        try:
            return binascii.unhexlify(text)
        except binascii.Error as e:
            raise ValueError(f"Invalid hex string: {data!r}") from e
    raise TypeError(f"Expected bytes or hex string, got {type(data).__name__}")


def to_hex(data: BytesLike, prefix: bool = True) -> str:
    """Encode bytes as lowercase hex, 0x-prefixed by default."""
    encoded = to_bytes(data).hex()
    return f"0x{encoded}" if prefix else encoded


def require_h256(data: BytesLike, name: str = "value") -> bytes:
    """Decode data and check that it is exactly 32 bytes.

    Raises:
        InvalidLengthError: If the decoded data is not 32 bytes
    """
    raw = to_bytes(data)
    if len(raw) != H256_SIZE:
        logger.warning(f"Rejected {name} of {len(raw)} bytes")
        raise InvalidLengthError(f"{name} must be {H256_SIZE} bytes, got {len(raw)}")
    return raw
