"""
Bit-level addressing over 256-bit keys.

Bit 0 is the most significant bit of the first byte and bit 255 the least
significant bit of the last byte, so bit ``i`` of a key is the branch taken
at trie depth ``i``. None of these helpers modify their input.
"""

from typing import Tuple

KEY_BITS = 256

Address = Tuple[int, bytes]


def _check_offset(buffer: bytes, offset: int) -> None:
    if not 0 <= offset < len(buffer) * 8:
        raise IndexError(f"Bit offset {offset} out of range for {len(buffer)} bytes")


def _mask(offset: int) -> int:
    return 0x80 >> (offset % 8)


def is_bit_set(buffer: bytes, offset: int) -> bool:
    _check_offset(buffer, offset)
    return buffer[offset // 8] & _mask(offset) != 0


def set_bit(buffer: bytes, offset: int) -> bytes:
    _check_offset(buffer, offset)
    array = bytearray(buffer)
    array[offset // 8] |= _mask(offset)
    return bytes(array)


def clear_bit(buffer: bytes, offset: int) -> bytes:
    _check_offset(buffer, offset)
    array = bytearray(buffer)
    array[offset // 8] &= 0xFF ^ _mask(offset)
    return bytes(array)


def flip_bit(buffer: bytes, offset: int) -> bytes:
    _check_offset(buffer, offset)
    array = bytearray(buffer)
    array[offset // 8] ^= _mask(offset)
    return bytes(array)


def sibling_address(prefix: bytes, depth: int) -> Address:
    """Build the node cache key for the subtree at ``depth`` holding ``prefix``.

    Args:
        prefix: Key with every bit at index >= depth cleared
        depth: Trie depth of the subtree root, 0 to 256

    Returns:
        Address: (depth, prefix) tuple, compared byte-exactly
    """
    if not 0 <= depth <= KEY_BITS:
        raise IndexError(f"Depth {depth} out of range")
    return depth, bytes(prefix)


def address_bytes(prefix: bytes, depth: int) -> bytes:
    """Flat form of an address: 4-byte big-endian depth followed by the prefix."""
    depth, prefix = sibling_address(prefix, depth)
    return depth.to_bytes(4, "big") + prefix


def is_zero(buffer: bytes) -> bool:
    return not any(buffer)


def popcount(buffer: bytes) -> int:
    return sum(bin(byte).count("1") for byte in buffer)
