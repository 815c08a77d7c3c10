"""
Exceptions raised by the sparse Merkle tree.

All of these are input-validation failures raised before any state is
mutated. A proof that simply does not match a root is not an error.
"""


class SmtError(ValueError):
    """Base exception for sparse Merkle tree errors."""

    pass


class InvalidLengthError(SmtError):
    """Exception raised when a key, value or root hash is not 32 bytes."""

    pass


class MalformedProofError(SmtError):
    """Exception raised when a proof cannot be parsed."""

    pass


class InvalidProofLengthError(MalformedProofError):
    """Exception raised when a proof's length disagrees with its mask."""

    pass
