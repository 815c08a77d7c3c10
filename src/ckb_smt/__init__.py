"""
Sparse Merkle Tree with compact proofs over 32-byte keys and values.
"""
from ckb_smt.core.config import SmtConfig, config, configure_logging, load_config_from_env
from ckb_smt.core.errors import SmtError, InvalidLengthError, MalformedProofError, \
    InvalidProofLengthError
from ckb_smt.core.hasher import Blake2bHasher, hash_chunks
from ckb_smt.core.models.changes import StateChangesProof
from ckb_smt.core.models.proof import SmtProof, verify_proof_length
from ckb_smt.core.state_merkle import SparseMerkleTree, StateChanges

__all__ = [
    "SparseMerkleTree",
    "StateChanges",
    "StateChangesProof",
    "SmtProof",
    "Blake2bHasher",
    "hash_chunks",
    "verify_proof_length",
    "SmtConfig",
    "config",
    "configure_logging",
    "load_config_from_env",
    "SmtError",
    "InvalidLengthError",
    "MalformedProofError",
    "InvalidProofLengthError",
]
