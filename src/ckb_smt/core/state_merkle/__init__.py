"""
State Merkle Tree package for 256-bit key-value state commitments.
"""
from ckb_smt.core.state_merkle.smt import SparseMerkleTree
from ckb_smt.core.state_merkle.changes import StateChanges

__all__ = ["SparseMerkleTree", "StateChanges"]
