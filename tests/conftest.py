"""
Pytest configuration for ckb_smt tests.

This file helps pytest find and run tests correctly by setting up the Python path
and sharing the fixed key/value vectors used across test modules.
"""

import os
import sys

import pytest

# Add the src directory to the Python path to help with imports
src_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if src_root not in sys.path:
    sys.path.insert(0, src_root)

# (key, value, root after inserting this pair and all pairs before it)
FIXED_VECTORS = [
    (
        "0xa9bb945be71f0bd2757d33d2465b6387383da42f321072e47472f0c9c7428a8a",
        "0xa939a47335f777eac4c40fbc0970e25f832a24e1d55adc45a7b76d63fe364e82",
        "0x5faa7bccd1095c904fe34c99236f0734f909823d8d48b81b0b92bab531f372c1",
    ),
    (
        "0x381dc5391dab099da5e28acd1ad859a051cf18ace804d037f12819c6fbc0e18b",
        "0x9158ce9b0e11dd150ba2ae5d55c1db04b1c5986ec626f2e38a93fe8ad0b2923b",
        "0x991175c5349e2b0ea459aa541be38c14e2d238a67bb75129f0db00043b485445",
    ),
    (
        "0xe8c0265680a02b680b6cbc880348f062b825b28e237da7169aded4bcac0a04e5",
        "0x2ca41595841e46ce8e74ad749e5c3f1d17202150f99c3d8631233ebdd19b19eb",
        "0x35500363552cb7b3f51ac929b87c5b38e08555b2094bfb3b96b09271f7541f33",
    ),
]

# Proofs of each pair above against the final root
FIXED_PROOFS = {
    "0x381dc5391dab099da5e28acd1ad859a051cf18ace804d037f12819c6fbc0e18b":
        "0x0000000000000000000000000000000000000000000000000000000000000001"
        "b70128add4d8437d43aa590f4fbc4535907e420c84efe39258a61ce2e2132b33",
    "0xa9bb945be71f0bd2757d33d2465b6387383da42f321072e47472f0c9c7428a8a":
        "0x0000000000000000000000000000000000000000000000000000000000000003"
        "3f2a0a59ba1081f2d343682b200a778191a4e5838a46774eda8e1ee201c6cb2f"
        "a9cee9b111fddde5dd16c6684715587ba628bf73407e03e9db579e41af0c09b8",
    "0xe8c0265680a02b680b6cbc880348f062b825b28e237da7169aded4bcac0a04e5":
        "0x0000000000000000000000000000000000000000000000000000000000000003"
        "5faa7bccd1095c904fe34c99236f0734f909823d8d48b81b0b92bab531f372c1"
        "a9cee9b111fddde5dd16c6684715587ba628bf73407e03e9db579e41af0c09b8",
}


@pytest.fixture
def random_pairs():
    """100 distinct random keys with random non-zero values."""
    pairs = {}
    while len(pairs) < 100:
        value = os.urandom(32)
        if any(value):
            pairs[os.urandom(32)] = value
    return list(pairs.items())


@pytest.fixture
def fixed_vectors():
    return FIXED_VECTORS


@pytest.fixture
def fixed_proofs():
    return FIXED_PROOFS


@pytest.fixture
def fixed_tree():
    """Tree holding all three fixed vectors."""
    from ckb_smt.core.state_merkle import SparseMerkleTree

    tree = SparseMerkleTree()
    for key, value, _ in FIXED_VECTORS:
        tree.update(key, value)
    return tree
