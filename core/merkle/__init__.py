"""
Merkle Tree and Commitments
Deterministic Merkle tree construction, incremental insertion, and
inclusion proof generation/verification over review records.

Canonical Commitment Rules:
1. Leaf hashing: sha256(encoding)
2. Parent hashing: sha256(min(left, right) + max(left, right))
3. Padding: an unmatched node is paired with itself at every level
4. Empty tree: no root; root access raises EmptyTreeError
5. Single leaf: root = combine(leaf, leaf), proof length 1

Usage:
    from core.merkle import MerkleTree, add_leaf, verify_proof

    tree = MerkleTree.build_from_leaves(ids, encodings)
    proof = tree.generate_proof(ids[0])
    assert verify_proof(encodings[0], proof, tree.root_hash)

    add_leaf(tree, "new-id", b"new encoding")
"""
from .nodes import (
    Side,
    LeafNode,
    InternalNode,
)

from .merkle_tree import (
    DUPLICATE_SUFFIX,
    ProofStep,
    ProofPath,
    BuildStats,
    MerkleTree,
    verify_proof,
    build_from_leaves,
)

from .incremental import add_leaf

from .merkle_proofs import (
    build_review_tree,
    ExistenceProver,
)


__all__ = [
    # Node model
    "Side",
    "LeafNode",
    "InternalNode",
    # Tree and proofs
    "DUPLICATE_SUFFIX",
    "ProofStep",
    "ProofPath",
    "BuildStats",
    "MerkleTree",
    "verify_proof",
    "build_from_leaves",
    # Incremental insertion
    "add_leaf",
    # Review-level helpers
    "build_review_tree",
    "ExistenceProver",
]
