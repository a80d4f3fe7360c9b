"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification
for address lists.

This module provides:
- MerkleTree / MerkleProof: immutable tree and proof values
- build_tree: Build a tree from addresses
- prove_membership: Generate a proof for one address
- verify: Check a proof against a root with no tree at hand
- export_proof / export_tree_proofs: Portable JSON proof documents

Canonical Commitment Rules:
1. Leaf hashing: keccak256(address bytes), address lower-cased
2. Parent hashing: keccak256(min(a, b) + max(a, b))
3. Odd node at any level: promoted unchanged
4. Leaves deduplicated and sorted, so input order never changes the root
5. Empty input: EmptyInputException
6. Single leaf: root = leaf

Usage:
    from core.merkle import build_tree, prove_membership, verify

    tree = build_tree(addresses)
    proof = prove_membership(tree, addresses[2])
    assert verify(tree.root, proof.siblings, addresses[2])
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    leaf_hash,
    merkle_parent,
    build_tree,
    root_of,
    prove_membership,
    verify,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
    export_proof,
    export_tree_proofs,
    verify_proof_document,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "leaf_hash",
    "merkle_parent",
    "build_tree",
    "root_of",
    "prove_membership",
    "verify",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Documents
    "export_proof",
    "export_tree_proofs",
    "verify_proof_document",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
