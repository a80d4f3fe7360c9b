"""
Merkle Proofs Convenience Wrappers
Class-based interfaces and portable proof documents.

This module provides:
- MerkleProver: Build trees and generate proofs from address lists
- MerkleVerifier: Verify proofs from raw components or documents
- export_proof / export_tree_proofs: JSON-ready proof documents
- verify_proof_document: Check a ProofDocument with no tree at hand

These are convenience wrappers around the functions in merkle_tree.py.
"""
from __future__ import annotations

from typing import Sequence

from core.merkle.merkle_tree import (
    HashLike,
    MerkleProof,
    MerkleTree,
    build_tree,
    prove_membership,
    verify,
    verify_merkle_proof,
)
from core.schemas.proofs import AddressProof, ProofDocument, TreeProofsDocument


def export_proof(tree: MerkleTree, address: str) -> ProofDocument:
    """
    Build the portable proof document for one member.

    Raises:
        NotFoundException: If the address is not in the tree
    """
    proof = prove_membership(tree, address)
    return ProofDocument(
        address=proof.address,
        proof=proof.to_hex(),
        merkle_root=proof.root_hex,
    )


def export_tree_proofs(tree: MerkleTree) -> TreeProofsDocument:
    """Build a document holding every member's proof, ordered by address."""
    rows = []
    for address in sorted(tree.addresses):
        proof = prove_membership(tree, address)
        rows.append(AddressProof(address=address, proof=proof.to_hex()))

    return TreeProofsDocument(
        merkle_root=tree.root_hex,
        list_size=tree.leaf_count,
        proofs=rows,
    )


def verify_proof_document(
    document: ProofDocument,
    root: HashLike | None = None,
) -> bool:
    """
    Verify a proof document.

    Args:
        document: The document to check
        root: Root to check against. Defaults to the root recorded in the
            document; pass the registered root to avoid trusting the
            document's own claim.
    """
    expected_root = root if root is not None else document.merkle_root
    return verify(expected_root, document.proof, document.address)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove(addresses, addresses[1])
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def compute_root(addresses: Sequence[str]) -> bytes:
        """Compute the 32-byte root for an address list."""
        return build_tree(addresses).root

    @staticmethod
    def prove(addresses: Sequence[str], address: str) -> MerkleProof:
        """
        Build the tree for ``addresses`` and prove membership of ``address``.

        Raises:
            EmptyInputException: If addresses is empty
            NotFoundException: If address is not in the list
        """
        return prove_membership(build_tree(addresses), address)

    @staticmethod
    def prove_all(addresses: Sequence[str]) -> TreeProofsDocument:
        """Build the tree and export every member's proof."""
        return export_tree_proofs(build_tree(addresses))


class MerkleVerifier:
    """Convenience class for verifying Merkle proofs."""

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a MerkleProof against the root it carries."""
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_address_in_root(
        address: str,
        siblings: Sequence[HashLike],
        root: HashLike,
    ) -> bool:
        """Verify membership from raw components."""
        return verify(root, siblings, address)

    @staticmethod
    def verify_document(
        document: ProofDocument,
        root: HashLike | None = None,
    ) -> bool:
        """Verify a ProofDocument, optionally against an external root."""
        return verify_proof_document(document, root)


__all__ = [
    "export_proof",
    "export_tree_proofs",
    "verify_proof_document",
    "MerkleProver",
    "MerkleVerifier",
]
