"""
ProofX CLI

Command-line interface for building address-list Merkle roots, exporting
and verifying membership proofs, and managing the root registry.

Usage:
    python -m proofx_cli build 0xabc... 0xdef... --out proofs.json
    python -m proofx_cli verify --proof-file proof.json
    python -m proofx_cli registry show 0x<root>
"""

__version__ = "0.1.0"
