"""
CLI Merkle Commands

Build trees, export proofs and verify them offline.

Usage:
    proofx build ADDR [ADDR ...] [--out proofs.json] [--json]
    proofx prove ADDR [ADDR ...] --address ADDR [--out proof.json]
    proofx verify --proof-file proof.json [--root ROOT]
    proofx verify --root ROOT --address ADDR [--proof HASH ...]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from pydantic import ValidationError

from core.merkle import build_tree, export_proof, export_tree_proofs, verify
from core.schemas.errors import InvalidInputException
from core.schemas.proofs import ProofDocument


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def _write_json(path: str, payload: str) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(payload + "\n", encoding="utf-8")
    logger.info(f"Wrote {out}")


def build_cmd(args: Namespace) -> int:
    """Build a tree and print its root; optionally write every proof."""
    tree = build_tree(args.addresses)
    logger.info(f"Built tree over {tree.leaf_count} addresses")

    summary = {
        "merkle_root": tree.root_hex,
        "list_size": tree.leaf_count,
        "depth": tree.depth,
    }

    if args.out:
        document = export_tree_proofs(tree)
        _write_json(args.out, document.model_dump_json(indent=2))
        summary["proofs_file"] = args.out

    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(f"Merkle root: {tree.root_hex}")
        print(f"Addresses:   {tree.leaf_count}")
        print(f"Depth:       {tree.depth}")
        if args.out:
            print(f"Proofs:      {args.out}")

    return EXIT_SUCCESS


def prove_cmd(args: Namespace) -> int:
    """Build a tree and export the proof for one address."""
    tree = build_tree(args.addresses)
    document = export_proof(tree, args.address)
    payload = document.model_dump_json(indent=2)

    if args.out:
        _write_json(args.out, payload)
    else:
        print(payload)

    return EXIT_SUCCESS


def _load_proof_document(path: str) -> ProofDocument:
    try:
        return ProofDocument.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except ValidationError as e:
        raise InvalidInputException(f"Invalid proof document {path}: {e}", field="proof_file") from e


def verify_cmd(args: Namespace) -> int:
    """Verify a proof; exit 0 if valid, 2 if not."""
    if args.proof_file:
        document = _load_proof_document(args.proof_file)
        root = args.root or document.merkle_root
        address = document.address
        siblings = document.proof
    else:
        if not args.root or not args.address:
            raise InvalidInputException("verify needs --proof-file, or --root and --address")
        root = args.root
        address = args.address
        siblings = args.proof or []

    ok = verify(root, siblings, address)
    logger.info(f"Verification of {address} against {root}: {'valid' if ok else 'invalid'}")

    if args.json:
        print(json.dumps({"address": address.lower(), "merkle_root": root.lower(), "valid": ok}, indent=2))
    else:
        print(f"{'VALID' if ok else 'INVALID'}: {address} against root {root}")

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
