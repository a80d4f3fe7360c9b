"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification
over sets of EVM addresses.

This module provides:
- MerkleTree: immutable tree value built once from an address list
- MerkleProof: inclusion proof for one address
- build_tree / prove_membership / verify / root_of

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = keccak256(20 address bytes), address lower-cased first
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b)) (sorted pairs)
3. Odd node: the last node of an odd level is promoted unchanged
4. Leaves are deduplicated and sorted by value before construction
5. Empty input: no tree, EmptyInputException
6. Single leaf: root = leaf

Determinism Notes:
- Rules 2 and 4 together make the root a function of the *set* of
  normalized addresses; input order and repeated entries never matter
- Rule 2 also means a proof is just the sibling list; no left/right flags
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from core.crypto.addresses import address_bytes, normalize_address
from core.crypto.hashing import coerce_hash, hash_sorted_pair, keccak256, to_hex
from core.schemas.errors import (
    EmptyInputException,
    InvalidInputException,
    NotFoundException,
)


HashLike = Union[bytes, str]


def leaf_hash(address: str) -> bytes:
    """
    Compute the leaf hash of an address.

    The address is validated and lower-cased, then its 20 raw bytes are
    hashed, matching ``keccak256(abi.encodePacked(address))`` on chain.

    Raises:
        InvalidInputException: If the address is malformed
    """
    return keccak256(address_bytes(address))


def merkle_parent(a: bytes, b: bytes) -> bytes:
    """Compute the parent of two sibling nodes (sorted-pair rule)."""
    return hash_sorted_pair(a, b)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single address.

    Attributes:
        address: The normalized (lowercase) member address
        leaf: The leaf hash of ``address``
        index: Position of the leaf in the sorted leaf level
        siblings: Sibling hashes from leaf level up to the root
        root: The Merkle root this proof was generated against
    """
    address: str
    leaf: bytes
    index: int
    siblings: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def to_hex(self) -> list[str]:
        """Siblings as 0x-prefixed hex strings, ready for a contract call."""
        return [to_hex(s) for s in self.siblings]

    def __len__(self) -> int:
        return len(self.siblings)


@dataclass(frozen=True)
class MerkleTree:
    """
    Immutable Merkle tree over a set of addresses.

    Build with ``build_tree``; never construct directly. Any change to the
    address list requires building a new tree.

    Attributes:
        layers: Node hashes per level; ``layers[0]`` are the sorted leaves,
            ``layers[-1]`` holds only the root
        addresses: Normalized addresses in leaf order
    """
    layers: tuple[tuple[bytes, ...], ...]
    addresses: tuple[str, ...]
    _positions: Mapping[bytes, int] = field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def root(self) -> bytes:
        """The 32-byte Merkle root."""
        return self.layers[-1][0]

    @property
    def root_hex(self) -> str:
        """The Merkle root as a 0x-prefixed hex string."""
        return to_hex(self.root)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self.layers[0]

    @property
    def leaf_count(self) -> int:
        return len(self.layers[0])

    @property
    def depth(self) -> int:
        return len(self.layers)

    def index_of(self, address: str) -> int | None:
        """Leaf position of ``address``, or None if it is not a member."""
        return self._positions.get(leaf_hash(address))

    def contains(self, address: str) -> bool:
        return self.index_of(address) is not None


def build_tree(addresses: Sequence[str]) -> MerkleTree:
    """
    Build a Merkle tree from a list of addresses.

    Algorithm:
    1. Validate and lower-case every address
    2. Hash each to a leaf, drop duplicates, sort leaves by value
    3. Pair adjacent nodes with the sorted-pair rule; promote an odd
       trailing node unchanged
    4. Repeat until a single root remains

    Example: [c, a, b] -> leaves sorted [a, b, c]
             level 1: [parent(a, b), c]
             level 2: [parent(parent(a, b), c)]

    Args:
        addresses: Address strings in any order and case

    Returns:
        An immutable MerkleTree

    Raises:
        EmptyInputException: If ``addresses`` is empty
        InvalidInputException: If any address is malformed
    """
    if isinstance(addresses, (str, bytes)):
        raise InvalidInputException(
            "Expected a sequence of addresses, got a single string",
            field="addresses",
        )

    if len(addresses) == 0:
        raise EmptyInputException()

    by_leaf: dict[bytes, str] = {}
    for address in addresses:
        normalized = normalize_address(address)
        by_leaf[leaf_hash(normalized)] = normalized

    leaves = sorted(by_leaf)
    layers: list[tuple[bytes, ...]] = [tuple(leaves)]

    current_level = leaves
    while len(current_level) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current_level) - 1, 2):
            next_level.append(merkle_parent(current_level[i], current_level[i + 1]))

        # Odd count: carry the last node up as-is
        if len(current_level) % 2 == 1:
            next_level.append(current_level[-1])

        layers.append(tuple(next_level))
        current_level = next_level

    positions = {leaf: i for i, leaf in enumerate(leaves)}
    return MerkleTree(
        layers=tuple(layers),
        addresses=tuple(by_leaf[leaf] for leaf in leaves),
        _positions=MappingProxyType(positions),
    )


def root_of(tree: MerkleTree) -> bytes:
    """Return the root of ``tree``."""
    return tree.root


def prove_membership(tree: MerkleTree, address: str) -> MerkleProof:
    """
    Generate an inclusion proof for ``address``.

    At each level the sibling is at ``index ^ 1``. A promoted odd node has
    no sibling at that level, so nothing is recorded for it.

    Raises:
        InvalidInputException: If the address is malformed
        NotFoundException: If the address is not in the tree
    """
    normalized = normalize_address(address)
    index = tree.index_of(normalized)
    if index is None:
        raise NotFoundException(
            f"Address {normalized} is not a member of tree {tree.root_hex}",
            key=normalized,
        )

    siblings: list[bytes] = []
    current_index = index
    for level in tree.layers[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2

    return MerkleProof(
        address=normalized,
        leaf=tree.leaves[index],
        index=index,
        siblings=tuple(siblings),
        root=tree.root,
    )


def _fold(leaf: bytes, siblings: Sequence[bytes]) -> bytes:
    current = leaf
    for sibling in siblings:
        current = merkle_parent(current, sibling)
    return current


def verify(
    root: HashLike,
    proof: MerkleProof | Sequence[HashLike],
    address: str,
) -> bool:
    """
    Check that ``address`` is a member of the tree committed to by ``root``.

    Needs no tree: the leaf of the normalized address is folded with each
    sibling using the sorted-pair rule and compared with ``root``.

    Args:
        root: 32-byte root as bytes or 0x-hex
        proof: A MerkleProof, or its siblings as bytes or 0x-hex
        address: The address claimed to be a member

    Returns:
        True if the recomputed root equals ``root``

    Raises:
        InvalidInputException: If the root, any sibling, or the address is
            malformed
    """
    expected_root = coerce_hash(root, field="root")

    if isinstance(proof, MerkleProof):
        raw_siblings: Sequence[HashLike] = proof.siblings
    elif isinstance(proof, (str, bytes)):
        raise InvalidInputException(
            "Proof must be a sequence of sibling hashes",
            field="proof",
        )
    else:
        raw_siblings = proof

    siblings = [coerce_hash(s, field=f"proof[{i}]") for i, s in enumerate(raw_siblings)]

    return _fold(leaf_hash(address), siblings) == expected_root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a MerkleProof against the root it carries.

    Also checks that ``proof.leaf`` really is the leaf of ``proof.address``.
    """
    if leaf_hash(proof.address) != proof.leaf:
        return False
    return _fold(proof.leaf, proof.siblings) == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels (leaves to root, inclusive) for ``num_leaves`` leaves.

    Returns 0 for an empty tree and 1 for a single leaf.
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "leaf_hash",
    "merkle_parent",
    "build_tree",
    "root_of",
    "prove_membership",
    "verify",
    "verify_merkle_proof",
    "compute_tree_depth",
]
