"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- Bottom-up batch construction from an ordered leaf list
- Inclusion proof generation by walking parent handles to the root
- Stateless inclusion proof verification
- Deterministic renaming of duplicate identifiers in batch builds

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = sha256(encoding)
2. Parent hashing: parent = sha256(min(left, right) + max(left, right)),
   so swapping two children never changes their parent
3. Padding rule: an unmatched node at any level is combined with itself,
   including a lone leaf at the bottom level
4. Empty input: a valid tree without a root; root access raises EmptyTreeError

Determinism Notes:
- Leaf order is defined by the caller and never sorted
- Duplicate identifiers become ``<id>_dup<k>`` with the smallest unused k
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence

from core.crypto.hashing import combine_hashes, hash_leaf
from core.merkle.nodes import InternalNode, LeafNode, Node, Side
from core.schemas.errors import (
    EmptyTreeError,
    NotFoundError,
    SizeMismatchError,
    StateError,
)


logger = logging.getLogger(__name__)


DUPLICATE_SUFFIX = "_dup"


@dataclass(frozen=True)
class ProofStep:
    """
    One entry of an inclusion proof.

    Attributes:
        sibling_hash: Digest of the sibling at this level
        side: Position of the proven node (not the sibling) under its parent.
            Combination is order-independent, so verification ignores it.
    """
    sibling_hash: str
    side: Side

    def to_dict(self) -> dict[str, str]:
        return {"sibling_hash": self.sibling_hash, "side": self.side.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProofStep":
        return cls(sibling_hash=str(data["sibling_hash"]), side=Side(data["side"]))


@dataclass(frozen=True)
class ProofPath:
    """Ordered proof steps from leaf to root."""
    steps: tuple[ProofStep, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> ProofStep:
        return self.steps[index]

    def to_list(self) -> list[dict[str, str]]:
        """Exchange format: ``[{"sibling_hash": ..., "side": ...}, ...]``."""
        return [step.to_dict() for step in self.steps]

    @classmethod
    def from_list(cls, data: Iterable[dict[str, Any]]) -> "ProofPath":
        return cls(steps=tuple(ProofStep.from_dict(item) for item in data))


@dataclass
class BuildStats:
    """Bookkeeping from the most recent batch build."""
    leaf_count: int = 0
    duplicate_count: int = 0
    duplicates: dict[str, int] = field(default_factory=dict)
    elapsed_ms: float = 0.0


class MerkleTree:
    """
    Binary Merkle tree over review encodings.

    Nodes are stored in an arena and addressed by integer handle.
    The identifier index maps each leaf label to its handle.

    Example:
        >>> tree = MerkleTree.build_from_leaves(["a", "b"], [b"x", b"y"])
        >>> proof = tree.generate_proof("a")
        >>> verify_proof(b"x", proof, tree.root_hash)
        True
    """

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._index: dict[str, int] = {}
        self._root: int | None = None
        self.build_stats = BuildStats()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build_from_leaves(
        cls,
        identifiers: Sequence[str],
        encodings: Sequence[bytes | str],
    ) -> "MerkleTree":
        """
        Build a tree bottom-up from parallel identifier/encoding sequences.

        Args:
            identifiers: Record identifiers, in leaf order
            encodings: Canonical record encodings, same order and length

        Returns:
            A new tree; rootless if the input is empty

        Raises:
            SizeMismatchError: If the two sequences differ in length
        """
        if len(identifiers) != len(encodings):
            raise SizeMismatchError(len(identifiers), len(encodings))

        tree = cls()
        start = time.perf_counter()
        logger.info(f"Building merkle tree with {len(identifiers)} records")

        stats = tree.build_stats
        level: list[int] = []
        for identifier, encoding in zip(identifiers, encodings):
            unique_id = identifier
            if unique_id in tree._index:
                unique_id = tree._unused_duplicate_id(identifier)
                stats.duplicates[identifier] = stats.duplicates.get(identifier, 0) + 1
                stats.duplicate_count += 1
                logger.debug(f"Renamed duplicate identifier {identifier!r} to {unique_id!r}")

            handle = tree._add_node(LeafNode(hash=hash_leaf(encoding), label=unique_id))
            tree._index[unique_id] = handle
            level.append(handle)

        if stats.duplicate_count:
            logger.warning(
                f"Duplicate identifiers renamed: {stats.duplicate_count} "
                f"across {len(stats.duplicates)} ids"
            )

        if level:
            tree._root = tree._reduce(level)

        stats.leaf_count = len(tree._index)
        stats.elapsed_ms = (time.perf_counter() - start) * 1000.0
        if tree._root is not None:
            logger.info(
                f"Merkle tree built in {stats.elapsed_ms:.1f} ms, "
                f"{stats.leaf_count} leaves, root {tree.root_hash}"
            )
        return tree

    @classmethod
    def build_from_pairs(cls, records: Iterable[tuple[str, bytes | str]]) -> "MerkleTree":
        """Build from ordered ``(identifier, encoding)`` pairs."""
        pairs = list(records)
        return cls.build_from_leaves(
            [identifier for identifier, _ in pairs],
            [encoding for _, encoding in pairs],
        )

    def _unused_duplicate_id(self, identifier: str) -> str:
        suffix = 1
        while f"{identifier}{DUPLICATE_SUFFIX}{suffix}" in self._index:
            suffix += 1
        return f"{identifier}{DUPLICATE_SUFFIX}{suffix}"

    def _reduce(self, level: list[int]) -> int:
        """Pair adjacent nodes level by level until one internal node remains."""
        current = level
        while len(current) > 1 or isinstance(self._nodes[current[0]], LeafNode):
            next_level: list[int] = []
            for i in range(0, len(current), 2):
                left = current[i]
                # Pad an odd level by pairing the last node with itself
                right = current[i + 1] if i + 1 < len(current) else left
                next_level.append(self._pair(left, right))
            current = next_level
        return current[0]

    def _add_node(self, node: Node) -> int:
        self._nodes.append(node)
        return len(self._nodes) - 1

    def _pair(self, left: int, right: int) -> int:
        """Create an internal node over two existing handles."""
        left_node = self._nodes[left]
        right_node = self._nodes[right]
        handle = self._add_node(
            InternalNode(
                hash=combine_hashes(left_node.hash, right_node.hash),
                left=left,
                right=right,
                leaf_count=left_node.leaf_count + right_node.leaf_count,
            )
        )
        left_node.parent = handle
        right_node.parent = handle
        return handle

    def add_leaf(self, identifier: str, encoding: bytes | str) -> str:
        """Append one leaf in place. See ``core.merkle.incremental.add_leaf``."""
        from core.merkle.incremental import add_leaf

        return add_leaf(self, identifier, encoding)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return self._root is None

    @property
    def root_hash(self) -> str:
        """
        Digest committing to every leaf.

        Raises:
            EmptyTreeError: If nothing has been built or inserted
        """
        if self._root is None:
            raise EmptyTreeError()
        return self._nodes[self._root].hash

    def get_root_hash(self) -> str | None:
        """Root digest, or None for an empty tree."""
        if self._root is None:
            return None
        return self._nodes[self._root].hash

    @property
    def leaf_count(self) -> int:
        """Number of distinct leaves (padding not counted)."""
        return len(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._index

    def contains(self, identifier: str) -> bool:
        return identifier in self._index

    def identifiers(self) -> list[str]:
        """Leaf labels in insertion order."""
        return list(self._index)

    def leaf_hash(self, identifier: str) -> str:
        """
        Digest stored at a leaf.

        Raises:
            NotFoundError: If the identifier has no leaf
        """
        handle = self._index.get(identifier)
        if handle is None:
            raise NotFoundError(f"Identifier not found: {identifier}", key=identifier)
        return self._nodes[handle].hash

    @property
    def height(self) -> int:
        """Edges on the longest root-to-leaf path; 0 for an empty tree."""
        if self._root is None:
            return 0
        deepest = 0
        stack = [(self._root, 0)]
        while stack:
            handle, depth = stack.pop()
            node = self._nodes[handle]
            if isinstance(node, LeafNode):
                deepest = max(deepest, depth)
                continue
            stack.append((node.left, depth + 1))
            if node.right != node.left:
                stack.append((node.right, depth + 1))
        return deepest

    def levels(self, max_levels: int = 3, prefix: int = 8) -> list[list[str]]:
        """
        Breadth-first hash prefixes, one list per level, for display.

        Padded nodes show their shared child in both slots.
        """
        if self._root is None:
            return []
        result: list[list[str]] = []
        current = [self._root]
        while current and len(result) < max_levels:
            result.append([self._nodes[h].hash[:prefix] for h in current])
            next_level: list[int] = []
            for handle in current:
                node = self._nodes[handle]
                if isinstance(node, InternalNode):
                    next_level.extend((node.left, node.right))
            current = next_level
        return result

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def generate_proof(self, identifier: str) -> ProofPath:
        """
        Generate an inclusion proof for a leaf.

        Walks parent handles from the leaf up to the root, recording the
        sibling digest and the current node's side at each step. The proof
        length equals the leaf's depth.

        Raises:
            EmptyTreeError: If the tree has no root
            NotFoundError: If the identifier has no leaf
        """
        if self._root is None:
            raise EmptyTreeError()
        handle = self._index.get(identifier)
        if handle is None:
            raise NotFoundError(f"Identifier not found: {identifier}", key=identifier)

        steps: list[ProofStep] = []
        current = handle
        while current != self._root:
            parent_handle = self._nodes[current].parent
            if parent_handle is None:
                raise StateError(f"Leaf {identifier!r} is detached from the root")
            parent = self._nodes[parent_handle]
            if parent.left == current:
                steps.append(ProofStep(self._nodes[parent.right].hash, Side.LEFT))
            else:
                steps.append(ProofStep(self._nodes[parent.left].hash, Side.RIGHT))
            current = parent_handle

        return ProofPath(tuple(steps))

    @staticmethod
    def verify_proof(
        encoding: bytes | str,
        proof: ProofPath | Sequence[ProofStep],
        trusted_root: str,
    ) -> bool:
        """Stateless verification; see module-level ``verify_proof``."""
        return verify_proof(encoding, proof, trusted_root)


def verify_proof(
    encoding: bytes | str,
    proof: ProofPath | Sequence[ProofStep],
    trusted_root: str,
) -> bool:
    """
    Verify that an encoding is committed under a trusted root.

    Algorithm:
    1. current = sha256(encoding)
    2. For each step: current = combine_hashes(current, step.sibling_hash)
    3. Valid iff current == trusted_root

    An empty proof never verifies. Non-empty trees always yield non-empty
    proofs, because a lone leaf is paired with itself.

    Args:
        encoding: Canonical record encoding
        proof: Proof steps, leaf to root
        trusted_root: Root digest obtained out of band

    Returns:
        True if the proof is valid, False otherwise
    """
    if len(proof) == 0:
        return False

    current = hash_leaf(encoding)
    for step in proof:
        current = combine_hashes(current, step.sibling_hash)

    return current == trusted_root


def build_from_leaves(
    identifiers: Sequence[str],
    encodings: Sequence[bytes | str],
) -> MerkleTree:
    """Module-level alias for ``MerkleTree.build_from_leaves``."""
    return MerkleTree.build_from_leaves(identifiers, encodings)


__all__ = [
    "DUPLICATE_SUFFIX",
    "ProofStep",
    "ProofPath",
    "BuildStats",
    "MerkleTree",
    "verify_proof",
    "build_from_leaves",
]
