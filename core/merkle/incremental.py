"""
Incremental Leaf Insertion

Appends one leaf to an existing tree without a full rebuild.

Descent rule: at each internal node take the child with fewer leaves,
ties going left. The leaf reached is replaced by a new internal node
holding the old leaf (left) and the new leaf (right). Digests and leaf
counts are then recomputed along the descent path, bottom-up.

The resulting shape is a heuristic. It generally differs from what a
batch build over the same final record set would produce, so the two
roots differ too. Callers must not expect them to agree.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from core.crypto.hashing import combine_hashes, hash_leaf
from core.merkle.nodes import InternalNode, LeafNode, Side
from core.schemas.errors import DuplicateIdentifierError

if TYPE_CHECKING:
    from core.merkle.merkle_tree import MerkleTree


logger = logging.getLogger(__name__)


def add_leaf(tree: "MerkleTree", identifier: str, encoding: bytes | str) -> str:
    """
    Insert one leaf into ``tree`` in place.

    Unlike batch construction, an existing identifier is rejected rather
    than renamed. An empty tree gains a root that pairs the new leaf with
    itself, matching the padding rule of batch builds.

    Args:
        tree: Tree to mutate
        identifier: Label of the new leaf
        encoding: Canonical record encoding

    Returns:
        The new root digest

    Raises:
        DuplicateIdentifierError: If the identifier is already present;
            the tree is left untouched
    """
    if tree.contains(identifier):
        raise DuplicateIdentifierError(identifier)

    start = time.perf_counter()
    nodes = tree._nodes

    new_leaf = tree._add_node(LeafNode(hash=hash_leaf(encoding), label=identifier))
    tree._index[identifier] = new_leaf

    if tree._root is None:
        tree._root = tree._pair(new_leaf, new_leaf)
        logger.info(f"Inserted {identifier!r} into empty tree, root {tree.root_hash}")
        return tree.root_hash

    # Descend, remembering which slot was taken at each internal node
    path: list[tuple[int, Side]] = []
    handle = tree._root
    node = nodes[handle]
    while isinstance(node, InternalNode):
        left_count = nodes[node.left].leaf_count
        right_count = nodes[node.right].leaf_count
        side = Side.LEFT if left_count <= right_count else Side.RIGHT
        path.append((handle, side))
        handle = node.left if side is Side.LEFT else node.right
        node = nodes[handle]

    pair = tree._pair(handle, new_leaf)

    if not path:
        tree._root = pair
    else:
        parent_handle, side = path[-1]
        parent = nodes[parent_handle]
        if side is Side.LEFT:
            parent.left = pair
        else:
            parent.right = pair
        nodes[pair].parent = parent_handle

    # Unwind the path stack, recomputing digests and counts
    for handle, _ in reversed(path):
        node = nodes[handle]
        left_node = nodes[node.left]
        right_node = nodes[node.right]
        node.hash = combine_hashes(left_node.hash, right_node.hash)
        node.leaf_count = left_node.leaf_count + right_node.leaf_count

    elapsed_ms = (time.perf_counter() - start) * 1000.0
    logger.info(
        f"Inserted {identifier!r} at depth {len(path) + 1} in {elapsed_ms:.2f} ms, "
        f"root {tree.root_hash}"
    )
    return tree.root_hash


__all__ = ["add_leaf"]
