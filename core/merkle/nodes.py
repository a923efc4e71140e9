"""
Merkle Node Model

Tree nodes live in an arena (a plain list) and refer to one another by
integer handle. Internal nodes own their children; the parent handle kept
alongside each node is only an index, so the structure holds no reference
cycles.

A padded node references the same child handle from both slots.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Side(str, Enum):
    """Position of a node under its parent."""
    LEFT = "left"
    RIGHT = "right"


@dataclass
class LeafNode:
    """Leaf wrapping one record's digest."""
    hash: str
    label: str
    parent: int | None = None

    @property
    def leaf_count(self) -> int:
        return 1


@dataclass
class InternalNode:
    """
    Internal node combining two children.

    Attributes:
        hash: combine_hashes(left.hash, right.hash)
        left: Handle of the left child
        right: Handle of the right child (equal to ``left`` when padded)
        leaf_count: Leaves reachable through both slots, so a padded
            child is counted twice
        parent: Handle of the parent, None at the root
    """
    hash: str
    left: int
    right: int
    leaf_count: int
    parent: int | None = None

    @property
    def is_padded(self) -> bool:
        return self.left == self.right


Node = Union[LeafNode, InternalNode]


__all__ = [
    "Side",
    "LeafNode",
    "InternalNode",
    "Node",
]
