#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
red_black_tree.py
-----------------

An ordered index (key → value) kept balanced by the classical **Red‑Black**
insertion algorithm: plain BST descent, a new RED leaf, then a bottom‑up
fix‑up walk that recolours and rotates until the colour rules hold again.
The tree height therefore never exceeds ``2 * log2(n + 1)``.

The index is insert‑only: adding a key that is already present replaces the
stored value in place.

Features
~~~~~~~~
* `tree.insert(key, value)` / `tree[key] = value`   – insert or update
* `tree.add(item)`            – insert under `key(item)` (see ``key=``)
* `tree.search(key)`          – value or ``None`` when the key is missing
* `tree[key]`, `tree.get(key)`, `key in tree`
* `tree.size()`, `len(tree)`, `tree.is_empty()`, `tree.height()`
* iteration (`for key in tree:`) – keys in ascending order
* `tree.validate()` and its four sub‑checks, each returning a ``bool``

All absent children share one BLACK sentinel leaf (`self._nil`), so the
rebalancing code never has to test for ``None``.  The sentinel stays
internal: every lookup reports an absent node as ``None``.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> index = RedBlackTree()
>>> for product_id in ["P005", "P003", "P007"]:
...     index.insert(product_id, product_id.lower())
>>> index.search("P003")
'p003'
>>> index.search("P999") is None
True
>>> index.size(), index.height(), index.validate()
(3, 2, True)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import (
    Callable,
    Generator,
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  Type variables (keys must be totally ordered, values are opaque)
# ----------------------------------------------------------------------
K = TypeVar("K")
V = TypeVar("V")

# ----------------------------------------------------------------------
#  Node colours
# ----------------------------------------------------------------------
RED = True
BLACK = False


class _Node(Generic[K, V]):
    """Internal tree vertex. ``parent`` is only used to walk upwards."""

    __slots__ = ("key", "value", "color", "left", "right", "parent")

    def __init__(
        self,
        key: Optional[K] = None,
        value: Optional[V] = None,
        color: bool = BLACK,
        left: Optional["_Node[K, V]"] = None,
        right: Optional["_Node[K, V]"] = None,
        parent: Optional["_Node[K, V]"] = None,
    ) -> None:
        self.key = key
        self.value = value
        self.color = color
        self.left = left
        self.right = right
        self.parent = parent

    def __repr__(self) -> str:
        col = "R" if self.color is RED else "B"
        return f"<{col} {self.key!r}:{self.value!r}>"


class _InsertCase(Enum):
    """Outcome of classifying one step of the insertion fix‑up."""

    ROOT = 1        # node is the root: paint it black
    RED_UNCLE = 2   # parent and uncle red: push the red up to grandparent
    TRIANGLE = 3    # uncle black, node/parent zig‑zag: straighten first
    LINE = 4        # uncle black, node/parent on one side: rotate grandparent
    DONE = 5        # parent is black, nothing left to repair


class RedBlackTree(Generic[K, V]):
    """
    Ordered key → value index balanced with the classical Red‑Black rules.

    Parameters
    ----------
    items : iterable of (key, value), optional
        Pairs inserted one by one, in order, at construction time.
    key : Callable[[V], K], optional
        Extracts the key of a value; required by :meth:`add` only.
    """

    __slots__ = ("_root", "_nil", "_size", "_key")

    def __init__(
        self,
        items: Optional[Iterable[Tuple[K, V]]] = None,
        *,
        key: Optional[Callable[[V], K]] = None,
    ) -> None:
        # Shared black leaf; it links to itself so it never needs a None check.
        self._nil: _Node[K, V] = _Node(color=BLACK)
        self._nil.left = self._nil.right = self._nil.parent = self._nil

        self._root: _Node[K, V] = self._nil
        self._size: int = 0
        self._key = key

        if items is not None:
            for k, v in items:
                self.insert(k, v)

    # ------------------------------------------------------------------
    #   Family navigation
    # ------------------------------------------------------------------
    def _parent(self, node: _Node[K, V]) -> Optional[_Node[K, V]]:
        """Return the parent of *node*, or ``None`` for the root."""
        if node is self._nil or node.parent is self._nil:
            return None
        return node.parent

    def _grandparent(self, node: _Node[K, V]) -> Optional[_Node[K, V]]:
        parent = self._parent(node)
        if parent is None:
            return None
        return self._parent(parent)

    def _uncle(self, node: _Node[K, V]) -> Optional[_Node[K, V]]:
        """Return the other child of the grandparent, or ``None``."""
        grandparent = self._grandparent(node)
        if grandparent is None:
            return None
        if node.parent is grandparent.left:
            uncle = grandparent.right
        else:
            uncle = grandparent.left
        return None if uncle is self._nil else uncle

    # ------------------------------------------------------------------
    #   Rotation primitives
    # ------------------------------------------------------------------
    def _replace_child(
        self, old: _Node[K, V], new: _Node[K, V]
    ) -> None:
        """Hang *new* where *old* used to hang below its parent."""
        parent = old.parent
        new.parent = parent
        if parent is self._nil:
            self._root = new
        elif old is parent.left:
            parent.left = new
        else:
            parent.right = new

    def _rotate_left(self, h: _Node[K, V]) -> _Node[K, V]:
        """Promote the right child of *h*; return the new subtree root."""
        x = h.right
        if h is self._nil or x is self._nil:
            raise RuntimeError(f"rotate_left needs a right child at {h!r}")
        self._replace_child(h, x)
        h.right = x.left
        if x.left is not self._nil:
            x.left.parent = h
        x.left = h
        h.parent = x
        return x

    def _rotate_right(self, h: _Node[K, V]) -> _Node[K, V]:
        """Promote the left child of *h*; return the new subtree root."""
        x = h.left
        if h is self._nil or x is self._nil:
            raise RuntimeError(f"rotate_right needs a left child at {h!r}")
        self._replace_child(h, x)
        h.left = x.right
        if x.right is not self._nil:
            x.right.parent = h
        x.right = h
        h.parent = x
        return x

    def _flip_colors(self, h: _Node[K, V]) -> None:
        """Toggle the colour of *h* and of both its children."""
        h.color = not h.color
        h.left.color = not h.left.color
        h.right.color = not h.right.color

    # ------------------------------------------------------------------
    #   Insertion
    # ------------------------------------------------------------------
    def insert(self, key: K, value: V) -> None:
        """Insert *key* with *value*, or replace the value if *key* exists."""
        if self._root is self._nil:
            self._root = self._new_node(key, value, BLACK, self._nil)
            self._size = 1
            logger.debug("insert %r as root", key)
            return

        cur = self._root
        while True:
            if key == cur.key:
                cur.value = value
                logger.debug("insert %r: existing key, value replaced", key)
                return
            child = cur.left if key < cur.key else cur.right
            if child is self._nil:
                break
            cur = child

        node = self._new_node(key, value, RED, cur)
        if key < cur.key:
            cur.left = node
        else:
            cur.right = node
        self._size += 1
        logger.debug("insert %r below %r", key, cur.key)
        self._insert_fixup(node)

    __setitem__ = insert

    def add(self, item: V) -> None:
        """Insert *item* under the key produced by the ``key`` function."""
        if self._key is None:
            raise TypeError("add() requires a tree created with key=...")
        self.insert(self._key(item), item)

    def _new_node(
        self, key: K, value: V, color: bool, parent: _Node[K, V]
    ) -> _Node[K, V]:
        return _Node(
            key=key,
            value=value,
            color=color,
            left=self._nil,
            right=self._nil,
            parent=parent,
        )

    def _insert_case(self, node: _Node[K, V]) -> _InsertCase:
        """Classify the repair step needed at the red node *node*."""
        parent = self._parent(node)
        if parent is None:
            return _InsertCase.ROOT
        if parent.color is BLACK:
            return _InsertCase.DONE
        uncle = self._uncle(node)
        if uncle is not None and uncle.color is RED:
            return _InsertCase.RED_UNCLE
        # A red parent is never the root, so the grandparent exists.
        grandparent = parent.parent
        if (node is parent.right) != (parent is grandparent.right):
            return _InsertCase.TRIANGLE
        return _InsertCase.LINE

    def _insert_fixup(self, node: _Node[K, V]) -> None:
        """Restore the colour rules after *node* was added as a red leaf."""
        while True:
            case = self._insert_case(node)
            logger.debug("fixup at %r: %s", node.key, case.name)

            if case is _InsertCase.ROOT:
                node.color = BLACK
                break
            if case is _InsertCase.DONE:
                break
            if case is _InsertCase.RED_UNCLE:
                grandparent = node.parent.parent
                self._flip_colors(grandparent)
                node = grandparent
                continue
            if case is _InsertCase.TRIANGLE:
                node = self._straighten(node)
            self._rotate_line(node)
            break

        self._root.color = BLACK

    def _straighten(self, node: _Node[K, V]) -> _Node[K, V]:
        """Rotate a zig‑zag into a line; return the old parent, now below *node*."""
        parent = node.parent
        if node is parent.right:
            self._rotate_left(parent)
        else:
            self._rotate_right(parent)
        return parent

    def _rotate_line(self, node: _Node[K, V]) -> None:
        parent = node.parent
        grandparent = parent.parent
        parent.color = BLACK
        grandparent.color = RED
        if node is parent.left:
            self._rotate_right(grandparent)
        else:
            self._rotate_left(grandparent)

    # ------------------------------------------------------------------
    #   Search
    # ------------------------------------------------------------------
    def _search_node(self, key: K) -> _Node[K, V]:
        """Return the node that holds *key* or the sentinel if not found."""
        cur = self._root
        while cur is not self._nil:
            if key == cur.key:
                return cur
            cur = cur.left if key < cur.key else cur.right
        return self._nil

    def search(self, key: K) -> Optional[V]:
        """Return the value stored under *key*, or ``None`` if absent."""
        node = self._search_node(key)
        if node is self._nil:
            return None
        return node.value

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        node = self._search_node(key)
        return default if node is self._nil else node.value

    def __getitem__(self, key: K) -> V:
        node = self._search_node(key)
        if node is self._nil:
            raise KeyError(key)
        return node.value  # type: ignore[return-value]

    def __contains__(self, key: object) -> bool:
        return self._search_node(key) is not self._nil  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    #   Size / height
    # ------------------------------------------------------------------
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def height(self) -> int:
        """Number of nodes on the longest root‑to‑leaf path (0 when empty)."""
        return self._height(self._root)

    def _height(self, node: _Node[K, V]) -> int:
        if node is self._nil:
            return 0
        return 1 + max(self._height(node.left), self._height(node.right))

    # ------------------------------------------------------------------
    #   Ordered traversal
    # ------------------------------------------------------------------
    def _in_order(self) -> Generator[_Node[K, V], None, None]:
        stack: List[_Node[K, V]] = []
        cur = self._root
        while stack or cur is not self._nil:
            while cur is not self._nil:
                stack.append(cur)
                cur = cur.left
            cur = stack.pop()
            yield cur
            cur = cur.right

    def __iter__(self) -> Generator[K, None, None]:
        """Yield keys in ascending order."""
        for node in self._in_order():
            yield node.key  # type: ignore[misc]

    def keys(self) -> List[K]:
        return list(self)

    def values(self) -> List[V]:
        """Return all values in key order."""
        return [node.value for node in self._in_order()]  # type: ignore[misc]

    def items(self) -> List[Tuple[K, V]]:
        """Return ``(key, value)`` pairs in key order."""
        return [(node.key, node.value) for node in self._in_order()]  # type: ignore[misc]

    def min_key(self) -> K:
        """Return the smallest key; ``ValueError`` on an empty tree."""
        node = self._root
        if node is self._nil:
            raise ValueError("Tree is empty")
        while node.left is not self._nil:
            node = node.left
        return node.key  # type: ignore[return-value]

    def max_key(self) -> K:
        """Return the largest key; ``ValueError`` on an empty tree."""
        node = self._root
        if node is self._nil:
            raise ValueError("Tree is empty")
        while node.right is not self._nil:
            node = node.right
        return node.key  # type: ignore[return-value]

    # ------------------------------------------------------------------
    #   Validation
    # ------------------------------------------------------------------
    def validate_root_and_leaves(self) -> bool:
        """The root (if any) and the shared leaf must both be black."""
        if self._nil.color is not BLACK:
            logger.warning("validate: sentinel leaf is not black")
            return False
        if self._root is not self._nil and self._root.color is not BLACK:
            logger.warning("validate: root %r is not black", self._root.key)
            return False
        return True

    def validate_node_colors(self) -> bool:
        """Every node colour must be exactly ``RED`` or ``BLACK``."""
        for node in self._in_order():
            if node.color is not RED and node.color is not BLACK:
                logger.warning(
                    "validate: node %r has invalid colour %r", node.key, node.color
                )
                return False
        return True

    def validate_red_node_children(self) -> bool:
        """No red node may have a red child."""
        for node in self._in_order():
            if node.color is RED and (
                node.left.color is RED or node.right.color is RED
            ):
                logger.warning("validate: red node %r has a red child", node.key)
                return False
        return True

    def validate_black_height(self) -> bool:
        """Both subtrees of every node must hold the same number of black nodes."""

        def black_height(node: _Node[K, V]) -> Optional[int]:
            # An absent child counts as one black node.
            if node is self._nil:
                return 1
            left = black_height(node.left)
            if left is None:
                return None
            right = black_height(node.right)
            if right is None:
                return None
            if left != right:
                logger.warning(
                    "validate: black-height mismatch at %r (%d vs %d)",
                    node.key,
                    left,
                    right,
                )
                return None
            return left + (1 if node.color is BLACK else 0)

        return black_height(self._root) is not None

    def validate(self) -> bool:
        """Return ``True`` when all four Red‑Black checks pass."""
        return (
            self.validate_root_and_leaves()
            and self.validate_node_colors()
            and self.validate_red_node_children()
            and self.validate_black_height()
        )

    def assert_valid(self) -> None:
        """Raise ``AssertionError`` naming the first check that fails."""
        checks: List[Callable[[], bool]] = [
            self.validate_root_and_leaves,
            self.validate_node_colors,
            self.validate_red_node_children,
            self.validate_black_height,
        ]
        for check in checks:
            if not check():
                raise AssertionError(f"{check.__name__} failed")

    # ------------------------------------------------------------------
    #   Debugging
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"RedBlackTree({{{items}}})"
