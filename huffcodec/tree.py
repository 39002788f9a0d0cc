"""
tree.py

Huffman tree construction and code table generation.

The tree is stored as an arena: every node lives in ``HuffmanTree.nodes`` and
children are referenced by their index in that list.
"""


import heapq
from typing import Dict, List, Optional, Tuple

from .exceptions import EmptyInputError, MalformedArtifactError
from .logger import Logger, TreeBuildLog
from .models import Symbol, FrequencyTable


class HuffmanNode:
    """
    A leaf (symbol set, no children) or an internal node (two children).
    """
    __slots__ = ("frequency", "symbol", "left", "right")

    def __init__(self, frequency: int, symbol: Optional[Symbol] = None,
                 left: Optional[int] = None, right: Optional[int] = None) -> None:
        self.frequency: int = frequency
        self.symbol: Optional[Symbol] = symbol
        self.left: Optional[int] = left
        self.right: Optional[int] = right

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"Leaf({self.symbol}, {self.frequency})"
        return f"Internal({self.frequency}, {self.left}, {self.right})"


class HuffmanTree:
    """
    Strict binary tree of HuffmanNode records.

    Nodes are only ever appended; a node can be attached to at most one
    parent. Trees rebuilt from a header carry zero frequencies.
    """

    def __init__(self) -> None:
        self.nodes: List[HuffmanNode] = []
        self.root: Optional[int] = None
        self._has_parent: List[bool] = []

    def add_leaf(self, symbol: Symbol, frequency: int = 0) -> int:
        if not isinstance(symbol, Symbol):
            raise ValueError("Leaf symbol must be an instance of Symbol")
        self.nodes.append(HuffmanNode(frequency, symbol=symbol))
        self._has_parent.append(False)
        return len(self.nodes) - 1

    def add_internal(self, left: int, right: int) -> int:
        for child in (left, right):
            if not 0 <= child < len(self.nodes):
                raise ValueError(f"Unknown child node index: {child}")
            if self._has_parent[child]:
                raise ValueError(f"Node {child} already has a parent")
        if left == right:
            raise ValueError("An internal node needs two distinct children")
        self._has_parent[left] = True
        self._has_parent[right] = True
        frequency = self.nodes[left].frequency + self.nodes[right].frequency
        self.nodes.append(HuffmanNode(frequency, left=left, right=right))
        self._has_parent.append(False)
        return len(self.nodes) - 1

    def get_node(self, index: int) -> HuffmanNode:
        return self.nodes[index]

    def get_root(self) -> HuffmanNode:
        if self.root is None:
            raise ValueError("Tree has no root")
        return self.nodes[self.root]

    def leaf_count(self) -> int:
        return sum(1 for node in self.nodes if node.is_leaf)

    def internal_count(self) -> int:
        return sum(1 for node in self.nodes if not node.is_leaf)

    def is_degenerate(self) -> bool:
        """True when the whole tree is a single leaf."""
        return self.get_root().is_leaf

    def depth(self) -> int:
        """Length of the longest root-to-leaf path."""
        deepest = 0
        stack: List[Tuple[int, int]] = [(self.root, 0)]
        while stack:
            index, level = stack.pop()
            node = self.nodes[index]
            if node.is_leaf:
                deepest = max(deepest, level)
            else:
                stack.append((node.right, level + 1))
                stack.append((node.left, level + 1))
        return deepest

    def leaves(self) -> List[Symbol]:
        """Leaf symbols in pre-order (left before right)."""
        return [node.symbol for _, node in self.preorder() if node.is_leaf]

    def preorder(self) -> List[Tuple[int, HuffmanNode]]:
        """(index, node) pairs visited root, left subtree, right subtree."""
        visited = []
        stack = [self.root]
        while stack:
            index = stack.pop()
            node = self.nodes[index]
            visited.append((index, node))
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)
        return visited

    def validate(self) -> None:
        """
        Check the structural invariants of a finished tree.

        Raises:
            MalformedArtifactError: If the tree is empty, a node is detached or
                an internal node lacks a child.
        """
        if self.root is None or not self.nodes:
            raise MalformedArtifactError("Tree is empty")
        for index, node in enumerate(self.nodes):
            if not node.is_leaf and (node.left is None or node.right is None):
                raise MalformedArtifactError(f"Internal node {index} is missing a child")
            if index != self.root and not self._has_parent[index]:
                raise MalformedArtifactError(f"Node {index} is not attached to the tree")
        if self.leaf_count() != self.internal_count() + 1:
            raise MalformedArtifactError("Tree must have exactly one more leaf than internal nodes")

    def __eq__(self, other: object) -> bool:
        """
        Trees are equal when they have the same shape and leaf symbols.
        Frequencies are ignored since rebuilt trees do not carry them.
        """
        if not isinstance(other, HuffmanTree):
            return False
        mine = [(node.symbol, node.is_leaf) for _, node in self.preorder()]
        theirs = [(node.symbol, node.is_leaf) for _, node in other.preorder()]
        return mine == theirs


def build_tree(frequencies: FrequencyTable, logger: Optional[Logger] = None) -> HuffmanTree:
    """
    Build the Huffman tree for a frequency table.

    Nodes are ordered by (frequency, sequence). Leaves get their sequence from
    the table order and each merged node the next free one, so equal
    frequencies are always resolved the same way. The first node popped
    becomes the left child.

    Args:
        frequencies (FrequencyTable): Counts of the symbols to code.
        logger (Optional[Logger]): Logger instance for logging.

    Returns:
        HuffmanTree: The built tree. A single distinct symbol gives a tree whose
        root is that symbol's leaf.

    Raises:
        EmptyInputError: If the table has no symbols.
    """
    if not isinstance(frequencies, FrequencyTable):
        raise ValueError("Frequencies must be an instance of FrequencyTable")
    if frequencies.is_empty():
        raise EmptyInputError("Cannot build a tree from an empty frequency table")

    tree = HuffmanTree()
    heap: List[Tuple[int, int, int]] = []
    sequence = 0
    for symbol, count in frequencies.items():
        index = tree.add_leaf(symbol, count)
        heap.append((count, sequence, index))
        sequence += 1
    heapq.heapify(heap)

    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)
        merged = tree.add_internal(left, right)
        heapq.heappush(heap, (tree.nodes[merged].frequency, sequence, merged))
        sequence += 1

    tree.root = heap[0][2]

    if logger is not None:
        logger.log(TreeBuildLog(tree.leaf_count(), tree.internal_count(), tree.depth()))
    return tree


def generate_code_table(tree: HuffmanTree) -> Dict[Symbol, str]:
    """
    Assign every leaf the path leading to it, '0' for left and '1' for right.

    A tree made of a single leaf gets the one-bit code "0" since an empty code
    could not be read back from a bit stream.

    Args:
        tree (HuffmanTree): The tree to walk.

    Returns:
        Dict[Symbol, str]: The code table.
    """
    if not isinstance(tree, HuffmanTree):
        raise ValueError("Tree must be an instance of HuffmanTree")
    root = tree.get_root()
    if root.is_leaf:
        return {root.symbol: "0"}

    codes: Dict[Symbol, str] = {}
    stack: List[Tuple[int, str]] = [(tree.root, "")]
    while stack:
        index, code = stack.pop()
        node = tree.nodes[index]
        if node.is_leaf:
            codes[node.symbol] = code
        else:
            stack.append((node.right, code + "1"))
            stack.append((node.left, code + "0"))
    return codes
