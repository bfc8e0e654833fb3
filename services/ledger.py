from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from models import Resource, ResourceKey


@dataclass
class LedgerNode:
    resource: Resource  # copy carrying the transferred quantity
    destination: str
    children: List["LedgerNode"] = field(default_factory=list)

    def add_child(self, node: "LedgerNode") -> None:
        if node is not None:
            self.children.append(node)


class DistributionLedger:
    """
    Append-only record of allocation events.

    The first allocation becomes the root and every later one is attached
    as a direct child of it, giving a single-level fan-out. The owning
    InventoryManager serialises writes.
    """

    def __init__(self) -> None:
        self._root: Optional[LedgerNode] = None
        self._size = 0

    @property
    def root(self) -> Optional[LedgerNode]:
        return self._root

    @property
    def is_empty(self) -> bool:
        return self._root is None

    def insert(self, resource: Resource, destination: str) -> LedgerNode:
        node = LedgerNode(resource=resource, destination=destination)
        if self._root is None:
            self._root = node
        else:
            self._root.add_child(node)
        self._size += 1
        return node

    def nodes(self) -> Iterator[LedgerNode]:
        """Pre-order traversal starting at the root."""
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def summary_by_location(self) -> Dict[str, Dict[ResourceKey, int]]:
        summary: Dict[str, Dict[ResourceKey, int]] = {}
        for node in self.nodes():
            per_resource = summary.setdefault(node.destination, {})
            key = node.resource.key
            per_resource[key] = per_resource.get(key, 0) + node.resource.available
        return summary

    def render(self) -> str:
        if self._root is None:
            return "Distribution ledger is empty."
        lines = ["Distribution hierarchy:"]
        self._render_node(self._root, 0, lines)
        return "\n".join(lines)

    def _render_node(self, node: LedgerNode, depth: int, lines: List[str]) -> None:
        lines.append(
            f"{'  ' * depth}- {node.resource.name} x{node.resource.available} -> {node.destination}"
        )
        for child in node.children:
            self._render_node(child, depth + 1, lines)

    def __len__(self) -> int:
        return self._size
