"""Contract tree engine.

Owns the visible contract list and answers root/children queries for the
active sort order. Every mutation is followed by a single synchronous
notification so views know to query again.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator

from .grouping import compute_children, compute_roots, format_node
from .scope_filter import filter_for_chain
from .types import Contract, Node, SortOrder, Workspace

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeNotifier:
    """Broadcasts a payload-free "requery everything" signal."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify_all(self) -> None:
        for listener in list(self._listeners):
            listener()


class ContractTree:
    """Tree source for the contract view.

    The caller applies chain filtering before set_records (or uses
    refresh, which does it against the workspace's active chain).
    """

    def __init__(self, workspace: Workspace, contracts: Iterable[Contract] | None = None):
        self.workspace = workspace
        self._contracts: list[Contract] = list(contracts) if contracts is not None else []
        self.changed = ChangeNotifier()

    @property
    def records(self) -> tuple[Contract, ...]:
        return tuple(self._contracts)

    @property
    def sort_order(self) -> SortOrder:
        return self.workspace.sort_order

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.changed.subscribe(listener)

    def set_records(self, contracts: Iterable[Contract]) -> None:
        """Replace the contract list and notify listeners."""
        self._contracts = list(contracts)
        logger.debug("Contract tree now holds %d contract(s)", len(self._contracts))
        self.changed.notify_all()

    def refresh(self, contracts: Iterable[Contract]) -> None:
        """Filter contracts to the active chain, then replace the list."""
        self.set_records(filter_for_chain(contracts, self.workspace.active_chain))

    def set_sort_order(self, sort_order: SortOrder) -> None:
        """Switch the tree shape and notify listeners."""
        self.workspace.sort_order = sort_order
        logger.debug("Contract tree sort order set to %s", sort_order)
        self.changed.notify_all()

    def get_roots(self) -> list[Contract]:
        return compute_roots(self._contracts, self.workspace.sort_order)

    def get_children(self, element: Contract | None = None) -> list[Contract]:
        """Return children of element, or the roots when element is None."""
        if element is None:
            return self.get_roots()
        return compute_children(element, self._contracts, self.workspace.sort_order)

    def get_node(self, element: Contract) -> Node:
        return format_node(element, self.workspace.sort_order, self.workspace.active_chain)

    def walk(self) -> Iterator[tuple[int, Node]]:
        """Yield (depth, node) for the whole tree, depth-first."""

        def _walk(elements: list[Contract], depth: int) -> Iterator[tuple[int, Node]]:
            for element in elements:
                node = self.get_node(element)
                yield depth, node
                if node.expandable:
                    yield from _walk(self.get_children(element), depth + 1)

        yield from _walk(self.get_roots(), 0)
