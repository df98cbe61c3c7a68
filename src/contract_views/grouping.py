"""Tree shapes for the contract view.

Each sort order maps the current contract list to root elements and, for
expandable elements, their children. Formatting into display nodes is a
separate step so the stored records are never touched.

    NONE          contracts as stored
    ALPHABETICAL  contracts by label, case-insensitive, stable
    CODE_ID       Group <code id>
                  └── <code id>: <label>
"""

from __future__ import annotations

from typing import Iterable

from .types import Contract, Node, SortOrder

GROUP_LABEL_PREFIX = "Group "

CONTEXT_CONTRACT = "contract"
CONTEXT_CODE = "code"

DISCONNECTED_WARNING = (
    "$(alert) *This contract is not associated with the active chain. "
    "Delete and reimport the contract to fix this.*"
)


def _alphabetical(contracts: list[Contract]) -> list[Contract]:
    # sorted() is stable, so equal labels keep their stored order
    return sorted(contracts, key=lambda c: c.label.casefold())


def _code_groups(contracts: Iterable[Contract]) -> list[Contract]:
    code_ids = sorted({c.code_id for c in contracts})
    return [Contract.group(code_id) for code_id in code_ids]


def compute_roots(contracts: list[Contract], sort_order: SortOrder) -> list[Contract]:
    """Return the top-level elements for a sort order."""
    if sort_order is SortOrder.NONE:
        return list(contracts)
    if sort_order is SortOrder.ALPHABETICAL:
        return _alphabetical(contracts)
    if sort_order is SortOrder.CODE_ID:
        return _code_groups(contracts)
    raise ValueError(f"Unhandled sort order: {sort_order!r}")


def compute_children(
    element: Contract, contracts: list[Contract], sort_order: SortOrder
) -> list[Contract]:
    """Return the children of an element.

    In CODE_ID order an element asks its code group for children: every
    contract with the element's code id, in stored order. Instance nodes
    are never expandable, so views only ask this of group nodes. Flat
    orders have no children.
    """
    if sort_order in (SortOrder.NONE, SortOrder.ALPHABETICAL):
        return []
    if sort_order is SortOrder.CODE_ID:
        return [c for c in contracts if c.code_id == element.code_id]
    raise ValueError(f"Unhandled sort order: {sort_order!r}")


def is_disconnected(contract: Contract, active_chain: str) -> bool:
    """True when the contract does not belong to the active chain."""
    return contract.chain_config != active_chain


def contract_tooltip(contract: Contract, active_chain: str) -> str:
    tooltip = f"Address: {contract.address}\nCreator: {contract.creator}"
    if contract.notes and contract.notes.strip():
        tooltip += "\n\n" + contract.notes
    if is_disconnected(contract, active_chain):
        tooltip += "\n\n" + DISCONNECTED_WARNING
    return tooltip


def format_node(element: Contract, sort_order: SortOrder, active_chain: str) -> Node:
    """Build the display node for an element about to be shown.

    Args:
        element: A stored contract or a code group from compute_roots.
        sort_order: Active sort order.
        active_chain: Name of the active chain config.

    Returns:
        Node with the label, tooltip and expansion state for the element.
    """
    if element.is_group:
        return Node(
            identity=str(element.code_id),
            label=f"{GROUP_LABEL_PREFIX}{element.code_id}",
            contract=element,
            context_value=CONTEXT_CODE,
            expandable=sort_order is SortOrder.CODE_ID,
            expanded=True,
        )

    return Node(
        identity=element.address or "",
        label=f"{element.code_id}: {element.label}",
        contract=element,
        description=element.address or "",
        tooltip=contract_tooltip(element, active_chain),
        context_value=CONTEXT_CONTRACT,
        disconnected=is_disconnected(element, active_chain),
    )
