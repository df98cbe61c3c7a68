"""Chain scoping for stored contracts.

A contract with no chain config is global and shows up on every chain;
otherwise it only shows up while its chain is the active one.
"""

from __future__ import annotations

from typing import Iterable

from .types import Contract


def is_visible(contract: Contract, active_chain: str) -> bool:
    """Return True if the contract belongs in the tree for active_chain."""
    return not contract.chain_config or contract.chain_config == active_chain


def filter_for_chain(contracts: Iterable[Contract], active_chain: str) -> list[Contract]:
    """Keep global contracts and those scoped to active_chain, preserving order."""
    return [c for c in contracts if is_visible(c, active_chain)]
