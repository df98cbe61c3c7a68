"""Type definitions for contract-views.

Shared enums and dataclasses used by the grouping, filtering and
reconciliation code, plus the explicit workspace state they read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ── enums ─────────────────────────────────────────────────────────────────


class SortOrder(str, Enum):
    """How the contract tree is shaped.

    NONE: flat list in insertion order.
    ALPHABETICAL: flat list ordered by label, case-insensitive.
    CODE_ID: one expandable node per code id, contracts beneath it.
    """

    NONE = "none"
    ALPHABETICAL = "alphabetical"
    CODE_ID = "code_id"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "SortOrder":
        """Create SortOrder from a string, handling legacy spellings.

        Args:
            value: "none", "alphabetical", "code_id" (also "codeid", "code-id").

        Returns:
            The corresponding SortOrder value.

        Raises:
            ValueError: If value is not recognized.
        """
        normalized = value.strip().lower().replace("-", "_")
        if normalized == "codeid":
            return cls.CODE_ID
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Invalid sort order: {value!r}. Must be one of: "
                + ", ".join(o.value for o in cls)
            )


# ── records ───────────────────────────────────────────────────────────────


class ContractValidationError(ValueError):
    """Raised when a contract record fails an identity invariant."""


def _parse_code_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ContractValidationError(f"Invalid code id: {value!r}")
    if isinstance(value, int):
        code_id = value
    elif isinstance(value, str):
        try:
            code_id = int(value.strip(), 10)
        except ValueError:
            raise ContractValidationError(f"Invalid code id: {value!r}") from None
    else:
        raise ContractValidationError(f"Invalid code id: {value!r}")
    if code_id < 0:
        raise ContractValidationError(f"Code id must be non-negative: {code_id}")
    return code_id


def _check_address(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ContractValidationError(f"Invalid contract address: {value!r}")
    if not value.strip():
        raise ContractValidationError("Contract address must not be blank")
    return value


@dataclass
class Contract:
    """A deployed contract, or a synthesized code group.

    Attributes:
        label: Display name given when the contract was imported.
        address: Deployed address. None marks a code group representative,
            which only the grouping engine creates.
        code_id: Code the contract was instantiated from.
        creator: Creator address, shown in the tooltip.
        chain_config: Name of the configured chain the contract lives on.
            Empty means the contract is visible on every chain.
        notes: Free-form user notes.
    """

    label: str
    address: str | None
    code_id: int
    creator: str = ""
    chain_config: str = ""
    notes: str = ""

    def __setattr__(self, name: str, value: Any) -> None:
        # identity fields are checked on every assignment, including __init__
        if name == "code_id":
            value = _parse_code_id(value)
        elif name == "address":
            value = _check_address(value)
        super().__setattr__(name, value)

    @classmethod
    def group(cls, code_id: int) -> "Contract":
        """Build the representative record for a code id group."""
        return cls(label=str(code_id), address=None, code_id=code_id)

    @property
    def is_group(self) -> bool:
        return self.address is None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contract":
        """Create a stored contract from its YAML mapping.

        Raises:
            ContractValidationError: If the mapping is not a valid contract.
        """
        if not isinstance(data, dict):
            raise ContractValidationError(f"Contract entry must be a mapping, got {type(data).__name__}")
        address = data.get("address")
        if not isinstance(address, str):
            raise ContractValidationError("Stored contract is missing an address")
        return cls(
            label=str(data.get("label") or ""),
            address=address,
            code_id=data.get("code_id"),
            creator=str(data.get("creator") or ""),
            chain_config=str(data.get("chain_config") or ""),
            notes=str(data.get("notes") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "address": self.address,
            "code_id": self.code_id,
            "creator": self.creator,
            "chain_config": self.chain_config,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class Account:
    """A key account: either stored, or a candidate read from Beaker.toml."""

    label: str
    mnemonic: str

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "mnemonic": self.mnemonic}


# ── view + state ──────────────────────────────────────────────────────────


@dataclass
class Node:
    """Display form of a tree element, built when the element is shown."""

    identity: str
    label: str
    contract: Contract
    description: str = ""
    tooltip: str = ""
    context_value: str = "contract"  # "contract" or "code"
    expandable: bool = False
    expanded: bool = False
    disconnected: bool = False


@dataclass
class ChainConfig:
    """A configured chain the workspace can be pointed at."""

    name: str
    chain_id: str = ""
    rpc: str = ""


@dataclass
class Workspace:
    """Explicit application state shared by the filter and the tree."""

    active_chain: str
    sort_order: SortOrder = SortOrder.NONE
    selected_contract: str | None = None
    chains: list[ChainConfig] = field(default_factory=list)

    def chain_names(self) -> list[str]:
        return [c.name for c in self.chains]
