"""YAML-based configuration and record store.

Files under ~/.config/contract-views/ (XDG_CONFIG_HOME honoured):
1. config.yaml: chains, active chain, sort order, Beaker auto-sync
2. contracts.yaml: imported contracts
3. accounts.yaml: key accounts
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .types import Account, ChainConfig, Contract, ContractValidationError, SortOrder, Workspace

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "debug": False,
    "active_chain": "localnet",
    "chains": [
        {"name": "localnet", "chain_id": "localnet", "rpc": "http://localhost:26657"},
    ],
    "contract_sort_order": "none",
    "beaker_autosync": True,
}


def get_config_dir() -> Path:
    """Get the contract-views config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config) / "contract-views"


def get_config_path() -> Path:
    return get_config_dir() / "config.yaml"


def get_contracts_path() -> Path:
    return get_config_dir() / "contracts.yaml"


def get_accounts_path() -> Path:
    return get_config_dir() / "accounts.yaml"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        return None
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return None


def _dump_yaml(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# ---------------------------------------------------------------------------
# config.yaml
# ---------------------------------------------------------------------------

def load_config() -> dict[str, Any]:
    """Load config.yaml merged over the defaults."""
    data = _load_yaml(get_config_path())
    if not isinstance(data, dict):
        return copy.deepcopy(DEFAULT_CONFIG)
    return _deep_merge(copy.deepcopy(DEFAULT_CONFIG), data)


def save_config(cfg: dict[str, Any]) -> None:
    _dump_yaml(get_config_path(), cfg)


def get_chains(cfg: dict[str, Any] | None = None) -> list[ChainConfig]:
    """Get the configured chains, skipping malformed entries."""
    if cfg is None:
        cfg = load_config()
    chains: list[ChainConfig] = []
    raw = cfg.get("chains", [])
    if not isinstance(raw, list):
        logger.warning("Ignoring malformed chains list in config")
        return chains
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            logger.warning("Ignoring malformed chain entry: %r", entry)
            continue
        chains.append(ChainConfig(
            name=entry["name"],
            chain_id=str(entry.get("chain_id") or ""),
            rpc=str(entry.get("rpc") or ""),
        ))
    return chains


def get_sort_order(cfg: dict[str, Any] | None = None) -> SortOrder:
    if cfg is None:
        cfg = load_config()
    raw = cfg.get("contract_sort_order", DEFAULT_CONFIG["contract_sort_order"])
    try:
        return SortOrder.from_string(str(raw))
    except ValueError:
        logger.warning("Unknown contract_sort_order %r, using none", raw)
        return SortOrder.NONE


def set_sort_order(sort_order: SortOrder) -> None:
    cfg = load_config()
    cfg["contract_sort_order"] = sort_order.value
    save_config(cfg)


def set_active_chain(name: str) -> None:
    """Persist the active chain.

    Raises:
        ValueError: If name is not one of the configured chains.
    """
    cfg = load_config()
    names = [c.name for c in get_chains(cfg)]
    if name not in names:
        raise ValueError(f"Unknown chain: {name!r}. Configured: {', '.join(names) or 'none'}")
    cfg["active_chain"] = name
    save_config(cfg)


def set_selected_contract(address: str | None) -> None:
    cfg = load_config()
    cfg["selected_contract"] = address
    save_config(cfg)


def workspace_from_config(cfg: dict[str, Any] | None = None) -> Workspace:
    """Build the Workspace state from config."""
    if cfg is None:
        cfg = load_config()
    return Workspace(
        active_chain=str(cfg.get("active_chain") or ""),
        sort_order=get_sort_order(cfg),
        selected_contract=cfg.get("selected_contract") or None,
        chains=get_chains(cfg),
    )


# ---------------------------------------------------------------------------
# Record store (contracts.yaml, accounts.yaml)
# ---------------------------------------------------------------------------

class StoreParseError(RuntimeError):
    """Raised when a record store exists but cannot be read as a list."""

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(f"{path}: {message}")


def _load_store_entries(path: Path) -> list[Any]:
    """Load the raw entry list of a record store.

    A missing or empty file is an empty store. Anything else that is not a
    YAML list raises, so callers never save over records they could not read.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return []
    except yaml.YAMLError as e:
        raise StoreParseError(f"invalid YAML: {e}", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise StoreParseError(f"could not read file: {e}", path) from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise StoreParseError(f"expected a list, got {type(data).__name__}", path)
    return data


def load_contract_entries() -> list[Any]:
    """Load contracts.yaml as stored, including entries that fail validation."""
    return _load_store_entries(get_contracts_path())


def save_contract_entries(entries: list[Any]) -> None:
    _dump_yaml(get_contracts_path(), entries)


def load_contracts() -> list[Contract]:
    """Load stored contracts. Entries that fail validation are skipped.

    Raises:
        StoreParseError: If contracts.yaml exists but is not a readable list.
    """
    contracts: list[Contract] = []
    for idx, entry in enumerate(load_contract_entries()):
        try:
            contracts.append(Contract.from_dict(entry))
        except ContractValidationError as e:
            logger.warning("Skipping stored contract at index %d: %s", idx, e)
    return contracts


def save_contracts(contracts: list[Contract]) -> None:
    save_contract_entries([c.to_dict() for c in contracts])


def load_accounts() -> list[Account]:
    """Load stored accounts. Entries without a label or mnemonic are skipped.

    Raises:
        StoreParseError: If accounts.yaml exists but is not a readable list.
    """
    accounts: list[Account] = []
    for idx, entry in enumerate(_load_store_entries(get_accounts_path())):
        if not isinstance(entry, dict):
            logger.warning("Skipping stored account at index %d: not a mapping", idx)
            continue
        label = entry.get("label")
        mnemonic = entry.get("mnemonic")
        if not isinstance(label, str) or not isinstance(mnemonic, str):
            logger.warning("Skipping stored account at index %d: missing label/mnemonic", idx)
            continue
        accounts.append(Account(label=label, mnemonic=mnemonic))
    return accounts


def save_accounts(accounts: list[Account]) -> None:
    _dump_yaml(get_accounts_path(), [a.to_dict() for a in accounts])


def append_accounts(accounts: list[Account]) -> None:
    """Append accounts to accounts.yaml, keeping every existing entry as stored."""
    entries = _load_store_entries(get_accounts_path())
    entries.extend(a.to_dict() for a in accounts)
    _dump_yaml(get_accounts_path(), entries)
