"""CLI interface for contract-views.

    cview tree                 # show the contract tree
    cview sort code_id         # group contracts by code id
    cview chain testnet        # switch the active chain
    cview import-beaker        # pull accounts from ./Beaker.toml
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from . import __version__
from .types import SortOrder

console = Console(highlight=False)


def _fail(msg: str) -> None:
    print(f"Error: {msg}")
    sys.exit(1)


def _configure_logging(cfg: dict) -> None:
    level = logging.DEBUG if cfg.get("debug") else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cmd_tree(args):
    """Render the contract tree."""
    from . import config
    from .render import build_rich_tree
    from .tree import ContractTree

    workspace = config.workspace_from_config()
    if args.sort:
        try:
            workspace.sort_order = SortOrder.from_string(args.sort)
        except ValueError as e:
            _fail(str(e))
    if args.chain:
        workspace.active_chain = args.chain

    tree = ContractTree(workspace)
    tree.refresh(config.load_contracts())

    if not tree.records:
        console.print(f"[dim]No contracts on {workspace.active_chain}.[/dim]")
        console.print("[dim]Add one with [cyan]cview contract add[/cyan].[/dim]")
        return
    console.print(build_rich_tree(tree))


def _prompt_sort_order(current: SortOrder) -> SortOrder | None:
    import questionary

    answer = questionary.select(
        "Contract sort order",
        choices=[o.value for o in SortOrder],
        default=current.value,
    ).ask()
    return SortOrder(answer) if answer else None


def cmd_sort(args):
    """Show or set the contract sort order."""
    from . import config

    current = config.get_sort_order()
    if args.order:
        try:
            order = SortOrder.from_string(args.order)
        except ValueError as e:
            _fail(str(e))
    else:
        order = _prompt_sort_order(current)
        if order is None:
            print(f"Sort order unchanged: {current}")
            return

    config.set_sort_order(order)
    print(f"Sort order: {order}")


def cmd_chain(args):
    """Show or switch the active chain."""
    from . import config
    from .tree import ContractTree

    if not args.name:
        workspace = config.workspace_from_config()
        for chain in workspace.chains:
            marker = "*" if chain.name == workspace.active_chain else " "
            detail = f"  {chain.rpc}" if chain.rpc else ""
            console.print(f"{marker} {chain.name}{detail}")
        return

    try:
        config.set_active_chain(args.name)
    except ValueError as e:
        _fail(str(e))

    tree = ContractTree(config.workspace_from_config())
    tree.refresh(config.load_contracts())
    print(f"Active chain: {args.name} ({len(tree.records)} contract(s) visible)")


def _entry_address(entry) -> str | None:
    return entry.get("address") if isinstance(entry, dict) else None


def cmd_contract_add(args):
    """Store a contract."""
    from . import config
    from .types import Contract, ContractValidationError

    workspace = config.workspace_from_config()
    try:
        contract = Contract(
            label=args.label,
            address=args.address,
            code_id=args.code_id,
            creator=args.creator or "",
            chain_config=workspace.active_chain if args.chain is None else args.chain,
            notes=args.notes or "",
        )
    except ContractValidationError as e:
        _fail(str(e))

    # raw entries, so stored contracts that fail validation are written back untouched
    entries = config.load_contract_entries()
    if any(_entry_address(e) == contract.address for e in entries):
        _fail(f"Contract already imported: {contract.address}")

    entries.append(contract.to_dict())
    config.save_contract_entries(entries)
    print(f"Added contract: {contract.code_id}: {contract.label} ({contract.address})")


def cmd_contract_remove(args):
    """Remove a stored contract by address."""
    from . import config

    entries = config.load_contract_entries()
    remaining = [e for e in entries if _entry_address(e) != args.address]
    if len(remaining) == len(entries):
        _fail(f"Contract not found: {args.address}")

    config.save_contract_entries(remaining)
    if config.workspace_from_config().selected_contract == args.address:
        config.set_selected_contract(None)
    print(f"Removed contract: {args.address}")


def cmd_contract_select(args):
    """Select the contract that queries and transactions target."""
    from . import config

    contract = next((c for c in config.load_contracts() if c.address == args.address), None)
    if contract is None:
        _fail(f"Contract not found: {args.address}")

    config.set_selected_contract(contract.address)
    print(f"Selected contract: {contract.label} ({contract.address})")


def cmd_accounts(args):
    """List stored account labels."""
    from . import config

    accounts = config.load_accounts()
    if not accounts:
        console.print("[dim]No accounts.[/dim]")
        return
    for account in accounts:
        console.print(f"  {account.label}")


def cmd_import_beaker(args):
    """Import accounts from Beaker.toml."""
    from .beaker import SourceParseError, sync_beaker_accounts

    project_dir = Path(args.dir).resolve() if args.dir else Path.cwd().resolve()
    if not project_dir.is_dir():
        _fail(f"Not a directory: {project_dir}")

    try:
        added = sync_beaker_accounts(project_dir, force=args.force)
    except SourceParseError as e:
        _fail(f"Beaker import failed: {e}")

    if not added:
        print("No new accounts imported.")
        return
    print(f"Imported {len(added)} account(s):")
    for account in added:
        print(f"  {account.label}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cview",
        description="contract-views: browse contracts and sync accounts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"contract-views {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    # tree
    tree_p = subparsers.add_parser("tree", help="Show the contract tree")
    tree_p.add_argument("--sort", help="Sort order for this view only")
    tree_p.add_argument("--chain", help="Chain to show instead of the active one")
    tree_p.set_defaults(func=cmd_tree)

    # sort
    sort_p = subparsers.add_parser("sort", help="Set the contract sort order")
    sort_p.add_argument("order", nargs="?", help="none, alphabetical or code_id (prompts if omitted)")
    sort_p.set_defaults(func=cmd_sort)

    # chain
    chain_p = subparsers.add_parser("chain", help="Show or switch the active chain")
    chain_p.add_argument("name", nargs="?", help="Configured chain to activate")
    chain_p.set_defaults(func=cmd_chain)

    # contract
    contract_p = subparsers.add_parser("contract", help="Manage stored contracts")
    contract_sub = contract_p.add_subparsers(dest="contract_command")

    add_p = contract_sub.add_parser("add", help="Add a contract")
    add_p.add_argument("label", help="Display name")
    add_p.add_argument("code_id", help="Code id the contract was instantiated from")
    add_p.add_argument("address", help="Contract address")
    add_p.add_argument("--creator", help="Creator address")
    add_p.add_argument("--chain", help="Chain config name (default: active chain, '' for all)")
    add_p.add_argument("--notes", help="Notes shown in the tooltip")
    add_p.set_defaults(func=cmd_contract_add)

    remove_p = contract_sub.add_parser("remove", help="Remove a contract")
    remove_p.add_argument("address", help="Contract address")
    remove_p.set_defaults(func=cmd_contract_remove)

    select_p = contract_sub.add_parser("select", help="Select a contract")
    select_p.add_argument("address", help="Contract address")
    select_p.set_defaults(func=cmd_contract_select)

    # accounts
    accounts_p = subparsers.add_parser("accounts", help="List accounts")
    accounts_p.set_defaults(func=cmd_accounts)

    # import-beaker
    beaker_p = subparsers.add_parser("import-beaker", help="Import accounts from Beaker.toml")
    beaker_p.add_argument("--dir", help="Project directory (default: cwd)")
    beaker_p.add_argument("--force", action="store_true", help="Import even if auto-sync is off")
    beaker_p.set_defaults(func=cmd_import_beaker)

    return parser


def main(argv: list[str] | None = None):
    """Main entry point."""
    from . import config

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(config.load_config())

    try:
        if hasattr(args, "func"):
            args.func(args)
        else:
            parser.print_help()
    except config.StoreParseError as e:
        _fail(str(e))
    except KeyboardInterrupt:
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
