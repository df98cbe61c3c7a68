"""Beaker.toml account import.

Reads the `[accounts.<name>]` tables of a project's Beaker.toml and adds
the accounts that are not already known:

    [accounts.alice]
    mnemonic = "..."

A malformed file aborts the whole import; a single account without a
mnemonic is just skipped.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from . import config
from .reconcile import admit
from .types import Account

logger = logging.getLogger(__name__)

BEAKER_FILENAME = "beaker.toml"


class SourceParseError(RuntimeError):
    """Raised when an import source cannot be read or parsed."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


def find_beaker_file(project_dir: Path) -> Path | None:
    """Find Beaker.toml in project_dir, matching the name case-insensitively.

    Returns None when there is no match or the match is ambiguous.
    """
    try:
        matches = [
            p for p in project_dir.iterdir()
            if p.is_file() and p.name.lower() == BEAKER_FILENAME
        ]
    except OSError:
        return None
    if len(matches) != 1:
        if matches:
            logger.warning("Found %d Beaker.toml candidates in %s; skipping", len(matches), project_dir)
        return None
    return matches[0]


def parse_beaker_accounts(text: str, path: Path | None = None) -> list[Account]:
    """Parse the account tables of a Beaker.toml document.

    Args:
        text: TOML document.
        path: Source path, used in error messages.

    Returns:
        One Account per entry, in file order. Entries without a usable
        mnemonic come back with an empty mnemonic.

    Raises:
        SourceParseError: If the TOML is invalid or has no accounts table.
    """
    try:
        content = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise SourceParseError(f"invalid TOML: {e}", path) from e

    accounts = content.get("accounts")
    if accounts is None:
        raise SourceParseError("missing [accounts] table", path)
    if not isinstance(accounts, dict):
        raise SourceParseError("[accounts] must be a table", path)

    candidates: list[Account] = []
    for name, entry in accounts.items():
        mnemonic = entry.get("mnemonic") if isinstance(entry, dict) else None
        if not isinstance(mnemonic, str):
            logger.debug("Beaker account %r has no mnemonic", name)
            mnemonic = ""
        candidates.append(Account(label=name, mnemonic=mnemonic))
    return candidates


def load_beaker_accounts(path: Path) -> list[Account]:
    """Read and parse a Beaker.toml file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceParseError(f"could not read file: {e}", path) from e
    return parse_beaker_accounts(text, path)


def sync_beaker_accounts(project_dir: Path, *, force: bool = False) -> list[Account]:
    """Import new accounts from project_dir's Beaker.toml into the store.

    Runs only when beaker_autosync is enabled, unless force is set.

    Returns:
        The accounts that were added.

    Raises:
        SourceParseError: If Beaker.toml exists but cannot be read or parsed.
        config.StoreParseError: If accounts.yaml exists but cannot be read.
            Nothing is saved in either case.
    """
    if not force and not config.load_config().get("beaker_autosync", True):
        return []

    beaker_file = find_beaker_file(project_dir)
    if beaker_file is None:
        return []

    candidates = load_beaker_accounts(beaker_file)
    existing = config.load_accounts()
    added = admit(existing, candidates)
    if added:
        config.append_accounts(added)
        logger.info("Imported %d account(s) from %s", len(added), beaker_file)
    return added
