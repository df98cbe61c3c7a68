"""Duplicate-safe admission of imported accounts.

An imported account is added only when neither its label nor its mnemonic
is already known. Accounts admitted earlier in the same batch count as
known for the rest of the batch.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .types import Account

logger = logging.getLogger(__name__)


def label_exists(accounts: Iterable[Account], label: str) -> bool:
    """Check if any account already uses this label."""
    return any(a.label == label for a in accounts)


def mnemonic_exists(accounts: Iterable[Account], mnemonic: str) -> bool:
    """Check if any account already uses this mnemonic."""
    return any(a.mnemonic == mnemonic for a in accounts)


def admit(existing: Iterable[Account], candidates: Iterable[Account]) -> list[Account]:
    """Return the candidates that can be added without creating duplicates.

    Args:
        existing: Accounts already stored.
        candidates: Accounts read from the import source, in source order.

    Returns:
        Admitted candidates in admission order. Candidates with a blank
        label or mnemonic are skipped.
    """
    seen_labels: set[str] = set()
    seen_mnemonics: set[str] = set()
    for account in existing:
        seen_labels.add(account.label)
        seen_mnemonics.add(account.mnemonic)

    admitted: list[Account] = []
    for candidate in candidates:
        if not candidate.label or not candidate.label.strip():
            logger.debug("Skipping import candidate without a label")
            continue
        if not candidate.mnemonic or not candidate.mnemonic.strip():
            logger.debug("Skipping import candidate %r: no mnemonic", candidate.label)
            continue
        if candidate.label in seen_labels:
            logger.debug("Skipping import candidate %r: label already exists", candidate.label)
            continue
        if candidate.mnemonic in seen_mnemonics:
            logger.debug("Skipping import candidate %r: mnemonic already imported", candidate.label)
            continue

        admitted.append(candidate)
        seen_labels.add(candidate.label)
        seen_mnemonics.add(candidate.mnemonic)

    return admitted
