"""Vault storage and editing sessions.

- :class:`VaultStore` -- bytes in, bytes out, for named documents under a root.
- :class:`NoteSession` -- decode on open, debounced encode-and-write on edit.
"""

from blockmark.vault.session import NoteSession
from blockmark.vault.store import VAULT_MARKER, VaultStore

__all__ = [
    "NoteSession",
    "VAULT_MARKER",
    "VaultStore",
]
