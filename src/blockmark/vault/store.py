"""Filesystem vault: named Markdown documents under one root directory.

A vault is a directory containing a ``.vault-marker`` file (or, for
vaults created before the marker existed, at least one ``.md`` file).
Documents are addressed by relative POSIX names such as
``"projects/roadmap"``; the configured suffix is appended when missing.
Every name is resolved against the root and rejected if it escapes it.

The store moves bytes only.  Decoding and encoding are the
:class:`~blockmark.transcoder.Transcoder`'s job.
"""

from __future__ import annotations

import contextlib
import os
from pathlib import Path, PurePosixPath

from blockmark.config import BlockmarkConfig
from blockmark.errors import (
    BlockmarkInvalidVaultError,
    BlockmarkNotFoundError,
    BlockmarkPathError,
    BlockmarkPermissionError,
    BlockmarkStorageError,
)
from blockmark.observability import get_logger

log = get_logger("blockmark.vault")

VAULT_MARKER = ".vault-marker"


def _wrap_os_error(exc: OSError, operation: str, name: str, path: Path) -> BlockmarkStorageError:
    """Translate an :class:`OSError` into the matching storage error."""
    context = {"operation": operation, "name": name, "path": str(path)}
    if isinstance(exc, FileNotFoundError):
        return BlockmarkNotFoundError(f"No such document or folder: {name}", context=context, cause=exc)
    if isinstance(exc, PermissionError):
        return BlockmarkPermissionError(f"Permission denied: {name}", context=context, cause=exc)
    return BlockmarkStorageError(f"{operation} failed for {name}: {exc}", context=context, cause=exc)


class VaultStore:
    """Read and write Markdown documents inside a vault root.

    Parameters
    ----------
    root:
        The vault directory.  Must exist and be a directory.
    config:
        Supplies ``document_suffix``.  Defaults to ``BlockmarkConfig()``.

    Raises
    ------
    BlockmarkInvalidVaultError
        If *root* does not exist or is not a directory.
    """

    def __init__(self, root: str | os.PathLike[str], config: BlockmarkConfig | None = None) -> None:
        self._config = config if config is not None else BlockmarkConfig()
        self._root = Path(root).expanduser().resolve()
        if not self._root.is_dir():
            raise BlockmarkInvalidVaultError(
                f"Vault root is not a directory: {root}",
                context={"path": str(self._root)},
            )

    @classmethod
    def create(
        cls,
        parent: str | os.PathLike[str],
        name: str,
        config: BlockmarkConfig | None = None,
    ) -> VaultStore:
        """Create a new vault directory *name* under *parent* and mark it."""
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise BlockmarkPathError(
                f"Invalid vault name: {name!r}",
                context={"name": name},
            )
        path = Path(parent).expanduser().resolve() / name
        try:
            path.mkdir(parents=False, exist_ok=True)
        except OSError as exc:
            raise _wrap_os_error(exc, "create_vault", name, path) from exc
        store = cls(path, config)
        store.mark()
        return store

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config(self) -> BlockmarkConfig:
        return self._config

    # ------------------------------------------------------------------
    # Vault identity
    # ------------------------------------------------------------------

    def is_vault(self) -> bool:
        """Return ``True`` if the root carries the marker or holds any document."""
        if (self._root / VAULT_MARKER).is_file():
            return True
        suffix = self._config.document_suffix
        return any(p.is_file() and p.suffix == suffix for p in self._root.iterdir())

    def mark(self) -> None:
        """Write the vault marker file (idempotent)."""
        marker = self._root / VAULT_MARKER
        try:
            marker.touch(exist_ok=True)
        except OSError as exc:
            raise _wrap_os_error(exc, "mark", VAULT_MARKER, marker) from exc

    # ------------------------------------------------------------------
    # Path resolution
    # ------------------------------------------------------------------

    def resolve(self, name: str, *, document: bool = True) -> Path:
        """Resolve *name* to an absolute path inside the vault.

        Parameters
        ----------
        name:
            Relative POSIX name.  For documents the configured suffix is
            appended unless the name already ends with it.
        document:
            ``False`` for folder names (no suffix handling).

        Raises
        ------
        BlockmarkPathError
            If *name* is empty, absolute, or resolves outside the root.
        """
        if not name or not name.strip():
            raise BlockmarkPathError("Empty document name", context={"name": name})
        relative = PurePosixPath(name.replace("\\", "/"))
        if relative.is_absolute() or not relative.name:
            raise BlockmarkPathError(
                f"Document name must be a relative file name: {name}",
                context={"name": name},
            )
        if document and not relative.name.endswith(self._config.document_suffix):
            relative = relative.with_name(relative.name + self._config.document_suffix)

        path = (self._root / relative).resolve()
        if not path.is_relative_to(self._root) or path == self._root:
            raise BlockmarkPathError(
                f"Path escapes vault root: {name}",
                context={"name": name, "root": str(self._root)},
            )
        return path

    def name_of(self, path: Path) -> str:
        """Return the vault-relative POSIX name of *path*."""
        return path.relative_to(self._root).as_posix()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_documents(self, folder: str | None = None) -> list[str]:
        """Return the sorted names of all documents, recursively.

        Parameters
        ----------
        folder:
            Restrict the listing to this sub-folder.
        """
        base = self.resolve(folder, document=False) if folder else self._root
        if not base.is_dir():
            raise BlockmarkNotFoundError(
                f"No such folder: {folder}",
                context={"name": folder, "path": str(base)},
            )
        suffix = self._config.document_suffix
        return sorted(
            self.name_of(path)
            for path in base.rglob(f"*{suffix}")
            if path.is_file() and not _is_hidden(path.relative_to(self._root))
        )

    def list_folders(self) -> list[str]:
        """Return the sorted names of all non-hidden folders, recursively."""
        return sorted(
            self.name_of(path)
            for path in self._root.rglob("*")
            if path.is_dir() and not _is_hidden(path.relative_to(self._root))
        )

    def exists(self, name: str) -> bool:
        return self.resolve(name).is_file()

    # ------------------------------------------------------------------
    # Reading and writing
    # ------------------------------------------------------------------

    def read(self, name: str) -> bytes:
        """Return the raw bytes of document *name*."""
        path = self.resolve(name)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise _wrap_os_error(exc, "read", name, path) from exc

    def write(self, name: str, data: bytes) -> None:
        """Replace document *name* with *data*, creating parent folders.

        The bytes are written to a sibling temporary file first and moved
        into place, so readers never observe a half-written document.
        """
        path = self.resolve(name)
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise _wrap_os_error(exc, "write", name, path) from exc
        log.debug(
            "Document written",
            extra={"extra_fields": {"op": "write", "name": self.name_of(path), "bytes": len(data)}},
        )

    def create_folder(self, name: str) -> None:
        path = self.resolve(name, document=False)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise _wrap_os_error(exc, "create_folder", name, path) from exc

    def delete(self, name: str) -> None:
        """Delete document *name*."""
        path = self.resolve(name)
        try:
            path.unlink()
        except OSError as exc:
            raise _wrap_os_error(exc, "delete", name, path) from exc
        log.debug(
            "Document deleted",
            extra={"extra_fields": {"op": "delete", "name": self.name_of(path)}},
        )


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)
