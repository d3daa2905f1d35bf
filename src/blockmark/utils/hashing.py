"""MD5 helper for content fingerprints.

:class:`~blockmark.vault.NoteSession` fingerprints the last Markdown it
wrote so that an auto-save whose output is byte-identical skips the disk
write.  Not used for security purposes.
"""

from __future__ import annotations

import hashlib


def md5_hash(data: str | bytes) -> str:
    """Return the hex-encoded MD5 digest of *data*.

    Strings are encoded as UTF-8 before hashing.

    Examples
    --------
    >>> md5_hash("hello")
    '5d41402abc4b2a76b9719d911017c592'
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data).hexdigest()
