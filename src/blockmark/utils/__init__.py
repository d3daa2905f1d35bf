from .hashing import md5_hash

__all__ = [
    "md5_hash",
]
