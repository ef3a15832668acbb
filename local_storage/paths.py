"""Object key to filesystem path mapping."""

import os
from pathlib import Path

from .exceptions import InvalidKeyError


def sanitize_key(key: str) -> str:
    """Neutralize parent-directory references in an object key.

    Every ``..`` substring is rewritten to ``_..`` so no segment can be a
    literal parent reference, and leading separators are stripped so an
    absolute key cannot replace the base path when joined.

    Args:
        key: Caller-supplied object key (untrusted)

    Returns:
        Key that is safe to join below a base directory
    """
    return key.replace("..", "_..").lstrip("/")


def resolve_key(base_path: Path, key: str) -> Path:
    """Resolve an object key to an absolute path under ``base_path``.

    The result is computed lexically; nothing is read from disk, so the
    path may not exist. Symlinks inside ``base_path`` are not followed.

    Args:
        base_path: Absolute storage root
        key: Caller-supplied object key (e.g., "reports/2024/q1.csv")

    Returns:
        Absolute path for the key

    Raises:
        InvalidKeyError: If the normalized path is not below ``base_path``
    """
    root = os.path.normpath(base_path)
    resolved = os.path.normpath(os.path.join(root, sanitize_key(key)))

    if os.path.commonpath([root, resolved]) != root:
        raise InvalidKeyError(
            f"Object key resolves outside the storage root: {key}",
            details={"key": key},
        )

    return Path(resolved)
