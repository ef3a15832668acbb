"""Local filesystem provider for the pluggable object storage interface."""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from .base import StorageProvider
from .config import get_settings
from .exceptions import (
    ConfigurationError,
    InvalidInputError,
    InvalidKeyError,
    StorageError,
)
from .filesystem import LocalStorageProvider
from .models import ListingEntry, ObjectEntry, PrefixEntry, SigningOperation, StorageOptions
from .signing import DEFAULT_TTL_SECONDS, HmacUrlSigner, Signer, normalize_ttl

PROVIDERS: dict[str, type[StorageProvider]] = {
    "localstorage": LocalStorageProvider,
}


def create_provider(name: str, options: Mapping[str, Any]) -> StorageProvider:
    """Create a storage provider by name.

    Args:
        name: Provider name (e.g., "localstorage")
        options: Options passed to the provider constructor

    Returns:
        Provider instance

    Raises:
        ValueError: If the provider name is unknown
    """
    provider_cls = PROVIDERS.get(name.lower())
    if provider_cls is None:
        raise ValueError(
            f"Unknown storage provider: {name}. "
            f"Supported providers: {', '.join(sorted(PROVIDERS))}"
        )
    return provider_cls(options)


@lru_cache
def get_storage(signing_fn: Signer | None = None) -> StorageProvider:
    """Get the configured local storage provider.

    Uses the ``base_path`` setting as the storage root. When no signing
    function is given, URLs are signed with an ``HmacUrlSigner`` built from
    the signing settings. Cached per signing function.

    The signing function is the cache key, so it must be hashable. Build a
    ``LocalStorageProvider`` directly for an unhashable callable.

    Returns:
        Configured provider instance

    Raises:
        TypeError: If ``signing_fn`` is unhashable
    """
    settings = get_settings()
    if signing_fn is None:
        signing_fn = HmacUrlSigner(
            settings.signing_base_url, settings.signing_secret_key
        )
    return LocalStorageProvider(
        {"base_path": settings.base_path, "signing_fn": signing_fn}
    )


__all__ = [
    "DEFAULT_TTL_SECONDS",
    "PROVIDERS",
    "ConfigurationError",
    "HmacUrlSigner",
    "InvalidInputError",
    "InvalidKeyError",
    "ListingEntry",
    "LocalStorageProvider",
    "ObjectEntry",
    "PrefixEntry",
    "Signer",
    "SigningOperation",
    "StorageError",
    "StorageOptions",
    "StorageProvider",
    "create_provider",
    "get_storage",
    "normalize_ttl",
]
