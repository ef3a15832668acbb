"""Local filesystem storage provider."""

import asyncio
import errno
import inspect
import os
import stat
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import structlog
from pydantic import ValidationError

from .base import StorageProvider
from .exceptions import ConfigurationError
from .models import (
    ListingEntry,
    ObjectEntry,
    PrefixEntry,
    SigningOperation,
    StorageOptions,
)
from .paths import resolve_key
from .signing import normalize_ttl
from .streams import iter_chunks, validate_upload_data

logger = structlog.get_logger().bind(provider="localstorage")

DEFAULT_BASE_PATH = Path(__file__).resolve().parent


class LocalStorageProvider(StorageProvider):
    """Object storage on a local directory tree.

    Object keys map to files below ``base_path``; "/" in a key creates
    nested directories. There are no containers, so container arguments
    are ignored and container operations do nothing. Pre-signed URLs are
    produced by the caller's ``signing_fn``.

    Example structure:
        /srv/objects/
            ├── avatars/
            │   └── user-42.png      <- key "avatars/user-42.png"
            └── readme.txt           <- key "readme.txt"
    """

    def __init__(self, options: Mapping[str, Any] | StorageOptions | None):
        """Initialize the provider.

        Args:
            options: ``base_path`` (storage root, defaults to this package's
                directory) and ``signing_fn`` (required callable taking
                ``(operation, key, ttl)`` and returning a URL)

        Raises:
            ConfigurationError: If options are empty or not a mapping, or
                ``signing_fn`` is missing or not callable
        """
        self._options = self._build_options(options)
        logger.info("Local storage provider initialized", base_path=str(self.base_path))

    @staticmethod
    def _build_options(
        options: Mapping[str, Any] | StorageOptions | None,
    ) -> StorageOptions:
        if isinstance(options, StorageOptions):
            return options
        if not options:
            raise ConfigurationError("Options argument is empty")
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                f"Options must be a mapping, got {type(options).__name__}"
            )
        if options.get("signing_fn") is None:
            raise ConfigurationError("Signing function (signing_fn) is empty")

        try:
            return StorageOptions(
                base_path=options.get("base_path") or DEFAULT_BASE_PATH,
                signing_fn=options["signing_fn"],
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid storage options: {e}") from e

    @property
    def provider(self) -> str:
        return "localstorage"

    @property
    def base_path(self) -> Path:
        return self._options.base_path

    def resolve(self, key: str) -> Path:
        """Map an object key to its path below the storage root."""
        return resolve_key(self.base_path, key)

    # Containers do not exist on a local filesystem; these keep the
    # interface contract without doing any I/O.

    async def create_container(
        self, container: str, options: dict[str, Any] | None = None
    ) -> None:
        return None

    async def is_container(self, container: str) -> bool:
        return False

    async def ensure_container(
        self, container: str, options: dict[str, Any] | None = None
    ) -> None:
        return None

    async def list_containers(self) -> list[str]:
        return []

    async def delete_container(self, container: str) -> None:
        return None

    async def put_object(
        self,
        container: str,
        key: str,
        data: Any,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Write an object, replacing any existing file at the key.

        Missing parent directories are created. The call returns once the
        data has been flushed and synced to disk. ``options`` (including
        ``metadata``) is accepted for compatibility and not persisted.

        Args:
            container: Ignored
            key: Object key
            data: Byte stream, bytes-like buffer or string (UTF-8)
            options: Ignored

        Raises:
            InvalidInputError: If ``data`` has an unsupported type; nothing
                is written in that case
            OSError: If a directory can't be created or the write fails
        """
        validate_upload_data(data)
        dest_path = self.resolve(key)

        # First chunk is read before any directory or file is touched, so a
        # stream of the wrong element type fails with the target intact.
        chunks = iter_chunks(data)
        try:
            first = await anext(chunks, b"")

            await aiofiles.os.makedirs(dest_path.parent, exist_ok=True)

            written = 0
            async with aiofiles.open(dest_path, "wb") as f:
                await f.write(first)
                written += len(first)
                async for chunk in chunks:
                    await f.write(chunk)
                    written += len(chunk)
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
        except OSError as e:
            logger.warning("Failed to write object", key=key, error=str(e))
            raise
        finally:
            await chunks.aclose()

        logger.debug("Stored object", key=key, path=str(dest_path), size=written)

    async def get_object(self, container: str, key: str) -> Any:
        """Open an object for streaming reads.

        The file is opened before this coroutine returns, so open failures
        surface here rather than on the first read.

        Args:
            container: Ignored
            key: Object key

        Returns:
            aiofiles binary reader positioned at the start of the object

        Raises:
            FileNotFoundError: If the object doesn't exist
            OSError: If the object can't be opened
        """
        file_path = self.resolve(key)
        try:
            stream = await aiofiles.open(file_path, "rb")
        except OSError as e:
            logger.warning("Failed to open object", key=key, error=str(e))
            raise

        logger.debug("Opened object", key=key, path=str(file_path))
        return stream

    async def list_objects(
        self, container: str, prefix: str = ""
    ) -> list[ListingEntry]:
        """List the entries directly inside the directory for ``prefix``.

        Subdirectories become ``PrefixEntry`` items holding only their name;
        to list one, call again with ``f"{prefix}/{name}"``. Everything else
        becomes an ``ObjectEntry`` with size and timestamps from ``stat``.
        Entries keep the order the operating system returns them in.

        Args:
            container: Ignored
            prefix: Directory key ("" for the storage root)

        Returns:
            Entries for the immediate children of the directory

        Raises:
            NotADirectoryError: If ``prefix`` is a file or doesn't exist
            OSError: If the directory or one of its children can't be read
        """
        dir_path = self.resolve(prefix)
        if not await aiofiles.os.path.isdir(dir_path):
            raise NotADirectoryError(
                errno.ENOTDIR, "Prefix is not a directory", str(dir_path)
            )

        try:
            names = await aiofiles.os.listdir(dir_path)
            entries: list[ListingEntry] = []
            for name in names:
                child_stat = await aiofiles.os.stat(dir_path / name)
                entries.append(_entry_from_stat(name, child_stat))
        except OSError as e:
            logger.warning("Failed to list objects", prefix=prefix, error=str(e))
            raise

        logger.debug("Listed objects", prefix=prefix, count=len(entries))
        return entries

    async def delete_object(self, container: str, key: str) -> None:
        """Remove the file for ``key``.

        Deleting a missing object is an error, as with a plain file removal.

        Args:
            container: Ignored
            key: Object key

        Raises:
            FileNotFoundError: If the object doesn't exist
            OSError: If the file can't be removed
        """
        file_path = self.resolve(key)
        try:
            await aiofiles.os.remove(file_path)
        except OSError as e:
            logger.warning("Failed to delete object", key=key, error=str(e))
            raise

        logger.debug("Deleted object", key=key, path=str(file_path))

    async def presigned_get_url(
        self, container: str, key: str, ttl: int | None = None
    ) -> str:
        """Get a GET URL from the signing function.

        The object is not checked for existence.
        """
        return await self._sign(SigningOperation.GET, key, ttl)

    async def presigned_put_url(
        self,
        container: str,
        key: str,
        options: dict[str, Any] | None = None,
        ttl: int | None = None,
    ) -> str:
        """Get a PUT URL from the signing function.

        The key is not checked for existence; ``options`` is ignored.
        """
        return await self._sign(SigningOperation.PUT, key, ttl)

    async def _sign(
        self, operation: SigningOperation, key: str, ttl: int | None
    ) -> str:
        url = self._options.signing_fn(operation.value, key, normalize_ttl(ttl))
        if inspect.isawaitable(url):
            url = await url
        return url


def _entry_from_stat(name: str, st: os.stat_result) -> ListingEntry:
    if stat.S_ISDIR(st.st_mode):
        return PrefixEntry(prefix=name)

    # st_birthtime is only exposed on some platforms (macOS, BSD, Windows)
    birthtime = getattr(st, "st_birthtime", None)
    return ObjectEntry(
        path=name,
        size=st.st_size,
        last_modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        creation_time=(
            datetime.fromtimestamp(birthtime, tz=timezone.utc)
            if birthtime is not None
            else None
        ),
    )
