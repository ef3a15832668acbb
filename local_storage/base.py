"""Storage provider interface."""

from abc import ABC, abstractmethod
from typing import Any

from .models import ListingEntry


class StorageProvider(ABC):
    """Abstract object storage provider.

    This interface defines the contract shared by every backend, whether
    it talks to a cloud service (S3, Azure Blob, MinIO) or maps objects
    onto a local directory. All operations take a container (bucket)
    name; providers without containers ignore it.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Short provider name (e.g., "localstorage")."""

    @property
    def client(self) -> Any:
        """Underlying native client, or None when there is none."""
        return None

    @abstractmethod
    async def create_container(
        self, container: str, options: dict[str, Any] | None = None
    ) -> None:
        """Create a container.

        Args:
            container: Container name
            options: Provider-specific options (e.g., region, access tier)
        """

    @abstractmethod
    async def is_container(self, container: str) -> bool:
        """Check whether a container exists.

        Args:
            container: Container name

        Returns:
            True if the container exists
        """

    @abstractmethod
    async def ensure_container(
        self, container: str, options: dict[str, Any] | None = None
    ) -> None:
        """Create a container if it does not exist yet.

        Args:
            container: Container name
            options: Provider-specific options
        """

    @abstractmethod
    async def list_containers(self) -> list[str]:
        """List all containers visible to the caller.

        Returns:
            Container names
        """

    @abstractmethod
    async def delete_container(self, container: str) -> None:
        """Delete a container.

        Args:
            container: Container name
        """

    @abstractmethod
    async def put_object(
        self,
        container: str,
        key: str,
        data: Any,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Upload an object.

        Args:
            container: Container name
            key: Object key (e.g., "reports/2024/q1.csv")
            data: Byte stream, bytes-like buffer or string
            options: Provider-specific options, including a ``metadata`` dict

        Raises:
            InvalidInputError: If ``data`` has an unsupported type
            OSError: If the write fails
        """

    @abstractmethod
    async def get_object(self, container: str, key: str) -> Any:
        """Open an object for reading.

        Args:
            container: Container name
            key: Object key

        Returns:
            Readable async byte stream; the caller must close it

        Raises:
            FileNotFoundError: If the object doesn't exist
            OSError: If the object can't be opened
        """

    @abstractmethod
    async def list_objects(
        self, container: str, prefix: str = ""
    ) -> list[ListingEntry]:
        """List objects and prefixes directly under ``prefix``.

        The listing is not recursive: nested prefixes are returned as
        ``PrefixEntry`` items rather than being descended into.

        Args:
            container: Container name
            prefix: Prefix (folder) to list

        Returns:
            Object and prefix entries, in no particular order
        """

    @abstractmethod
    async def delete_object(self, container: str, key: str) -> None:
        """Delete an object.

        Args:
            container: Container name
            key: Object key

        Raises:
            FileNotFoundError: If the object doesn't exist
            OSError: If deletion fails
        """

    @abstractmethod
    async def presigned_get_url(
        self, container: str, key: str, ttl: int | None = None
    ) -> str:
        """Get a URL that allows a GET of the object without credentials.

        Args:
            container: Container name
            key: Object key
            ttl: Expiry of the URL in seconds (default: 1 day)

        Returns:
            Pre-signed URL
        """

    @abstractmethod
    async def presigned_put_url(
        self,
        container: str,
        key: str,
        options: dict[str, Any] | None = None,
        ttl: int | None = None,
    ) -> str:
        """Get a URL that allows a PUT of the object without credentials.

        Args:
            container: Container name
            key: Object key
            options: Provider-specific options
            ttl: Expiry of the URL in seconds (default: 1 day)

        Returns:
            Pre-signed URL
        """

    async def get_object_as_bytes(self, container: str, key: str) -> bytes:
        """Read a whole object into memory.

        Args:
            container: Container name
            key: Object key

        Returns:
            Object contents
        """
        stream = await self.get_object(container, key)
        try:
            return await stream.read()
        finally:
            await stream.close()

    async def get_object_as_string(
        self, container: str, key: str, encoding: str = "utf-8"
    ) -> str:
        """Read a whole object and decode it as text."""
        data = await self.get_object_as_bytes(container, key)
        return data.decode(encoding)
