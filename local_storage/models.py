"""Pydantic models shared by the storage interface and its providers."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class SigningOperation(str, Enum):
    """Operation a pre-signed URL grants."""

    GET = "get"
    PUT = "put"


class StorageOptions(BaseModel):
    """Immutable provider configuration, fixed at construction time."""

    model_config = ConfigDict(frozen=True)

    base_path: Path
    signing_fn: Any

    @field_validator("base_path")
    @classmethod
    def _absolute_base_path(cls, value: Path) -> Path:
        return value.expanduser().absolute()

    @field_validator("signing_fn")
    @classmethod
    def _callable_signing_fn(cls, value: Any) -> Any:
        if not callable(value):
            raise ValueError("signing_fn must be callable")
        return value


class ObjectEntry(BaseModel):
    """A stored object returned by a listing.

    The content fields exist so results have the same shape across
    providers. The local filesystem keeps no such metadata, so this
    provider always leaves them unset.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    size: int
    last_modified: datetime
    creation_time: datetime | None = None
    content_type: str | None = None
    content_md5: str | None = None
    content_sha1: str | None = None


class PrefixEntry(BaseModel):
    """A prefix (folder) returned by a non-recursive listing."""

    model_config = ConfigDict(frozen=True)

    prefix: str


ListingEntry = ObjectEntry | PrefixEntry
