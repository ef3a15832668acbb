"""Pytest fixtures for testing."""

import os
from pathlib import Path

import pytest

# Set test environment
os.environ.setdefault("LOCAL_STORAGE_SIGNING_BASE_URL", "https://files.example.test/storage")
os.environ.setdefault("LOCAL_STORAGE_SIGNING_SECRET_KEY", "test-secret")
os.environ.setdefault("LOCAL_STORAGE_LOG_LEVEL", "WARNING")

from local_storage import LocalStorageProvider  # noqa: E402


class RecordingSigner:
    """Signing function that records its calls and returns a fake URL."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []

    def __call__(self, operation: str, key: str, ttl: int) -> str:
        self.calls.append((operation, key, ttl))
        return f"https://signed.example.test/{operation}/{key}?ttl={ttl}"


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Create an empty storage root directory."""
    root = tmp_path / "objects"
    root.mkdir()
    return root


@pytest.fixture
def signer() -> RecordingSigner:
    """Create a recording signing function."""
    return RecordingSigner()


@pytest.fixture
def storage(storage_root: Path, signer: RecordingSigner) -> LocalStorageProvider:
    """Create a provider rooted at the test storage root."""
    return LocalStorageProvider({"base_path": storage_root, "signing_fn": signer})
