"""Unit tests for the local-storage command line."""

import logging
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest
import structlog
from structlog.testing import capture_logs
from typer.testing import CliRunner

from local_storage import LocalStorageProvider
from local_storage.cli import app, setup_logging


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the global logging setup done by each command."""
    yield
    structlog.reset_defaults()


def _invoke(runner: CliRunner, storage_root: Path, *args: str):
    return runner.invoke(app, ["--base-path", str(storage_root), *args])


class TestListCommand:
    """Tests for the ls command."""

    def test_lists_objects_and_prefixes(self, runner: CliRunner, storage_root: Path):
        """Test files and folders are printed one per line."""
        (storage_root / "f.txt").write_bytes(b"0123456789")
        (storage_root / "sub").mkdir()

        result = _invoke(runner, storage_root, "ls")

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert len(lines) == 2
        assert any(line.split()[0] == "10" and line.endswith("f.txt") for line in lines)
        assert any(line.split()[0] == "PRE" and line.endswith("sub/") for line in lines)

    def test_listing_a_file_fails(self, runner: CliRunner, storage_root: Path):
        """Test a file prefix exits with an error."""
        (storage_root / "f.txt").write_bytes(b"x")

        result = _invoke(runner, storage_root, "ls", "f.txt")

        assert result.exit_code == 1
        assert "Cannot list prefix" in result.output


class TestObjectCommands:
    """Tests for put, cat and rm."""

    def test_put_then_cat(self, runner: CliRunner, storage_root: Path, tmp_path: Path):
        """Test an uploaded file can be printed back."""
        src = tmp_path / "upload.bin"
        src.write_bytes(b"\x00binary\xff")

        put = _invoke(runner, storage_root, "put", "nested/dir/upload.bin", str(src))
        assert put.exit_code == 0
        assert (storage_root / "nested" / "dir" / "upload.bin").read_bytes() == b"\x00binary\xff"

        cat = _invoke(runner, storage_root, "cat", "nested/dir/upload.bin")
        assert cat.exit_code == 0
        assert cat.stdout_bytes == b"\x00binary\xff"

    def test_cat_missing_object(self, runner: CliRunner, storage_root: Path):
        """Test reading a missing object exits with an error."""
        result = _invoke(runner, storage_root, "cat", "missing.txt")

        assert result.exit_code == 1
        assert "Cannot read object" in result.output

    def test_rm(self, runner: CliRunner, storage_root: Path):
        """Test an object is deleted."""
        (storage_root / "old.txt").write_text("old")

        result = _invoke(runner, storage_root, "rm", "old.txt")

        assert result.exit_code == 0
        assert not (storage_root / "old.txt").exists()

    def test_rm_missing_object(self, runner: CliRunner, storage_root: Path):
        """Test deleting a missing object exits with an error."""
        result = _invoke(runner, storage_root, "rm", "old.txt")

        assert result.exit_code == 1
        assert "Cannot delete object" in result.output


class TestPresignCommand:
    """Tests for the presign command."""

    def test_get_url(self, runner: CliRunner, storage_root: Path):
        """Test a download URL with the default TTL."""
        result = _invoke(runner, storage_root, "presign", "a.txt")

        assert result.exit_code == 0
        url = result.stdout.strip()
        assert url.startswith("https://files.example.test/storage/a.txt?")
        assert parse_qs(urlsplit(url).query)["op"] == ["get"]

    def test_put_url(self, runner: CliRunner, storage_root: Path):
        """Test --put signs an upload URL."""
        result = _invoke(runner, storage_root, "presign", "a.txt", "--put", "--ttl", "60")

        assert result.exit_code == 0
        assert parse_qs(urlsplit(result.stdout.strip()).query)["op"] == ["put"]
        assert list(storage_root.iterdir()) == []


class TestLogging:
    """Tests for CLI logging setup."""

    def test_setup_logging_configures_structlog(self):
        """Test structlog and the stdlib level are configured."""
        setup_logging("debug", "json")

        assert structlog.is_configured()
        assert logging.getLogger().level == logging.DEBUG

    def test_provider_events_carry_provider_name(self, storage_root: Path, signer):
        """Test provider log events are tagged with the provider name."""
        setup_logging("DEBUG", "console")

        with capture_logs() as logs:
            LocalStorageProvider({"base_path": storage_root, "signing_fn": signer})

        assert logs[0]["event"] == "Local storage provider initialized"
        assert logs[0]["provider"] == "localstorage"
