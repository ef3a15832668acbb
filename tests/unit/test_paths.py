"""Unit tests for object key to path mapping."""

from pathlib import Path

import pytest

from local_storage.paths import resolve_key, sanitize_key


BASE = Path("/srv/objects")


def _is_under_base(path: Path) -> bool:
    return path == BASE or BASE in path.parents


class TestSanitizeKey:
    """Tests for sanitize_key function."""

    def test_plain_key_unchanged(self):
        """Test keys without parent references pass through."""
        assert sanitize_key("reports/2024/q1.csv") == "reports/2024/q1.csv"

    def test_parent_reference_rewritten(self):
        """Test every '..' substring gets an underscore prefix."""
        assert sanitize_key("../../etc/passwd") == "_../_../etc/passwd"

    def test_dots_inside_name_rewritten(self):
        """Test substring rewriting also touches names containing '..'."""
        assert sanitize_key("archive..tar") == "archive_..tar"

    def test_leading_separators_stripped(self):
        """Test absolute keys become relative."""
        assert sanitize_key("/etc/passwd") == "etc/passwd"
        assert sanitize_key("//etc/passwd") == "etc/passwd"


class TestResolveKey:
    """Tests for resolve_key function."""

    def test_nested_key(self):
        """Test '/' separated segments become nested directories."""
        assert resolve_key(BASE, "a/b/c.txt") == BASE / "a" / "b" / "c.txt"

    def test_empty_key_is_base(self):
        """Test the empty key resolves to the storage root."""
        assert resolve_key(BASE, "") == BASE

    @pytest.mark.parametrize(
        "key",
        [
            "../../etc/passwd",
            "..",
            "a/../../..",
            "/etc/passwd",
            "./../x",
            "a/./../b",
            "....//....//etc",
        ],
    )
    def test_traversal_stays_under_base(self, key):
        """Test keys with parent references never escape the root."""
        resolved = resolve_key(BASE, key)

        assert resolved.is_absolute()
        assert _is_under_base(resolved)

    def test_traversal_key_maps_to_rewritten_path(self):
        """Test the traversal example resolves to its rewritten form."""
        assert resolve_key(BASE, "../../etc/passwd") == BASE / "_.." / "_.." / "etc" / "passwd"

    def test_redundant_segments_collapsed(self):
        """Test '.' and empty segments are normalized away."""
        assert resolve_key(BASE, "a/./b//c.txt") == BASE / "a" / "b" / "c.txt"
