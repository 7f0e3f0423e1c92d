"""Tests for skip-CI detection and path filters."""

import pytest

from gitea_pr_resource.filters import (
    PatternError,
    contains_skip_ci,
    filter_ignore_path,
    filter_path,
    is_inside_path,
    match,
)


@pytest.mark.parametrize(
    "message, want",
    [
        ("(", False),
        ("test", False),
        ("[ci skip]", True),
        ("[skip ci]", True),
        ("[no ci]", True),
        ("trailing [skip ci]", True),
        ("[skip ci] leading", True),
        ("case[Skip CI]insensitive", True),
        ("[skip ci", False),
        ("skip ci]", False),
        ("ci skip", False),
        ("", False),
    ],
)
def test_contains_skip_ci(message: str, want: bool) -> None:
    """Only bracketed markers match, in any case and position."""
    assert contains_skip_ci(message) is want


class TestIsInsidePath:
    """is_inside_path: equality or prefix on a separator boundary."""

    def test_child_inside_parent(self) -> None:
        """/foo/bar is inside /foo."""
        assert is_inside_path("/foo", "/foo/bar") is True

    def test_sibling_with_common_prefix(self) -> None:
        """/foobar is not inside /foo."""
        assert is_inside_path("/foo", "/foobar") is False

    def test_equal_paths(self) -> None:
        """A path is inside itself."""
        assert is_inside_path("/foo", "/foo") is True

    def test_parent_with_trailing_separator(self) -> None:
        """/foo is not inside /foo/, /foo/bar is."""
        assert is_inside_path("/foo/", "/foo") is False
        assert is_inside_path("/foo/", "/foo/bar") is True

    def test_relative_paths(self) -> None:
        """Works the same for the relative paths the API returns."""
        assert is_inside_path("docs", "docs/guide/index.md") is True
        assert is_inside_path("docs", "docsite/index.md") is False


class TestMatch:
    """Single-level shell glob semantics."""

    def test_star_does_not_cross_separator(self) -> None:
        """* stays within one path segment."""
        assert match("*.md", "README.md") is True
        assert match("*.md", "docs/index.md") is False
        assert match("docs/*.md", "docs/index.md") is True
        assert match("terraform/*/*.tf", "terraform/modules/ecs/main.tf") is False

    def test_question_mark(self) -> None:
        """? matches one non-separator character."""
        assert match("v?.txt", "v1.txt") is True
        assert match("v?.txt", "v10.txt") is False
        assert match("a?b", "a/b") is False

    def test_character_class(self) -> None:
        """Classes, ranges and negation."""
        assert match("file[0-9].go", "file7.go") is True
        assert match("file[0-9].go", "filex.go") is False
        assert match("file[^0-9].go", "filex.go") is True
        assert match("file[^0-9].go", "file7.go") is False
        assert match("[ab]c", "bc") is True

    def test_escape(self) -> None:
        """Backslash makes the next character literal."""
        assert match("a\\*b", "a*b") is True
        assert match("a\\*b", "axb") is False
        assert match("[\\]]", "]") is True

    def test_literal(self) -> None:
        """Regex metacharacters in patterns are literal."""
        assert match("a.b+c", "a.b+c") is True
        assert match("a.b+c", "axbbc") is False

    @pytest.mark.parametrize("pattern", ["[", "abc[", "[]", "[^]", "[a-", "[z-a]", "[-a]", "abc\\"])
    def test_malformed_patterns_raise(self, pattern: str) -> None:
        """Malformed patterns raise PatternError."""
        with pytest.raises(PatternError):
            match(pattern, "abc")


class TestFilterPath:
    """filter_path and filter_ignore_path."""

    FILES = ["README.md", "docs/index.md", "docsite/a.md", "src/app.py"]

    def test_filter_path_glob(self) -> None:
        """Files matching the glob are kept."""
        assert filter_path(self.FILES, "*.md") == ["README.md"]

    def test_filter_path_directory(self) -> None:
        """Files inside the pattern as a directory are kept."""
        assert filter_path(self.FILES, "docs") == ["docs/index.md"]

    def test_filter_path_no_match(self) -> None:
        """No matches is an empty list, not an error."""
        assert filter_path(self.FILES, "lib") == []

    def test_filter_ignore_path(self) -> None:
        """Files matching the glob or inside the directory are removed."""
        assert filter_ignore_path(self.FILES, "*.md") == ["docs/index.md", "docsite/a.md", "src/app.py"]
        assert filter_ignore_path(self.FILES, "docs") == ["README.md", "docsite/a.md", "src/app.py"]

    def test_filters_raise_on_bad_pattern(self) -> None:
        """Bad patterns raise even when there are no files."""
        with pytest.raises(PatternError):
            filter_path([], "[")
        with pytest.raises(PatternError):
            filter_ignore_path([], "[")
