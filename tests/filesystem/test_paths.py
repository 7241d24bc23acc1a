"""
Tests for the mantafs.filesystem.paths module.

This module tests:
- PathExpression parsing (absolute, home-relative, relative, schemes)
- Resolution rules and their priority
- Canonical key invariants
"""

import pytest

from mantafs.exceptions import InvalidPathError
from mantafs.filesystem.paths import (
    HOME_ALIAS,
    PathExpression,
    PathKind,
    child_path,
    resolve,
    strip_scheme,
)


HOME = "/home/bob"


# =============================================================================
# Parsing Tests
# =============================================================================

class TestPathExpressionParsing:
    """Tests for PathExpression.parse."""

    def test_absolute_path(self):
        expr = PathExpression.parse("/data/out.csv")

        assert expr.kind == PathKind.ABSOLUTE
        assert expr.segments == ("data", "out.csv")

    def test_home_relative_path(self):
        expr = PathExpression.parse("~~/foo/bar")

        assert expr.kind == PathKind.HOME
        assert expr.segments == ("foo", "bar")

    def test_bare_home_alias(self):
        expr = PathExpression.parse(HOME_ALIAS)

        assert expr.kind == PathKind.HOME
        assert expr.segments == ()
        assert str(expr) == "~~"

    def test_relative_path(self):
        expr = PathExpression.parse("reports/q1.csv")

        assert expr.kind == PathKind.RELATIVE
        assert expr.segments == ("reports", "q1.csv")

    def test_root(self):
        expr = PathExpression.parse("/")

        assert expr.is_root
        assert str(expr) == "/"

    def test_dot_and_empty_segments_dropped(self):
        expr = PathExpression.parse("/a//./b/")

        assert expr.segments == ("a", "b")

    def test_parent_segments_kept(self):
        expr = PathExpression.parse("../a")

        assert expr.segments == ("..", "a")

    def test_scheme_is_stripped(self):
        assert PathExpression.parse("manta:///a/b") == PathExpression.parse("/a/b")
        assert PathExpression.parse("manta:/a/b") == PathExpression.parse("/a/b")

    def test_alias_only_counts_as_first_segment(self):
        expr = PathExpression.parse("/~~/a")

        assert expr.kind == PathKind.ABSOLUTE
        assert expr.segments == ("~~", "a")

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_path_raises(self, text):
        with pytest.raises(InvalidPathError):
            PathExpression.parse(text)

    def test_parse_returns_existing_expression(self):
        expr = PathExpression.parse("/a")

        assert PathExpression.parse(expr) is expr

    def test_str_round_trip(self):
        for text in ["/a/b", "~~/a", "a/b"]:
            assert str(PathExpression.parse(text)) == text

    def test_child(self):
        expr = PathExpression.parse("~~/stor").child("x.csv")

        assert str(expr) == "~~/stor/x.csv"
        assert expr.name == "x.csv"


class TestStripScheme:
    """Tests for strip_scheme."""

    def test_empty_authority(self):
        assert strip_scheme("manta:///a/b") == "/a/b"

    def test_named_authority(self):
        assert strip_scheme("manta://us-east.example.com/a") == "/a"

    def test_authority_without_path(self):
        assert strip_scheme("manta://") == "/"

    def test_no_scheme(self):
        assert strip_scheme("/a/b") == "/a/b"
        assert strip_scheme("~~/a") == "~~/a"

    def test_other_colon_prefix_is_kept(self):
        assert strip_scheme("report:2024.csv") == "report:2024.csv"
        assert strip_scheme("http://host/a") == "http://host/a"


# =============================================================================
# Resolution Tests
# =============================================================================

class TestResolve:
    """Tests for resolve."""

    def test_absolute_ignores_cwd(self):
        assert resolve("/data/out.csv", cwd=HOME, home=HOME) == "/data/out.csv"

    def test_home_alias_with_remainder(self):
        assert resolve("~~/reports", cwd="/elsewhere", home=HOME) == "/home/bob/reports"

    def test_home_alias_nested(self):
        assert resolve("~~/foo/bar", cwd=None, home=HOME) == HOME + "/foo/bar"

    def test_bare_home_alias(self):
        assert resolve("~~", cwd="/elsewhere", home=HOME) == HOME

    def test_home_alias_with_trailing_slash(self):
        assert resolve("~~/", cwd=None, home=HOME) == HOME

    def test_relative_joins_cwd(self):
        assert resolve("stor/a.csv", cwd=HOME, home=HOME) == "/home/bob/stor/a.csv"

    def test_root(self):
        assert resolve("/", cwd=None, home=None) == "/"

    def test_parent_segments_resolved(self):
        assert resolve("../alice/x", cwd=HOME, home=HOME) == "/home/alice/x"

    def test_dot_resolves_to_cwd(self):
        assert resolve(".", cwd=HOME, home=HOME) == HOME

    def test_scheme_stripped_from_result(self):
        assert resolve("manta:///bob/stor", cwd=None, home=HOME) == "/bob/stor"

    def test_scheme_stripped_from_cwd(self):
        assert resolve("a", cwd="manta:///bob", home=None) == "/bob/a"

    def test_colon_in_relative_name(self):
        assert resolve("report:2024.csv", cwd="/bob/stor", home="/bob") == "/bob/stor/report:2024.csv"

    def test_colon_in_nested_name(self):
        assert resolve("~~/backup:2024/a.csv", cwd=None, home="/bob") == "/bob/backup:2024/a.csv"

    def test_no_trailing_slash(self):
        assert resolve("/bob/stor/", cwd=None, home=None) == "/bob/stor"

    def test_relative_without_cwd_raises(self):
        with pytest.raises(InvalidPathError):
            resolve("stor/a.csv", cwd=None, home=HOME)

    def test_home_without_home_raises(self):
        with pytest.raises(InvalidPathError):
            resolve("~~/a", cwd=HOME, home=None)

    def test_escaping_root_raises(self):
        with pytest.raises(InvalidPathError):
            resolve("/../a", cwd=None, home=None)

    def test_accepts_parsed_expression(self):
        expr = PathExpression.parse("~~/x")

        assert resolve(expr, cwd=None, home=HOME) == "/home/bob/x"


class TestCanonicalKeyInvariant:
    """Equivalent expressions must resolve to the identical key."""

    @pytest.mark.parametrize(
        "text",
        [
            "/home/bob/stor/a.csv",
            "stor/a.csv",
            "./stor/a.csv",
            "~~/stor/a.csv",
            "~~/stor/./x/../a.csv",
            "manta:///home/bob/stor/a.csv",
            "/home/bob//stor/a.csv/",
        ],
    )
    def test_same_location_same_key(self, text):
        assert resolve(text, cwd=HOME, home=HOME) == "/home/bob/stor/a.csv"

    def test_keys_have_no_relative_segments(self):
        key = resolve("a/../b/./c", cwd="/x", home=None)

        assert ".." not in key.split("/")
        assert "." not in key.split("/")


class TestChildPath:
    """Tests for child_path."""

    def test_joins_name(self):
        assert child_path("~~/stor", "a.csv") == "~~/stor/a.csv"

    def test_root_parent(self):
        assert child_path("/", "a") == "/a"

    def test_current_directory_parent(self):
        assert child_path(".", "a") == "a"
