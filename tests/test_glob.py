"""Tests for the glob matchers and their helpers."""

import pytest

from refilter import (
    GlobListMatcher,
    GlobMatcher,
    GlobPatternError,
    MatchOptions,
    expand_braces,
    split_negation,
)


class TestGlobMatcher:
    def test_literal(self) -> None:
        m = GlobMatcher("package.json")
        assert m.matches("package.json") is True
        assert m.matches("package2.json") is False

    def test_literal_nocase(self) -> None:
        m = GlobMatcher("README.md", nocase=True)
        assert m.matches("readme.MD") is True

    def test_none_returns_false(self) -> None:
        assert GlobMatcher("*").matches(None) is False

    def test_non_string_returns_false(self) -> None:
        assert GlobMatcher("*").matches(42) is False  # type: ignore[arg-type]

    def test_star_collapses(self) -> None:
        m = GlobMatcher("a***b")
        assert m.matches("ab") is True
        assert m.matches("axxb") is True

    def test_trailing_globstar(self) -> None:
        m = GlobMatcher("lib/**")
        assert m.matches("lib/a.js") is True
        assert m.matches("lib/x/y/z.js") is True
        assert m.matches("src/a.js") is False

    def test_leading_globstar(self) -> None:
        m = GlobMatcher("**/*.css")
        assert m.matches("main.css") is True
        assert m.matches("a/b/main.css") is True
        assert m.matches("a/.cache/main.css") is False

    def test_globstar_never_takes_dot_dot(self) -> None:
        m = GlobMatcher("**/x.js", dot=True)
        assert m.matches("../x.js") is False

    def test_dot_never_matches_dot_segments(self) -> None:
        m = GlobMatcher("*", dot=True)
        assert m.matches(".") is False
        assert m.matches("..") is False
        assert m.matches(".env") is True

    def test_nested_braces(self) -> None:
        m = GlobMatcher("a/{b,c{d,e}}.js")
        assert m.matches("a/b.js") is True
        assert m.matches("a/cd.js") is True
        assert m.matches("a/ce.js") is True
        assert m.matches("a/c.js") is False

    def test_class_with_bracket(self) -> None:
        m = GlobMatcher("[]a].txt")
        assert m.matches("].txt") is True
        assert m.matches("a.txt") is True
        assert m.matches("b.txt") is False

    def test_unclosed_class_is_literal(self) -> None:
        m = GlobMatcher("[abc")
        assert m.matches("[abc") is True
        assert m.matches("a") is False

    def test_regex_metacharacters_are_literal(self) -> None:
        m = GlobMatcher("(a|b)+.js")
        assert m.matches("(a|b)+.js") is True
        assert m.matches("a.js") is False

    def test_invalid_range_raises(self) -> None:
        with pytest.raises(GlobPatternError, match="invalid glob pattern"):
            GlobMatcher("[z-a].js")


class TestGlobListMatcher:
    def test_last_match_wins(self) -> None:
        m = GlobListMatcher(("*.js", "!app.js", "app.js"))
        assert m.matches("app.js") is True

    def test_leading_negation_starts_included(self) -> None:
        m = GlobListMatcher(("!*.json",))
        assert m.matches("app.js") is True
        assert m.matches("package.json") is False

    def test_options_apply_to_every_entry(self) -> None:
        m = GlobListMatcher(("*.JS", "!VENDOR.js"), MatchOptions(nocase=True))
        assert m.matches("app.js") is True
        assert m.matches("vendor.js") is False

    def test_none_returns_false(self) -> None:
        assert GlobListMatcher(("!x",)).matches(None) is False


class TestHelpers:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("*.js", (False, "*.js")),
            ("!*.js", (True, "*.js")),
            ("!!*.js", (False, "*.js")),
            ("!!!*.js", (True, "*.js")),
        ],
    )
    def test_split_negation(self, pattern: str, expected: tuple[bool, str]) -> None:
        assert split_negation(pattern) == expected

    def test_expand_braces(self) -> None:
        assert expand_braces("*.{js,json}") == ["*.js", "*.json"]

    def test_expand_braces_without_comma_is_literal(self) -> None:
        assert expand_braces("{a}.js") == ["{a}.js"]

    def test_expand_braces_escaped(self) -> None:
        assert expand_braces(r"\{a,b}.js") == [r"\{a,b}.js"]

    def test_expand_braces_multiple_groups(self) -> None:
        assert expand_braces("{a,b}/{c,d}") == ["a/c", "a/d", "b/c", "b/d"]


class TestBraceRanges:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("file{1..3}.js", ["file1.js", "file2.js", "file3.js"]),
            ("{3..1}", ["3", "2", "1"]),
            ("v{08..10}", ["v08", "v09", "v10"]),
            ("{0..10..5}", ["0", "5", "10"]),
            ("{-1..1}", ["-1", "0", "1"]),
            ("{a..c}", ["a", "b", "c"]),
            ("{e..a..2}", ["e", "c", "a"]),
            ("{1..1}", ["1"]),
        ],
    )
    def test_expand_range(self, pattern: str, expected: list[str]) -> None:
        assert expand_braces(pattern) == expected

    @pytest.mark.parametrize("pattern", ["{1..}", "{a..1}", "{1...3}", "{ab..c}"])
    def test_malformed_range_is_literal(self, pattern: str) -> None:
        assert expand_braces(pattern) == [pattern]

    def test_range_combined_with_alternation(self) -> None:
        assert expand_braces("{a,b}{1..2}") == ["a1", "a2", "b1", "b2"]

    def test_matcher_uses_range(self) -> None:
        m = GlobMatcher("file{1..3}.js")
        assert m.matches("file2.js") is True
        assert m.matches("file4.js") is False


class TestRepeatedGlobstars:
    def test_many_globstars_on_deep_miss(self) -> None:
        # Without remembering failed positions this walk is exponential in
        # the number of globstars; it must finish promptly and miss.
        m = GlobMatcher("**/a/**/a/**/a/**/a/**/a/**/b")
        assert m.matches("/".join(["a"] * 200)) is False

    def test_many_globstars_on_deep_hit(self) -> None:
        m = GlobMatcher("**/a/**/a/**/a/**/a/**/b")
        assert m.matches("/".join(["a"] * 200 + ["b"])) is True

    def test_globstars_still_respect_dot_segments(self) -> None:
        m = GlobMatcher("**/a/**/b")
        assert m.matches("x/a/y/z/b") is True
        assert m.matches("x/a/.hidden/b") is False
        assert GlobMatcher("**/a/**/b", dot=True).matches("x/a/.hidden/b") is True
