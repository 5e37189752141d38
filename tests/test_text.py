"""Tests for the line-level text helpers."""

from codeaudit.text import (
    find_closing_brace,
    is_comment,
    is_test_or_mock,
    looks_like_code,
    nearby_lines,
    sanitize_snippet,
    split_lines,
)


class TestLines:
    def test_split_strips_carriage_returns(self):
        assert split_lines("a\r\nb") == ["a", "b"]

    def test_empty_input_is_one_empty_line(self):
        assert split_lines("") == [""]

    def test_comment_prefixes(self):
        assert is_comment("   // note")
        assert is_comment(" * kdoc line")
        assert is_comment("<!-- manifest comment -->")
        assert not is_comment("val x = 1 // trailing")

    def test_test_or_mock_is_case_insensitive(self):
        assert is_test_or_mock('val MockClient = Client("a")')
        assert not is_test_or_mock("val client = Client()")

    def test_nearby_lines_clipped_to_bounds(self):
        lines = ["a", "b", "c", "d"]
        assert nearby_lines(lines, 0, 1) == ["a", "b"]
        assert nearby_lines(lines, 3, 5) == lines


class TestFindClosingBrace:
    def test_simple_block(self):
        assert find_closing_brace(["fun a() {", "    b()", "}"], 0) == 2

    def test_column_skips_leading_close(self):
        lines = ["try {", "} catch (e: IOException) {", "}"]
        column = lines[1].index("catch")
        assert find_closing_brace(lines, 1, column=column) == 2

    def test_unbalanced_returns_none(self):
        assert find_closing_brace(["fun a() {", "    b()"], 0) is None

    def test_limit_bounds_search(self):
        lines = ["fun a() {"] + ["    b()"] * 30 + ["}"]
        assert find_closing_brace(lines, 0, limit=20) is None


class TestSanitizeSnippet:
    def test_redacts_long_literals(self):
        snippet = sanitize_snippet('    val k = "abcdefghijklmnopqrstuvwxyz"')
        assert snippet == 'val k = "***REDACTED***"'

    def test_short_literals_kept(self):
        assert sanitize_snippet('val k = "short"') == 'val k = "short"'

    def test_truncates_to_100_chars(self):
        assert len(sanitize_snippet("x" * 300)) == 100


class TestLooksLikeCode:
    def test_prose_is_not_code(self):
        assert not looks_like_code("hello world")

    def test_too_short(self):
        assert not looks_like_code("{}")

    def test_kotlin_is_code(self):
        assert looks_like_code("fun main() { println(1) }")
