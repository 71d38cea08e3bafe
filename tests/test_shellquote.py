import pytest

from digcore import shellquote
from digcore.shellquote import (
    UnterminatedDoubleQuoteError,
    UnterminatedEscapeError,
    UnterminatedSingleQuoteError,
    quote_split,
)


@pytest.fixture
def posix(monkeypatch):
    monkeypatch.setattr(shellquote, "_WINDOWS", False)


def test_plain_words():
    assert quote_split("ls -l /tmp") == ["ls", "-l", "/tmp"]


def test_collapses_whitespace():
    assert quote_split("  a \t b\n\nc  ") == ["a", "b", "c"]


def test_empty_input():
    assert quote_split("") == []
    assert quote_split("   ") == []


def test_single_quotes_keep_everything():
    assert quote_split("echo 'a b \\ \"c\"'") == ["echo", 'a b \\ "c"']


def test_double_quotes_join_and_escape():
    assert quote_split('"a b"c') == ["a bc"]
    assert quote_split('"a\\"b"') == ['a"b']


def test_double_quotes_keep_unknown_escape():
    assert quote_split('"a\\qb"') == ["a\\qb"]


def test_double_quotes_elide_escaped_newline():
    assert quote_split('"a\\\nb"') == ["ab"]


def test_empty_quotes_make_empty_word():
    assert quote_split("a '' \"\"") == ["a", "", ""]


def test_escape_outside_quotes_posix(posix):
    assert quote_split("a\\ b c") == ["a b", "c"]


def test_escape_outside_quotes_windows_keeps_backslash(monkeypatch):
    monkeypatch.setattr(shellquote, "_WINDOWS", True)
    assert quote_split("C:\\dir x") == ["C:\\dir", "x"]


def test_leading_escaped_newline_is_skipped(posix):
    assert quote_split("\\\nfoo") == ["foo"]


def test_escaped_newline_inside_word_is_elided(posix):
    assert quote_split("ab\\\ncd") == ["abcd"]


def test_unterminated_single_quote():
    with pytest.raises(UnterminatedSingleQuoteError, match="Unterminated single-quoted string"):
        quote_split("echo 'abc")


def test_unterminated_double_quote():
    with pytest.raises(UnterminatedDoubleQuoteError):
        quote_split('echo "abc')


def test_unterminated_double_quote_after_backslash():
    with pytest.raises(UnterminatedDoubleQuoteError):
        quote_split('"abc\\')


def test_trailing_lone_backslash():
    with pytest.raises(UnterminatedEscapeError, match="Unterminated backslash-escape"):
        quote_split("foo \\")


def test_trailing_backslash_in_word():
    with pytest.raises(UnterminatedEscapeError):
        quote_split("foo\\")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        quote_split("'")