"""Split a command line into words following /bin/sh quoting rules."""

from __future__ import annotations

import os

_SPLIT_CHARS = " \n\t"
_SINGLE = "'"
_DOUBLE = '"'
_ESCAPE = "\\"
_DOUBLE_ESCAPE_CHARS = '$`"\n\\'

# On Windows a backslash outside quotes is kept so that paths survive.
_WINDOWS = os.name == "nt"


class UnterminatedSingleQuoteError(ValueError):
    def __init__(self) -> None:
        super().__init__("Unterminated single-quoted string")


class UnterminatedDoubleQuoteError(ValueError):
    def __init__(self) -> None:
        super().__init__("Unterminated double-quoted string")


class UnterminatedEscapeError(ValueError):
    def __init__(self) -> None:
        super().__init__("Unterminated backslash-escape")


def quote_split(text: str) -> list[str]:
    """Split ``text`` into words, honouring backslashes and both quote kinds.

    No expansion of any kind is performed.
    """
    words: list[str] = []
    pos = 0
    n = len(text)
    while pos < n:
        c = text[pos]
        if c in _SPLIT_CHARS:
            pos += 1
            continue
        if c == _ESCAPE:
            if pos + 1 >= n:
                raise UnterminatedEscapeError()
            if text[pos + 1] == "\n":
                pos += 2
                continue
        word, pos = _split_word(text, pos)
        words.append(word)
    return words


def _split_word(text: str, pos: int) -> tuple[str, int]:
    buf: list[str] = []
    n = len(text)
    while pos < n:
        c = text[pos]
        if c == _SINGLE:
            end = text.find(_SINGLE, pos + 1)
            if end == -1:
                raise UnterminatedSingleQuoteError()
            buf.append(text[pos + 1 : end])
            pos = end + 1
        elif c == _DOUBLE:
            pos = _read_double(text, pos + 1, buf)
        elif c == _ESCAPE:
            if _WINDOWS:
                buf.append(_ESCAPE)
            pos += 1
            if pos >= n:
                raise UnterminatedEscapeError()
            if text[pos] != "\n":
                buf.append(text[pos])
            pos += 1
        elif c in _SPLIT_CHARS:
            return "".join(buf), pos + 1
        else:
            buf.append(c)
            pos += 1
    return "".join(buf), pos


def _read_double(text: str, pos: int, buf: list[str]) -> int:
    n = len(text)
    while pos < n:
        c = text[pos]
        if c == _DOUBLE:
            return pos + 1
        if c == _ESCAPE:
            if pos + 1 >= n:
                break
            escaped = text[pos + 1]
            if escaped in _DOUBLE_ESCAPE_CHARS:
                if escaped != "\n":
                    buf.append(escaped)
            else:
                buf.append(c)
                buf.append(escaped)
            pos += 2
        else:
            buf.append(c)
            pos += 1
    raise UnterminatedDoubleQuoteError()