"""String filters built from glob, literal and /regex/ patterns."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


class _Filter(Protocol):
    def match(self, s: str) -> bool: ...


def has_meta(s: str) -> bool:
    """Report whether ``s`` contains any glob metacharacter."""
    return any(ch in s for ch in "*?[")


def _is_regex_pattern(s: str) -> bool:
    return len(s) >= 2 and s[0] == "/" and s[-1] == "/"


@dataclass(frozen=True)
class _SingleFilter:
    value: str

    def match(self, s: str) -> bool:
        return s == self.value


@dataclass(frozen=True)
class _SetFilter:
    values: frozenset[str]

    def match(self, s: str) -> bool:
        return s in self.values


@dataclass(frozen=True)
class _RegexFilter:
    pattern: re.Pattern[str]

    def match(self, s: str) -> bool:
        return self.pattern.search(s) is not None


@dataclass(frozen=True)
class _CombinedFilter:
    parts: tuple[_Filter, ...]

    def match(self, s: str) -> bool:
        return any(part.match(s) for part in self.parts)


def _parse_sequence(p: str, pos: int, depth: int) -> tuple[str, int]:
    parts: list[str] = []
    while pos < len(p):
        c = p[pos]
        if c == "\\":
            if pos + 1 >= len(p):
                raise ValueError("unexpected end of pattern after escape")
            parts.append(re.escape(p[pos + 1]))
            pos += 2
        elif c == "*":
            while pos < len(p) and p[pos] == "*":
                pos += 1
            parts.append(".*")
        elif c == "?":
            parts.append(".")
            pos += 1
        elif c == "[":
            fragment, pos = _parse_class(p, pos + 1)
            parts.append(fragment)
        elif c == "{":
            fragment, pos = _parse_alternatives(p, pos + 1, depth + 1)
            parts.append(fragment)
        elif depth > 0 and c in ",}":
            break
        else:
            parts.append(re.escape(c))
            pos += 1
    return "".join(parts), pos


def _parse_alternatives(p: str, pos: int, depth: int) -> tuple[str, int]:
    alternatives: list[str] = []
    while True:
        fragment, pos = _parse_sequence(p, pos, depth)
        alternatives.append(fragment)
        if pos >= len(p):
            raise ValueError("unclosed '{'")
        if p[pos] == "}":
            return "(?:" + "|".join(alternatives) + ")", pos + 1
        pos += 1  # skip ','


def _parse_class(p: str, pos: int) -> tuple[str, int]:
    negate = pos < len(p) and p[pos] == "!"
    if negate:
        pos += 1
    items: list[str] = []
    while pos < len(p) and p[pos] != "]":
        c = p[pos]
        if c == "\\" and pos + 1 < len(p):
            c = p[pos + 1]
            pos += 2
        else:
            pos += 1
        if pos + 1 < len(p) and p[pos] == "-" and p[pos + 1] != "]":
            items.append(f"{re.escape(c)}-{re.escape(p[pos + 1])}")
            pos += 2
        else:
            items.append(re.escape(c))
    if pos >= len(p):
        raise ValueError("unclosed '['")
    if not items:
        raise ValueError("empty character class")
    return "[" + ("^" if negate else "") + "".join(items) + "]", pos + 1


@dataclass(frozen=True)
class _GlobFilter:
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, glob: str) -> _GlobFilter:
        try:
            regex, pos = _parse_sequence(glob, 0, 0)
            if pos != len(glob):
                raise ValueError(f"unexpected character at offset {pos}")
            return cls(re.compile(regex, re.DOTALL))
        except (ValueError, re.error) as exc:
            raise ValueError(f'invalid glob "{glob}": {exc}') from exc

    def match(self, s: str) -> bool:
        return self.pattern.fullmatch(s) is not None


def _compile_glob(patterns: Sequence[str]) -> _Filter:
    if not any(has_meta(p) for p in patterns):
        if len(patterns) == 1:
            return _SingleFilter(patterns[0])
        return _SetFilter(frozenset(patterns))
    if len(patterns) == 1:
        return _GlobFilter.compile(patterns[0])
    return _GlobFilter.compile("{" + ",".join(patterns) + "}")


def compile_filter(patterns: Sequence[str] | None) -> _Filter | None:
    """Build a filter that matches a string against any of ``patterns``.

    Patterns wrapped in slashes are regular expressions searched anywhere in
    the string; all others are globs or literals matched against the whole
    string. Returns None for an empty pattern list.
    """
    if not patterns:
        return None

    globs: list[str] = []
    regexes: list[_Filter] = []
    for p in patterns:
        if _is_regex_pattern(p):
            try:
                regexes.append(_RegexFilter(re.compile(p[1:-1])))
            except re.error as exc:
                raise ValueError(f'invalid regex "{p}": {exc}') from exc
        else:
            globs.append(p)

    parts: list[_Filter] = []
    if globs:
        parts.append(_compile_glob(globs))
    parts.extend(regexes)

    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return _CombinedFilter(tuple(parts))


@dataclass(frozen=True)
class IncludeExcludeFilter:
    """Matches strings that pass the include list and not the exclude list."""

    include: _Filter | None
    exclude: _Filter | None
    include_default: bool = True
    exclude_default: bool = False

    def match(self, s: str) -> bool:
        if self.include is not None:
            if not self.include.match(s):
                return False
        elif not self.include_default:
            return False

        if self.exclude is not None:
            if self.exclude.match(s):
                return False
        elif self.exclude_default:
            return False

        return True


def new_include_exclude_filter(
    include: Sequence[str] | None,
    exclude: Sequence[str] | None,
    include_default: bool = True,
    exclude_default: bool = False,
) -> IncludeExcludeFilter:
    """Compile include and exclude pattern lists into one filter.

    ``include_default`` applies when no include patterns are given and
    ``exclude_default`` when no exclude patterns are given.
    """
    return IncludeExcludeFilter(
        compile_filter(include),
        compile_filter(exclude),
        include_default,
        exclude_default,
    )