"""Helpers for options that must be one of several values."""

from __future__ import annotations

from collections.abc import Iterable


def contains(choice: str, choices: Iterable[str]) -> bool:
    """Report whether ``choice`` is in ``choices``."""
    return choice in choices


def contains_prefix(choice: str, choices: Iterable[str]) -> bool:
    """Report whether ``choice`` starts with any of ``choices``."""
    return any(choice.startswith(item) for item in choices)


def check(choice: str, available: Iterable[str]) -> None:
    """Raise ValueError if ``choice`` is not one of ``available``."""
    if not contains(choice, list(available)):
        raise ValueError(f"unknown choice {choice}")


def check_slice(choices: Iterable[str], available: Iterable[str]) -> None:
    """Raise ValueError for the first of ``choices`` not in ``available``."""
    allowed = list(available)
    for choice in choices:
        check(choice, allowed)