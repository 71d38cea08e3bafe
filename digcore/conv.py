"""Human-readable formatting of quantities."""

from __future__ import annotations

_UNIT = 1024
_PREFIXES = "KMGTPE"


def human_bytes(count: int) -> str:
    """Format a byte count using binary units (KiB, MiB, GiB, ...)."""
    if count < 0:
        raise ValueError("byte count must not be negative")
    if count < _UNIT:
        return f"{count} B"
    div, exp = _UNIT, 0
    n = count // _UNIT
    while n >= _UNIT and exp < len(_PREFIXES) - 1:
        div *= _UNIT
        exp += 1
        n //= _UNIT
    return f"{count / div:.1f} {_PREFIXES[exp]}iB"