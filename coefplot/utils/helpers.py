"""Shared helper utilities.

Label parsing, ordering, and formatting helpers used by the pipeline and the
output modules.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

__all__ = [
    "bare_stem",
    "first_appearance",
    "format_value",
    "split_term",
]

# C(color), C(color, Treatment('D')), C(color, levels=[...])
_PATSY_CALL = re.compile(r"^C\(\s*(?P<var>[^,\)]+?)\s*(?:,.*)?\)$")


def bare_stem(label: Any) -> str:
    """Strip patsy's categorical wrapper: ``C(color, Sum)`` -> ``color``."""
    text = str(label).strip()
    m = _PATSY_CALL.match(text)
    if m:
        return m.group("var").strip()
    return text


def split_term(name: str) -> list[str]:
    """Split an interaction label on ``:`` outside of brackets/parentheses.

    Patsy level labels may contain colons (``C(t)[T.09:00]``), so a plain
    ``str.split`` is not enough.
    """
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(name):
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == ":" and depth == 0:
            parts.append(name[start:i])
            start = i + 1
    parts.append(name[start:])
    return parts


def first_appearance(values: Iterable[Any]) -> list[Any]:
    """Return unique values ordered by first appearance."""
    seen: dict[Any, None] = {}
    for val in values:
        if val not in seen:
            seen[val] = None
    return list(seen.keys())


def format_value(val: Any, fmt: str = ".6g") -> str:
    if val is None:
        return ""
    try:
        fval = float(val)
    except (TypeError, ValueError):
        return str(val)
    if fval != fval:  # NaN
        return ""
    return f"{fval:{fmt}}"

