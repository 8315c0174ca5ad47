"""Within-model coefficient ordering."""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace

from coefplot.core.names import DisplayCoefficient

__all__ = ["SORT_POLICIES", "normalize_sort", "sort_coefficients"]

# policy -> canonical ordering
SORT_POLICIES: dict[str, str] = {
    "natural": "natural",
    "normal": "alphabetical",
    "alphabetical": "alphabetical",
    "magnitude": "magnitude",
    "size": "magnitude",
}


def normalize_sort(sort: str | None) -> str:
    """Return the canonical ordering for a user-facing sort policy."""
    key = "natural" if sort is None else str(sort).strip().lower()
    if key not in SORT_POLICIES:
        allowed = ", ".join(SORT_POLICIES)
        raise ValueError(f"sort must be one of {{{allowed}}}, got '{sort}'.")
    return SORT_POLICIES[key]


def sort_coefficients(
    coefs: Sequence[DisplayCoefficient],
    sort: str = "natural",
    decreasing: bool = False,
) -> list[DisplayCoefficient]:
    """Order one model's coefficients and record each row's ``sort_key``.

    ``natural`` keeps extraction order, ``normal``/``alphabetical`` sort on
    the display name, ``magnitude``/``size`` on ``abs(estimate)``. Ties keep
    their original order, also when ``decreasing`` reverses the ordering.
    NaN estimates always come last under magnitude ordering.
    """
    policy = normalize_sort(sort)
    if policy == "natural":
        keyed = [replace(c, sort_key=float(i)) for i, c in enumerate(coefs)]
        return keyed[::-1] if decreasing else keyed
    if policy == "alphabetical":
        keyed = [replace(c, sort_key=c.display_name) for c in coefs]
        return sorted(keyed, key=lambda c: c.display_name, reverse=decreasing)
    finite: list[DisplayCoefficient] = []
    missing: list[DisplayCoefficient] = []
    for c in coefs:
        size = abs(c.estimate)
        if math.isnan(size):
            missing.append(replace(c, sort_key=size))
        else:
            finite.append(replace(c, sort_key=size))
    finite.sort(key=lambda c: c.sort_key, reverse=decreasing)
    return finite + missing
