"""Coefficient labels: filtering, factor shortening, and renaming.

Coefficient names are parsed into components (one per factor of an
interaction). A component is a factor level when it follows patsy's
bracket convention with a contrast prefix or a ``C()`` wrapper
(``color[T.E]``, ``C(color)[E]``), or when the factor's levels are known and
it follows the bracket (``color[E]``), concatenation (``colorE``) or
dummy-prefix (``color_E``) convention. A dummy prefix with a separator also
marks a level of a factor whose levels are unknown. Everything else, such as
``bs(carat, df=3)[0]``, is a numeric regressor whose stem is its own name.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, fields
from typing import Any, Union

from coefplot.core.intervals import IntervalCoefficient
from coefplot.utils.helpers import bare_stem, split_term

__all__ = [
    "DisplayCoefficient",
    "TermPart",
    "normalize_shorten",
    "parse_term",
    "resolve_names",
    "term_kind",
]

LOGGER = logging.getLogger(__name__)

ShortenRule = Union[bool, frozenset]

# <factor>[<contrast prefix>.<level>]; treatment/sum/diff/helmert prefixes, "." for poly
_BRACKET_LEVEL = re.compile(r"^(?P<factor>.+?)\[(?P<prefix>[TSDH]?\.)?(?P<level>.*)\]$")


@dataclass(frozen=True)
class TermPart:
    """One component of a (possibly interacted) coefficient name."""

    text: str
    stem: str
    level: str | None = None

    @property
    def is_factor(self) -> bool:
        return self.level is not None


@dataclass(frozen=True)
class DisplayCoefficient(IntervalCoefficient):
    """A coefficient ready for display.

    ``display_name`` is a pure function of the raw name, the factor levels
    and the naming rules, so the same variable lines up across models.
    """

    display_name: str = ""
    model_id: str = ""
    sort_key: float | str | None = None
    kind: str = "numeric"
    stems: tuple[str, ...] = ()


def _match_known_factor(
    text: str, factor_levels: Mapping[str, Sequence[str]],
) -> TermPart | None:
    # longest stem first so that 'colour' wins over 'col'
    for stem in sorted(factor_levels, key=len, reverse=True):
        if len(text) <= len(stem) or not text.startswith(stem):
            continue
        rest = text[len(stem):]
        levels = factor_levels[stem]
        if levels:
            if rest in levels:
                return TermPart(text, stem, rest)
            if rest[0] in "_." and rest[1:] in levels:
                return TermPart(text, stem, rest[1:])
        elif rest[0] in "_." and len(rest) > 1:
            # levels unknown: only an explicit separator marks a level
            return TermPart(text, stem, rest[1:])
    return None


def _bracket_factor(
    text: str, factor_levels: Mapping[str, Sequence[str]],
) -> TermPart | None:
    m = _BRACKET_LEVEL.match(text)
    if m is None:
        return None
    factor = m.group("factor")
    stem = bare_stem(factor)
    # bs(x, df=3)[0] and other multi-column numeric terms carry no contrast
    # prefix, no C() wrapper and no reported levels
    if m.group("prefix") or factor != stem or stem in factor_levels:
        return TermPart(text, stem, m.group("level"))
    return None


def _parse_part(text: str, factor_levels: Mapping[str, Sequence[str]]) -> TermPart:
    bracket = _bracket_factor(text, factor_levels)
    if bracket is not None:
        return bracket
    known = _match_known_factor(text, factor_levels)
    if known is not None:
        return known
    return TermPart(text, bare_stem(text))


def parse_term(
    name: str,
    factor_levels: Mapping[str, Sequence[str]] | None = None,
    intercept_name: str = "(Intercept)",
) -> tuple[TermPart, ...]:
    """Split ``name`` into its components."""
    if name == intercept_name:
        return (TermPart(name, name),)
    levels = factor_levels or {}
    return tuple(_parse_part(part, levels) for part in split_term(name))


def term_kind(name: str, parts: Sequence[TermPart], intercept_name: str = "(Intercept)") -> str:
    if name == intercept_name:
        return "intercept"
    if len(parts) > 1:
        return "interaction"
    return "factor" if parts[0].is_factor else "numeric"


def normalize_shorten(shorten: bool | str | Iterable[str] | None) -> ShortenRule:
    """``True``/``False`` or the frozenset of stems whose levels are shortened."""
    if shorten is None:
        return False
    if isinstance(shorten, bool):
        return shorten
    if isinstance(shorten, str):
        return frozenset({bare_stem(shorten)})
    return frozenset(bare_stem(s) for s in shorten)


def _display_part(part: TermPart, shorten: ShortenRule) -> str:
    if not part.is_factor:
        return part.text
    if shorten is True or (isinstance(shorten, frozenset) and part.stem in shorten):
        return str(part.level)
    return part.text


def _factor_selected(parts: Sequence[TermPart], factors: set[str], *, only: bool) -> bool:
    if only:
        return len(parts) == 1 and parts[0].stem in factors
    return any(p.stem in factors for p in parts)


def _interval_fields(coef: Any) -> dict[str, Any]:
    return {f.name: getattr(coef, f.name, None) for f in fields(IntervalCoefficient)}


def resolve_names(  # noqa: PLR0913
    coefs: Sequence[IntervalCoefficient],
    *,
    intercept: bool = True,
    intercept_name: str = "(Intercept)",
    variables: Sequence[str] | None = None,
    factors: Sequence[str] | None = None,
    only: bool | None = None,
    shorten: bool | Iterable[str] = True,
    new_names: Mapping[str, str] | None = None,
    factor_levels: Mapping[str, Sequence[str]] | None = None,
) -> list[DisplayCoefficient]:
    """Filter and label the coefficients of one model.

    The steps run in a fixed order: intercept removal, then the exact-name
    ``variables`` allow-list (which overrides ``factors``), then ``factors``
    selection (``only=True`` drops interactions), then level shortening,
    then ``new_names``. ``new_names`` is keyed by the shortened label and
    falls back to the raw name; it never affects the filters.

    An empty result is valid and means nothing in this model matched.
    """
    levels = {bare_stem(k): tuple(v) for k, v in (factor_levels or {}).items()}
    keep = None if variables is None else {str(v) for v in variables}
    factor_set = None if factors is None else {bare_stem(f) for f in factors}
    only_flag = bool(only)
    short = normalize_shorten(shorten)
    rename = {str(k): str(v) for k, v in (new_names or {}).items()}

    out: list[DisplayCoefficient] = []
    for coef in coefs:
        name = coef.variable
        is_intercept = name == intercept_name
        if is_intercept and not intercept:
            continue
        parts = parse_term(name, levels, intercept_name)
        if keep is not None:
            if name not in keep:
                continue
        elif factor_set is not None and not _factor_selected(parts, factor_set, only=only_flag):
            continue
        label = name if is_intercept else ":".join(_display_part(p, short) for p in parts)
        label = rename.get(label, rename.get(name, label))
        if not intercept and label == intercept_name:
            LOGGER.debug("Skipping '%s': renamed onto the excluded intercept label", name)
            continue
        out.append(
            DisplayCoefficient(
                **_interval_fields(coef),
                display_name=label,
                kind=term_kind(name, parts, intercept_name),
                stems=tuple(p.stem for p in parts),
            ),
        )
    return out
