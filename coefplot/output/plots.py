"""Plot utilities.

Default rendering collaborator: draws a tidy coefficient table with nested
inner/outer intervals using matplotlib, following a ``LayoutDescriptor``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from coefplot.utils.helpers import first_appearance

if TYPE_CHECKING:
    from coefplot.pipeline.config import StyleConfig
    from coefplot.pipeline.layout import LayoutDescriptor

__all__ = ["line_style", "render_multiplot"]

# R lty codes -> matplotlib linestyles (0 = blank)
_R_LINE_TYPES: dict[int, Any] = {
    1: "-",
    2: "--",
    3: ":",
    4: "-.",
    5: (0, (8, 4)),
    6: (0, (4, 2, 8, 2)),
}

# (sharex, sharey) with values on x and categories on y
_SHARED_AXES = {
    "fixed": (True, True),
    "free": (False, False),
    "free_x": (False, True),
    "free_y": (True, False),
}


def line_style(zero_type: int | str) -> Any:
    """Translate an R line type or matplotlib style; ``None`` means no line."""
    if isinstance(zero_type, (int, np.integer)) and not isinstance(zero_type, bool):
        return _R_LINE_TYPES.get(int(zero_type))
    text = str(zero_type).strip().lower()
    if text in {"", "blank", "none", "0"}:
        return None
    return zero_type


def _width(lwd: float) -> float:
    # ggplot semantics: size 0 still draws a hairline
    return float(lwd) if lwd > 0 else 0.5


def _rows_for(table: pd.DataFrame, model: str) -> pd.DataFrame:
    return table[table["model"].astype(str) == str(model)]


def _model_colors(models: tuple[str, ...]) -> dict[str, Any]:
    cycle = plt.rcParams["axes.prop_cycle"].by_key().get("color", ["C0"])
    return {m: cycle[i % len(cycle)] for i, m in enumerate(models)}


def _segments(ax, pos, lo, hi, *, lw: float, color: Any, horizontal: bool) -> None:
    lo = np.asarray(lo, dtype=np.float64)
    hi = np.asarray(hi, dtype=np.float64)
    ok = np.isfinite(lo) & np.isfinite(hi)
    if not np.any(ok):
        return
    if horizontal:
        ax.vlines(pos[ok], lo[ok], hi[ok], colors=color, linewidth=lw)
    else:
        ax.hlines(pos[ok], lo[ok], hi[ok], colors=color, linewidth=lw)


def _ribbon(ax, pos, sub: pd.DataFrame, style: StyleConfig) -> None:
    """Continuous band for a numeric factor (``numeric=True``)."""
    lo_col, hi_col = ("low_outer", "high_outer")
    if not np.isfinite(sub[lo_col].to_numpy(dtype=np.float64)).any():
        lo_col, hi_col = ("low_inner", "high_inner")
    order = np.argsort(pos, kind="stable")
    p = pos[order]
    lo = sub[lo_col].to_numpy(dtype=np.float64)[order]
    hi = sub[hi_col].to_numpy(dtype=np.float64)[order]
    est = sub["estimate"].to_numpy(dtype=np.float64)[order]
    if style.horizontal:
        ax.fill_between(p, lo, hi, color=style.fill_color, alpha=style.alpha)
        ax.plot(p, est, color=style.color, linewidth=_width(style.lwd_inner))
    else:
        ax.fill_betweenx(p, lo, hi, color=style.fill_color, alpha=style.alpha)
        ax.plot(est, p, color=style.color, linewidth=_width(style.lwd_inner))


def _draw_panel(  # noqa: PLR0913
    ax,
    table: pd.DataFrame,
    *,
    categories: list[Any],
    category_col: str,
    models: list[str],
    colors: dict[str, Any],
    style: StyleConfig,
    dodge: bool,
    ribbon: bool = False,
) -> None:
    where = {cat: i for i, cat in enumerate(categories)}
    n = len(models)
    spread = 0.8 * float(style.dodge_height)
    for j, model in enumerate(models):
        sub = _rows_for(table, model)
        if sub.empty:
            continue
        offset = (j - (n - 1) / 2.0) * spread / n if (dodge and n > 1) else 0.0
        pos = np.array([where[c] for c in sub[category_col]], dtype=np.float64) + offset
        color = colors.get(model, style.color)
        if ribbon:
            _ribbon(ax, pos, sub, style)
        _segments(
            ax, pos, sub["low_outer"], sub["high_outer"],
            lw=_width(style.lwd_outer), color=color, horizontal=style.horizontal,
        )
        _segments(
            ax, pos, sub["low_inner"], sub["high_inner"],
            lw=_width(style.lwd_inner), color=color, horizontal=style.horizontal,
        )
        est = sub["estimate"].to_numpy(dtype=np.float64)
        xy = (pos, est) if style.horizontal else (est, pos)
        ax.plot(
            *xy,
            marker="o",
            linestyle="None",
            markersize=2.0 * float(style.point_size),
            color=color,
            label=model,
        )


def _decorate(ax, categories: list[Any], style: StyleConfig, *, labels: bool = True) -> None:
    ticks = list(range(len(categories)))
    names = [str(c) for c in categories]
    ls = line_style(style.zero_type)
    if style.horizontal:
        ax.set_xticks(ticks)
        ax.set_xticklabels(names, rotation=style.text_angle)
        ax.tick_params(axis="y", labelrotation=style.number_angle)
        if ls is not None:
            ax.axhline(0.0, color=style.zero_color, linewidth=style.zero_lwd, linestyle=ls)
        if labels:
            ax.set_xlabel(style.ylab)
            ax.set_ylabel(style.xlab)
    else:
        ax.set_yticks(ticks)
        ax.set_yticklabels(names, rotation=style.text_angle)
        ax.tick_params(axis="x", labelrotation=style.number_angle)
        if ls is not None:
            ax.axvline(0.0, color=style.zero_color, linewidth=style.zero_lwd, linestyle=ls)
        if labels:
            ax.set_xlabel(style.xlab)
            ax.set_ylabel(style.ylab)
    ax.grid(True, linestyle="--", linewidth=0.5)


def render_multiplot(
    table: pd.DataFrame,
    layout: LayoutDescriptor,
    style: StyleConfig,
    ax: plt.Axes | None = None,
):
    """Draw a tidy coefficient table.

    Returns ``(fig, ax)`` for a single panel and ``(fig, axes)`` (2-D array)
    for a faceted layout. The table is only read.
    """
    models = list(layout.models)
    if layout.axis_mode == "Model":
        category_col = "model"
        present = set(table["model"].astype(str))
        categories = [m for m in models if m in present]
        colors = {m: layout.color or style.color for m in models}
    else:
        category_col = "coefficient"
        categories = first_appearance(table["coefficient"])
        colors = _model_colors(layout.models)

    if not layout.facet:
        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure
        _draw_panel(
            ax,
            table,
            categories=categories,
            category_col=category_col,
            models=models,
            colors=colors,
            style=style,
            dodge=layout.axis_mode == "Coefficient",
            ribbon=layout.numeric,
        )
        _decorate(ax, categories, style)
        if style.title:
            ax.set_title(style.title)
        if layout.color_mode == "model" and len(models) > 1:
            ax.legend(title="Model", frameon=False)
        return fig, ax

    if ax is not None:
        raise ValueError("ax cannot be used with a faceted layout; set single=True.")
    n_panels = max(1, len(models))
    ncol = max(1, min(int(layout.facet_columns), n_panels))
    nrows = int(math.ceil(n_panels / ncol))
    sharex, sharey = _SHARED_AXES[layout.facet_scales]
    if style.horizontal:
        sharex, sharey = sharey, sharex
    category_shared = sharex if style.horizontal else sharey
    fig, axes = plt.subplots(nrows, ncol, sharex=sharex, sharey=sharey, squeeze=False)
    flat = axes.reshape(-1)
    for k, panel in enumerate(flat):
        if k >= len(models):
            panel.set_visible(False)
            continue
        model = models[k]
        sub = _rows_for(table, model)
        cats = categories if category_shared else first_appearance(sub[category_col])
        _draw_panel(
            panel,
            sub,
            categories=cats,
            category_col=category_col,
            models=[model],
            colors=colors,
            style=style,
            dodge=False,
            ribbon=layout.numeric,
        )
        _decorate(panel, cats, style, labels=False)
        panel.set_title(str(model))
    fig.supxlabel(style.ylab if style.horizontal else style.xlab)
    fig.supylabel(style.xlab if style.horizontal else style.ylab)
    if style.title:
        fig.suptitle(style.title)
    return fig, axes
