"""Public entry points: plot the coefficients of several models at once."""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from coefplot.pipeline.aggregator import ModelEntry, aggregate_models
from coefplot.pipeline.config import MultiplotConfig, StyleConfig
from coefplot.pipeline.layout import LayoutDescriptor, finalize

__all__ = ["MultiplotData", "Renderer", "build_multiplot", "multiplot"]

LOGGER = logging.getLogger(__name__)

Renderer = Callable[[pd.DataFrame, LayoutDescriptor, StyleConfig], Any]


@dataclass
class MultiplotData:
    """Everything the rendering collaborator needs, plus the per-model entries."""

    table: pd.DataFrame
    layout: LayoutDescriptor
    entries: list[ModelEntry]


def build_multiplot(
    models: Any,
    config: MultiplotConfig | None = None,
    style: StyleConfig | None = None,
) -> MultiplotData:
    """Run the aggregation pipeline without rendering."""
    config = MultiplotConfig() if config is None else config
    entries = aggregate_models(models, config)
    table, layout = finalize(entries, config, style)
    LOGGER.debug(
        "Aggregated %d model(s) into %d row(s); axis=%s facet=%s",
        len(layout.models),
        len(table),
        layout.axis_mode,
        layout.facet,
    )
    return MultiplotData(table=table, layout=layout, entries=entries)


def multiplot(  # noqa: PLR0913
    models: Any,
    *,
    title: str | None = "Coefficient Plot",
    xlab: str = "Value",
    ylab: str = "Coefficient",
    inner_ci: float = 1.0,
    outer_ci: float = 2.0,
    lwd_inner: float = 1.0,
    lwd_outer: float = 0.0,
    point_size: float = 3.0,
    dodge_height: float = 1.0,
    color: str = "blue",
    text_angle: float = 0.0,
    number_angle: float = 90.0,
    zero_color: str = "grey",
    zero_lwd: float = 1.0,
    zero_type: int | str = 2,
    single: bool = True,
    scales: str = "fixed",
    ncol: int | None = None,
    sort: str = "natural",
    decreasing: bool = False,
    names: Mapping[Any, str] | Sequence[str] | None = None,
    numeric: bool = False,
    fill_color: str = "grey",
    alpha: float = 0.5,
    horizontal: bool = False,
    factors: Sequence[str] | None = None,
    only: bool | None = None,
    shorten: bool | Sequence[str] = True,
    intercept: bool = True,
    intercept_name: str = "(Intercept)",
    variables: Sequence[str] | None = None,
    new_names: Mapping[str, str] | None = None,
    plot: bool = True,
    drop: bool = False,
    by: str = "Coefficient",
    n_jobs: int = 1,
    renderer: Renderer | None = None,
) -> Any:
    """Plot the coefficients from multiple models.

    Parameters
    ----------
    models : sequence, mapping, or a single model
        Fitted models. A mapping's keys identify the models; a sequence gets
        identifiers ``Model1``, ``Model2``, ...
    inner_ci, outer_ci : float
        Interval half-widths in standard errors; 0 disables the tier.
    single : bool
        If False, each model gets its own facet (``ncol`` columns, axes
        shared according to ``scales``).
    sort : {"natural", "normal", "magnitude", "size", "alphabetical"}
        Coefficient order within each model; ``decreasing`` reverses it.
    names : mapping or sequence, optional
        Display labels for the models. Models are then shown in
        alphabetical order of their labels.
    factors, only, shorten, intercept, intercept_name, variables, new_names
        Coefficient selection and labelling rules, see
        :func:`coefplot.core.names.resolve_names`.
    plot : bool
        If False, return the tidy table instead of drawing.
    drop : bool
        Remove models with no valid coefficient left.
    by : {"Coefficient", "Model"}
        ``"Model"`` plots a single coefficient (exactly one entry in
        ``variables``) across models, Gelman's "secret weapon".
    renderer : callable, optional
        ``renderer(table, layout, style)``; defaults to the matplotlib
        renderer in :mod:`coefplot.output.plots`.

    Returns
    -------
    pandas.DataFrame when ``plot=False``, otherwise whatever the renderer
    returns (``(fig, axes)`` for the default renderer).

    Examples
    --------
    >>> from coefplot import multiplot
    >>> table = multiplot([res1, res2, res3], plot=False)  # doctest: +SKIP
    >>> fig, axes = multiplot({"base": res1, "full": res2}, single=False)  # doctest: +SKIP

    """
    config = MultiplotConfig(
        inner_ci=inner_ci,
        outer_ci=outer_ci,
        intercept=intercept,
        intercept_name=intercept_name,
        variables=variables,
        factors=factors,
        only=only,
        shorten=shorten,
        new_names=new_names,
        sort=sort,
        decreasing=decreasing,
        names=names,
        drop=drop,
        by=by,
        single=single,
        scales=scales,
        ncol=ncol,
        plot=plot,
        n_jobs=n_jobs,
    )
    style = StyleConfig(
        title=title,
        xlab=xlab,
        ylab=ylab,
        lwd_inner=lwd_inner,
        lwd_outer=lwd_outer,
        point_size=point_size,
        dodge_height=dodge_height,
        color=color,
        fill_color=fill_color,
        alpha=alpha,
        zero_color=zero_color,
        zero_lwd=zero_lwd,
        zero_type=zero_type,
        text_angle=text_angle,
        number_angle=number_angle,
        numeric=numeric,
        horizontal=horizontal,
    )
    data = build_multiplot(models, config, style)
    if not config.plot:
        return data.table
    if renderer is None:
        from coefplot.output.plots import render_multiplot

        renderer = render_multiplot
    return renderer(data.table, data.layout, style)
