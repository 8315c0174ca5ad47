"""Summary tables.

Renders the tidy coefficient table as a coefficients x models grid: one
estimate row and one interval row per coefficient.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from tabulate import tabulate

from coefplot.utils.helpers import first_appearance, format_value

__all__ = ["coeftable"]

_INTERVAL_COLUMNS = {
    "outer": ("low_outer", "high_outer"),
    "inner": ("low_inner", "high_inner"),
}


def coeftable(
    table: pd.DataFrame,
    *,
    fmt: str = ".4g",
    interval: str = "outer",
    output: str = "text",
    latex_booktabs: bool = True,
    escape: bool = True,
) -> str:
    """Format a tidy table (as returned by ``multiplot(..., plot=False)``).

    Coefficients missing from a model are left blank, as are intervals of a
    tier that was not requested. With ``output="latex"`` labels are escaped
    unless ``escape=False``, which passes LaTeX markup through.
    """
    if output not in {"text", "latex"}:
        raise ValueError("output must be either 'text' or 'latex'.")
    if interval not in _INTERVAL_COLUMNS:
        raise ValueError("interval must be either 'outer' or 'inner'.")
    lo_col, hi_col = _INTERVAL_COLUMNS[interval]

    if isinstance(table["model"].dtype, pd.CategoricalDtype):
        models = [str(m) for m in table["model"].cat.categories]
    else:
        models = [str(m) for m in first_appearance(table["model"])]
    coefficients = first_appearance(table["coefficient"])

    cells: dict[tuple[str, str], tuple[str, str]] = {}
    for row in table.itertuples(index=False):
        est = format_value(row.estimate, fmt)
        lo = getattr(row, lo_col)
        hi = getattr(row, hi_col)
        band = ""
        if np.isfinite(lo) and np.isfinite(hi):
            band = f"[{format_value(lo, fmt)}, {format_value(hi, fmt)}]"
        cells[(str(row.coefficient), str(row.model))] = (est, band)

    rows: list[list[str]] = []
    for coef in coefficients:
        pairs = [cells.get((str(coef), m), ("", "")) for m in models]
        rows.append([str(coef)] + [p[0] for p in pairs])
        if any(p[1] for p in pairs):
            rows.append([""] + [p[1] for p in pairs])
    headers = [""] + models
    if output == "latex":
        if not escape:
            tablefmt = "latex_raw"
        else:
            tablefmt = "latex_booktabs" if latex_booktabs else "latex"
        return tabulate(rows, headers=headers, tablefmt=tablefmt, disable_numparse=True)
    return tabulate(rows, headers=headers, tablefmt="simple", disable_numparse=True)
