"""
Utilities for the WHO TB data dictionary, which maps variable codes such as
`e_inc_100k` to human-readable definitions.
"""

from typing import Sequence

import pandas as pd
from pandas.api.types import is_numeric_dtype

__all__ = ["search_data_dict", "get_metric_label", "available_metrics"]


def search_data_dict(
    dictionary: pd.DataFrame,
    var: str | Sequence[str] | None = None,
    definition: str | Sequence[str] | None = None,
) -> pd.DataFrame:
    """
    Search the data dictionary by variable names and definitions.

    Parameters
    ----------
    dictionary : pd.DataFrame
        Data dictionary as returned by `datasets.get_data_dict`.
    var : str or Sequence[str], optional
        Variable names to match exactly.
    definition : str or Sequence[str], optional
        Terms to search for in definitions. Matching is case-insensitive.

    Returns
    -------
    pd.DataFrame
        Rows matching any of the variable names or definition terms. If neither
        is provided, an empty data frame.

    Examples
    --------
    >>> search_data_dict(dictionary, definition="mortality")  # doctest: +SKIP
    """
    mask = pd.Series(False, index=dictionary.index)
    if var is not None:
        names = [var] if isinstance(var, str) else list(var)
        mask |= dictionary["variable_name"].isin(names)
    if definition is not None:
        terms = [definition] if isinstance(definition, str) else list(definition)
        for term in terms:
            mask |= dictionary["definition"].str.contains(
                term, case=False, regex=False, na=False
            )
    return dictionary.loc[mask].reset_index(drop=True)


def get_metric_label(dictionary: pd.DataFrame | None, metric: str) -> str:
    """
    Get a human-readable label for a metric, falling back to the metric code.
    """
    if dictionary is None:
        return metric
    matches = dictionary.loc[dictionary["variable_name"] == metric, "definition"]
    if matches.empty:
        return metric
    return matches.iloc[0]


def available_metrics(
    df: pd.DataFrame, conf: tuple[str, str] = ("_lo", "_hi")
) -> list[str]:
    """
    List numeric metrics in the data that come with confidence bounds.

    Parameters
    ----------
    df : pd.DataFrame
        TB burden data as returned by `datasets.get_tb_burden`.
    conf : tuple[str, str], default=("_lo", "_hi")
        Suffixes of the lower and upper bound columns.

    Returns
    -------
    list[str]
        Sorted metric names for which both bound columns exist.
    """
    columns = set(df.columns)
    return sorted(
        column
        for column in df.columns
        if is_numeric_dtype(df[column])
        and all(f"{column}{suffix}" in columns for suffix in conf)
    )
