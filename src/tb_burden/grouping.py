"""
Selection of country rows for each requested grouping and the order in which
areas are reported.

Every selector returns a copy of the matching rows with an `area` column holding
the display name of the grouping.
"""

from typing import Iterable, Sequence

import pandas as pd

from .options import SummaryOptions

__all__ = [
    "GLOBAL",
    "select_countries",
    "select_regions",
    "select_world",
    "select_custom",
    "select_groups",
    "area_order",
]

GLOBAL = "Global"


def _tag(df: pd.DataFrame, area: str | pd.Series) -> pd.DataFrame:
    return df.assign(area=area)


def select_countries(df: pd.DataFrame, countries: Sequence[str]) -> pd.DataFrame:
    """
    Select rows for individual countries, each tagged with its own name.

    Parameters
    ----------
    df : pd.DataFrame
        Country-level data with a `country` column.
    countries : Sequence[str]
        Country names to keep.

    Returns
    -------
    pd.DataFrame
        Rows of the requested countries.
    """
    selected = df.loc[df["country"].isin(countries)]
    return _tag(selected, selected["country"].astype(str))


def select_regions(
    df: pd.DataFrame, countries: Sequence[str] | None = None
) -> pd.DataFrame:
    """
    Select rows for WHO regions, each tagged with its region code.

    Parameters
    ----------
    df : pd.DataFrame
        Country-level data with `country` and `g_whoregion` columns.
    countries : Sequence[str], optional
        If provided, only the regions containing these countries are kept.

    Returns
    -------
    pd.DataFrame
        Rows of every country in the selected regions.
    """
    selected = df.loc[df["g_whoregion"].notna()]
    if countries is not None:
        regions = selected.loc[selected["country"].isin(countries), "g_whoregion"]
        selected = selected.loc[selected["g_whoregion"].isin(regions.unique())]
    return _tag(selected, selected["g_whoregion"].astype(str))


def select_world(df: pd.DataFrame) -> pd.DataFrame:
    return _tag(df, GLOBAL)


def select_custom(df: pd.DataFrame, groups: dict[str, Sequence[str]]) -> pd.DataFrame:
    """
    Select rows for custom named groups of countries.

    A country may belong to several groups, in which case its rows are repeated
    once per group.

    Parameters
    ----------
    df : pd.DataFrame
        Country-level data with a `country` column.
    groups : dict[str, Sequence[str]]
        Mapping of group names to country names.

    Returns
    -------
    pd.DataFrame
        Rows of the grouped countries tagged with the group names.
    """
    data = [
        _tag(df.loc[df["country"].isin(countries)], name)
        for name, countries in groups.items()
    ]
    return pd.concat(data, axis=0, ignore_index=True)


def select_groups(df: pd.DataFrame, options: SummaryOptions) -> pd.DataFrame | None:
    """
    Combine the rows of all pooled groupings requested in the options.

    Parameters
    ----------
    df : pd.DataFrame
        Country-level data.
    options : SummaryOptions
        Summary options listing the requested groupings.

    Returns
    -------
    pd.DataFrame or None
        Union of regional, custom and global rows, or None if no pooling was requested.
    """
    data = []
    if options.compare_all_regions:
        data.append(select_regions(df))
    elif options.compare_to_region:
        data.append(select_regions(df, options.countries or ()))
    if options.custom_compare:
        data.append(select_custom(df, options.custom_compare))
    if options.compare_to_world:
        data.append(select_world(df))
    if not data:
        return None
    return pd.concat(data, axis=0, ignore_index=True)


def area_order(options: SummaryOptions, areas: Iterable[str] = ()) -> list[str]:
    """
    Get the order in which areas are reported.

    Countries come first in the order they were requested, followed by custom groups,
    regions sorted alphabetically and finally the global total.

    Parameters
    ----------
    options : SummaryOptions
        Summary options listing the requested groupings.
    areas : Iterable[str], optional
        Area labels present in the summary. Labels that are neither a requested country,
        a custom group nor the global total are treated as region codes.

    Returns
    -------
    list[str]
        De-duplicated area labels in reporting order.
    """
    named = list(options.countries or ())
    named.extend(options.custom_compare or {})
    regions = sorted(set(areas) - set(named) - {GLOBAL})
    order = named + regions
    if options.compare_to_world:
        order.append(GLOBAL)
    return list(dict.fromkeys(order))
