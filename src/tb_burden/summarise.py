"""
Summarise TB burden metrics by country, region, globally and for custom groups.

Rates and proportions are recomputed from the pooled metric and denominator. Means and
medians summarise the distribution of country values within a group and, when confidence
bounds are available, propagate their uncertainty by drawing from a normal distribution
for every country and pooling the draws.
"""

import logging

import numpy as np
import pandas as pd
from scipy.stats import norm

from .exceptions import MissingColumn, UnsupportedStatistic
from .grouping import area_order, select_countries, select_groups
from .options import Confidence, StatKind, SummaryOptions, WithBounds, resolve_confidence
from .settings import SETTINGS

__all__ = ["summarise_tb_burden", "annual_change"]

logger = logging.getLogger(__name__)

KEYS = ["area", "year"]
VALUE, LOWER, UPPER = "mean", "mean_lo", "mean_hi"
VALUES = [VALUE, LOWER, UPPER]
DENOM = "denom"
# Half-width of a 95% interval in standard deviations under normality
Z_95 = 1.96


def summarise_tb_burden(
    df: pd.DataFrame,
    options: SummaryOptions | None = None,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    """
    Summarise a TB burden metric for countries, regions, the world and custom groups.

    Parameters
    ----------
    df : pd.DataFrame
        Country-level data with `country`, `year`, `g_whoregion`, the metric and, optionally,
        its confidence bounds and the denominator. See `datasets.get_tb_burden`.
    options : SummaryOptions, optional
        Summary options. Defaults to incidence rates per 100,000 for all regions and globally.
    rng : np.random.Generator, optional
        Random generator used to bootstrap confidence intervals. If not provided, a generator
        seeded with `SETTINGS.random_seed` is used.

    Returns
    -------
    pd.DataFrame
        Data frame with `area`, `year`, `{metric}`, `{metric}_lo` and `{metric}_hi` columns,
        ordered by area (countries, custom groups, regions, "Global") and year. Missing
        values are represented by `pd.NA`.

    Examples
    --------
    >>> options = SummaryOptions(metric="e_inc_num", stat="rate", countries=["Botswana"])
    >>> summarise_tb_burden(df, options)  # doctest: +SKIP
    """
    if options is None:
        options = SummaryOptions()
    if rng is None:
        rng = np.random.default_rng(SETTINGS.random_seed)
    _check_columns(df, options)
    confidence = resolve_confidence(df.columns, options.metric, options.conf)

    data = []
    if options.countries:
        logger.info("Extracting data for %s", ", ".join(options.countries))
        countries_df = _filter_years(select_countries(df, options.countries), options)
        data.append(_summarise_countries(countries_df, options, confidence))

    if (groups_df := select_groups(df, options)) is not None:
        groups_df = _filter_years(groups_df, options)
        logger.info(
            "Summarising %s for %d areas using '%s'",
            options.metric,
            groups_df["area"].nunique(),
            options.stat,
        )
        data.append(_summarise_groups(groups_df, options, confidence, rng))

    if not data:
        logger.warning("No countries or groupings requested, returning an empty summary")
        return _format(pd.DataFrame(columns=KEYS + VALUES), options)

    df_summary = pd.concat(data, axis=0, ignore_index=True)
    df_summary[VALUES] = df_summary[VALUES].astype(float)
    if options.truncate_at_zero:
        df_summary[VALUES] = df_summary[VALUES].clip(lower=0)
    areas = area_order(options, df_summary["area"].unique())
    df_summary["area"] = pd.Categorical(df_summary["area"], categories=areas, ordered=True)
    df_summary = df_summary.sort_values(KEYS, ignore_index=True)
    if options.annual_change:
        df_summary = annual_change(df_summary, VALUES)
    return _format(df_summary, options)


def annual_change(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """
    Replace values with their relative change from the previous year within each area.

    The first year of every area is dropped as there is no previous value to compare to.
    Non-finite changes, e.g., from a previous value of zero, are set to NaN.

    Parameters
    ----------
    df : pd.DataFrame
        Data frame with `area` and `year` columns.
    columns : list[str]
        Columns to replace with annual changes.

    Returns
    -------
    pd.DataFrame
        Data frame with annual changes sorted by area and year.
    """
    df = df.sort_values(KEYS, ignore_index=True)
    grouped = df.groupby("area", observed=True, sort=False)
    previous = grouped[columns].shift(1)
    change = (df[columns] - previous) / previous
    df[columns] = change.replace([np.inf, -np.inf], np.nan)
    first = grouped.cumcount() == 0
    return df.loc[~first].reset_index(drop=True)


def _check_columns(df: pd.DataFrame, options: SummaryOptions) -> None:
    required = ["country", "year", options.metric]
    if options.compare_all_regions or options.compare_to_region:
        required.append("g_whoregion")
    if options.stat in (StatKind.RATE, StatKind.PROP):
        required.append(options.denom)
    for column in required:
        if column not in df.columns:
            raise MissingColumn(column)


def _filter_years(df: pd.DataFrame, options: SummaryOptions) -> pd.DataFrame:
    if options.years is None:
        return df
    logger.debug("Filtering to use only data from: %s", sorted(options.years))
    return df.loc[df["year"].isin(list(options.years))]


def _values(df: pd.DataFrame, metric: str, confidence: Confidence) -> pd.DataFrame:
    """
    Get point estimates and bounds in a standard form.

    Missing bounds are replaced with the point estimate, and all bounds are set to the
    point estimate if the data has no confidence bounds.
    """
    value = pd.to_numeric(df[metric], errors="coerce")
    if isinstance(confidence, WithBounds):
        lower = pd.to_numeric(df[confidence.lo], errors="coerce").fillna(value)
        upper = pd.to_numeric(df[confidence.hi], errors="coerce").fillna(value)
    else:
        lower = upper = value
    return pd.DataFrame(
        {
            "area": df["area"].to_numpy(),
            "year": df["year"].to_numpy(),
            VALUE: value.to_numpy(dtype=float),
            LOWER: lower.to_numpy(dtype=float),
            UPPER: upper.to_numpy(dtype=float),
        }
    )


def _summarise_rate(
    df: pd.DataFrame, options: SummaryOptions, confidence: Confidence
) -> pd.DataFrame:
    """
    Compute the pooled rate, i.e., the sum of the metric divided by the sum of the denominator.

    Missing values count as zero in the sums. Areas with a zero denominator get NaN.
    """
    data = _values(df, options.metric, confidence)
    data[DENOM] = pd.to_numeric(df[options.denom], errors="coerce").to_numpy(dtype=float)
    sums = data.groupby(KEYS, sort=False)[VALUES + [DENOM]].sum()
    denominator = sums.pop(DENOM)
    rates = sums.div(denominator.where(denominator != 0), axis=0)
    return (rates * options.effective_rate_scale).reset_index()


def _draw_samples(
    data: pd.DataFrame,
    confidence: Confidence,
    samples: int,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """
    Draw samples for each row from a normal distribution implied by its confidence bounds.

    Without bounds, the point estimates themselves form the samples.
    """
    if not isinstance(confidence, WithBounds):
        return data[KEYS].assign(samples=data[VALUE])
    sd = (data[UPPER] - data[LOWER]) / (2 * Z_95)
    # Inverted bounds have no valid distribution
    sd = sd.where(sd >= 0).to_numpy()
    index = data.index.repeat(samples)
    noise = rng.standard_normal(len(index))
    draws = np.repeat(data[VALUE].to_numpy(), samples) + np.repeat(sd, samples) * noise
    return data.loc[index, KEYS].assign(samples=draws).reset_index(drop=True)


def _summarise_distribution(
    df: pd.DataFrame,
    options: SummaryOptions,
    confidence: Confidence,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """
    Summarise pooled samples with the mean (95% normal interval) or the median
    (2.5th and 97.5th percentiles).
    """
    data = _values(df, options.metric, confidence)
    draws = _draw_samples(data, confidence, options.samples, rng)
    grouped = draws.groupby(KEYS, sort=False)["samples"]
    match options.stat:
        case StatKind.MEAN:
            summary = grouped.agg(mean="mean", sd="std")
            summary[LOWER] = summary[VALUE] + norm.ppf(0.025) * summary["sd"]
            summary[UPPER] = summary[VALUE] + norm.ppf(0.975) * summary["sd"]
        case StatKind.MEDIAN:
            summary = pd.DataFrame(
                {
                    VALUE: grouped.median(),
                    LOWER: grouped.quantile(0.025),
                    UPPER: grouped.quantile(0.975),
                }
            )
        case _:
            raise UnsupportedStatistic(options.stat)
    return summary[VALUES].reset_index()


def _summarise_groups(
    df: pd.DataFrame,
    options: SummaryOptions,
    confidence: Confidence,
    rng: np.random.Generator,
) -> pd.DataFrame:
    match options.stat:
        case StatKind.RATE | StatKind.PROP:
            return _summarise_rate(df, options, confidence)
        case StatKind.MEAN | StatKind.MEDIAN:
            return _summarise_distribution(df, options, confidence, rng)
        case _:
            raise UnsupportedStatistic(options.stat)


def _summarise_countries(
    df: pd.DataFrame, options: SummaryOptions, confidence: Confidence
) -> pd.DataFrame:
    """
    Summarise individual countries.

    Rates and proportions are computed for every country as a group of one, while
    means and medians pass country values through.
    """
    if options.stat in (StatKind.RATE, StatKind.PROP):
        return _summarise_rate(df, options, confidence)
    return _values(df, options.metric, confidence)


def _format(df: pd.DataFrame, options: SummaryOptions) -> pd.DataFrame:
    """
    Set output column names and types, representing missing values as `pd.NA`.
    """
    df = df.reindex(columns=KEYS + VALUES)
    df[VALUES] = df[VALUES].astype(float).replace([np.inf, -np.inf], np.nan)
    df = df.astype({"year": int} | {column: "Float64" for column in VALUES})
    columns = dict(zip(VALUES, options.value_columns))
    return df.rename(columns=columns)
