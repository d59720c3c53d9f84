"""
Options controlling a TB burden summary and the confidence-bound choice
derived from them.
"""

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import InvalidGroupSpecification, UnsupportedStatistic
from .settings import SETTINGS

__all__ = [
    "StatKind",
    "SummaryOptions",
    "PointOnly",
    "WithBounds",
    "Confidence",
    "resolve_confidence",
]

logger = logging.getLogger(__name__)


class StatKind(StrEnum):
    """
    Statistics supported for summarising a metric.

    `MEAN` and `MEDIAN` summarise the distribution of country values within a group,
    `RATE` and `PROP` recompute the pooled value from sums of the metric and a denominator.
    """

    MEAN = "mean"
    MEDIAN = "median"
    RATE = "rate"
    PROP = "prop"


class SummaryOptions(BaseModel):
    """
    Options for summarising a TB burden metric by country, region, globally and for custom groups.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    metric: str = Field(
        default="e_inc_num",
        min_length=1,
        description="Name of the metric column to summarise.",
    )
    stat: StatKind = Field(
        default=StatKind.RATE,
        description="Statistic used to summarise the metric.",
    )
    denom: str = Field(
        default="e_pop_num",
        description="Denominator column, only used when `stat` is 'rate' or 'prop'.",
    )
    rate_scale: float = Field(
        default=1e5,
        gt=0,
        description="Scaling applied to rates. Ignored, i.e. set to 1, for proportions.",
    )
    conf: tuple[str, str] | None = Field(
        default=("_lo", "_hi"),
        description="Suffixes of the lower and upper confidence bound columns for the metric.",
    )
    years: frozenset[int] | None = Field(
        default=None,
        description="Years to keep. All years are kept if not set.",
    )
    samples: int = Field(
        default_factory=lambda: SETTINGS.samples,
        gt=0,
        description="Number of draws per row used to bootstrap confidence intervals.",
    )
    countries: tuple[str, ...] | None = Field(
        default=None,
        description="Countries to report individually, in the order they should appear.",
    )
    compare_to_region: bool = Field(
        default=False,
        description="Summarise the regions of the specified countries.",
    )
    compare_all_regions: bool = Field(
        default=True,
        description="Summarise every WHO region.",
    )
    compare_to_world: bool = Field(
        default=True,
        description="Summarise all countries as 'Global'.",
    )
    custom_compare: dict[str, tuple[str, ...]] | None = Field(
        default=None,
        description="Named groups of countries to summarise, keyed by group name.",
    )
    truncate_at_zero: bool = Field(
        default=True,
        description="Truncate negative summaries at zero.",
    )
    annual_change: bool = Field(
        default=False,
        description="Report the relative change from the previous year instead of levels.",
    )

    @model_validator(mode="before")
    @classmethod
    def check_groups(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        stat = data.get("stat", StatKind.RATE)
        if stat not in list(StatKind):
            raise UnsupportedStatistic(stat)
        custom = data.get("custom_compare")
        if custom is None:
            return data
        if not isinstance(custom, Mapping):
            raise InvalidGroupSpecification(
                "custom_compare must be a named mapping of 1 or more groups of countries"
            )
        for name in custom:
            if not isinstance(name, str) or not name.strip():
                raise InvalidGroupSpecification("Each group must have an associated name")
        return data

    @property
    def effective_rate_scale(self) -> float:
        """
        Rate scale actually applied, which is always 1 for proportions.
        """
        if self.stat == StatKind.PROP:
            return 1.0
        return self.rate_scale

    @property
    def requests_pooling(self) -> bool:
        """
        Whether any grouping beyond individual countries is requested.
        """
        return (
            self.compare_to_region
            or self.compare_all_regions
            or self.compare_to_world
            or bool(self.custom_compare)
        )

    @property
    def value_columns(self) -> list[str]:
        """
        Output column names for the point estimate and its bounds.
        """
        return [self.metric, f"{self.metric}_lo", f"{self.metric}_hi"]


class PointOnly(BaseModel):
    """
    The metric is summarised from point estimates only.
    """

    model_config = ConfigDict(frozen=True)


class WithBounds(BaseModel):
    """
    The metric comes with lower and upper confidence bound columns.
    """

    model_config = ConfigDict(frozen=True)

    lo: str
    hi: str


Confidence = PointOnly | WithBounds


def resolve_confidence(
    columns: Iterable[str], metric: str, conf: tuple[str, str] | None
) -> Confidence:
    """
    Decide whether a summary can use confidence bounds.

    Parameters
    ----------
    columns : Iterable[str]
        Column names available in the data.
    metric : str
        Name of the metric column.
    conf : tuple[str, str] or None
        Suffixes of the lower and upper bound columns.

    Returns
    -------
    Confidence
        `WithBounds` if both bound columns are present, `PointOnly` otherwise.
    """
    if conf is None:
        return PointOnly()
    lo, hi = (f"{metric}{suffix}" for suffix in conf)
    columns = set(columns)
    if lo in columns and hi in columns:
        return WithBounds(lo=lo, hi=hi)
    logger.warning(
        "Confidence intervals %s were not found for %s, so defaulting to estimating "
        "only based on the point estimate.",
        conf,
        metric,
    )
    return PointOnly()
