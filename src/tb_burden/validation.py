"""
Validation schemas to ensure integrity of WHO TB datasets before summarising.
"""

from typing import Optional

import pandera.pandas as pa
from pandera.typing.pandas import Series

__all__ = ["BurdenSchema", "DictionarySchema"]


class BurdenSchema(pa.DataFrameModel):
    """
    Country-level TB burden estimates schema.

    Metric columns, such as `e_inc_num` or `e_inc_num_lo`, are not declared and
    pass through untouched.
    """

    country: Series[str] = pa.Field(
        str_length={"min_value": 1, "max_value": 256},
        nullable=False,
        description="Country or territory name as used by WHO",
    )
    iso3: Optional[Series[str]] = pa.Field(
        str_matches=r"^[A-Z]{3}$",
        nullable=True,
        description="ISO 3166-1 alpha-3 three-letter country code",
    )
    g_whoregion: Optional[Series[str]] = pa.Field(
        nullable=True,
        description="WHO region code, e.g. AFR or EUR",
    )
    year: Series[int] = pa.Field(
        ge=1900,
        le=2100,
        nullable=False,
        coerce=True,
    )

    class Config:
        name = "TBBurdenSchema"
        strict = False
        unique = ["country", "year"]

    @pa.parser("country")
    @classmethod
    def strip(cls, series):
        return series.str.strip()


class DictionarySchema(pa.DataFrameModel):
    """
    WHO TB data dictionary schema.
    """

    variable_name: Series[str] = pa.Field(
        str_length={"min_value": 1, "max_value": 128},
        nullable=False,
        unique=True,
    )
    dataset: Series[str] = pa.Field(nullable=True)
    definition: Series[str] = pa.Field(nullable=False)

    class Config:
        name = "TBDataDictionarySchema"
        strict = False

    @pa.parser("variable_name", "definition")
    @classmethod
    def strip(cls, series):
        return series.str.strip()
