"""
Shared fixtures with a small sample of country-level TB burden estimates.
"""

import numpy as np
import pandas as pd
import pytest

ROWS = [
    # country, iso3, region, year, e_inc_num, e_inc_num_lo, e_inc_num_hi, e_pop_num
    ("Botswana", "BWA", "AFR", 2018, 600, 500, 700, 2_000_000),
    ("Botswana", "BWA", "AFR", 2019, 700, 600, 800, 2_000_000),
    ("Namibia", "NAM", "AFR", 2018, 1200, 1000, 1400, 3_000_000),
    ("Namibia", "NAM", "AFR", 2019, 1300, 1100, 1500, 3_000_000),
    ("United Kingdom", "GBR", "EUR", 2018, 5000, 4500, 5500, 60_000_000),
    ("United Kingdom", "GBR", "EUR", 2019, 4800, 4300, 5300, 60_000_000),
    ("France", "FRA", "EUR", 2018, 6000, 5000, 7000, 60_000_000),
    ("France", "FRA", "EUR", 2019, 6600, 5600, 7600, 60_000_000),
]

COLUMNS = [
    "country",
    "iso3",
    "g_whoregion",
    "year",
    "e_inc_num",
    "e_inc_num_lo",
    "e_inc_num_hi",
    "e_pop_num",
]


@pytest.fixture
def df_burden() -> pd.DataFrame:
    df = pd.DataFrame(ROWS, columns=COLUMNS)
    return df.astype({column: float for column in COLUMNS[4:]})


@pytest.fixture
def df_dictionary() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "variable_name": ["e_inc_num", "e_inc_100k", "e_mort_num", "e_pop_num"],
            "dataset": ["Estimates"] * 4,
            "code_list": [None] * 4,
            "definition": [
                "Estimated number of incident cases (all forms)",
                "Estimated incidence (all forms) per 100 000 population",
                "Estimated number of deaths from TB (all forms)",
                "Estimated total population number",
            ],
        }
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)
