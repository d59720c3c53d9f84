"""
Unit tests for selecting rows per grouping and ordering areas.
"""

import pandas as pd

from tb_burden.grouping import (
    GLOBAL,
    area_order,
    select_countries,
    select_custom,
    select_groups,
    select_regions,
    select_world,
)
from tb_burden.options import SummaryOptions


def test_select_countries(df_burden):
    df = select_countries(df_burden, ["France"])
    assert set(df["area"]) == {"France"}
    assert len(df) == 2


def test_select_all_regions(df_burden):
    df = select_regions(df_burden)
    assert len(df) == len(df_burden)
    assert (df["area"] == df["g_whoregion"]).all()


def test_select_own_regions(df_burden):
    df = select_regions(df_burden, ["Namibia"])
    assert set(df["area"]) == {"AFR"}
    assert set(df["country"]) == {"Botswana", "Namibia"}


def test_select_regions_skips_missing_region(df_burden):
    df_burden.loc[0, "g_whoregion"] = None
    df = select_regions(df_burden)
    assert len(df) == len(df_burden) - 1


def test_select_world(df_burden):
    df = select_world(df_burden)
    assert len(df) == len(df_burden)
    assert set(df["area"]) == {GLOBAL}


def test_select_custom_repeats_shared_countries(df_burden):
    groups = {"A": ["Botswana", "France"], "B": ["France"]}
    df = select_custom(df_burden, groups)
    assert df.groupby("area").size().to_dict() == {"A": 4, "B": 2}


def test_select_groups_none_when_not_requested(df_burden):
    options = SummaryOptions(compare_all_regions=False, compare_to_world=False)
    assert select_groups(df_burden, options) is None


def test_select_groups_union(df_burden):
    options = SummaryOptions(custom_compare={"Group": ["France"]})
    df = select_groups(df_burden, options)
    assert isinstance(df, pd.DataFrame)
    assert df.groupby("area").size().to_dict() == {
        "AFR": 4,
        "EUR": 4,
        "Group": 2,
        GLOBAL: 8,
    }


def test_area_order():
    options = SummaryOptions(
        countries=["Namibia", "France"],
        custom_compare={"Zeta": ["France"], "Alpha": ["Namibia"]},
    )
    areas = ["EUR", GLOBAL, "Alpha", "AFR", "France", "Zeta", "Namibia"]
    assert area_order(options, areas) == [
        "Namibia",
        "France",
        "Zeta",
        "Alpha",
        "AFR",
        "EUR",
        GLOBAL,
    ]


def test_area_order_without_world():
    options = SummaryOptions(countries=["France"], compare_to_world=False)
    assert area_order(options, ["EUR", "France"]) == ["France", "EUR"]
