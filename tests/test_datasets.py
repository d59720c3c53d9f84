"""
Unit tests for reading WHO TB datasets from storage.
"""

import pandas as pd
import pytest
from pandera.errors import SchemaError

from tb_burden.datasets import get_data_dict, get_tb_burden
from tb_burden.storage import LocalStorage


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(folder_path=tmp_path)


@pytest.fixture
def df_mdr() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "country": ["Botswana", "France"],
            "iso3": ["BWA", "FRA"],
            "year": [2019, 2019],
            "e_rr_pct_new": [3.1, 1.2],
            "e_rr_pct_new_lo": [2.0, 0.8],
            "e_rr_pct_new_hi": [4.2, 1.6],
        }
    )


def test_get_tb_burden(storage, df_burden, tmp_path):
    df_burden.to_csv(tmp_path / "burden.csv", index=False)
    df = get_tb_burden(storage, "burden.csv", mdr_file_path="missing.csv")
    assert df.shape == df_burden.shape
    assert df["year"].dtype == "int64"


def test_get_tb_burden_joins_mdr(storage, df_burden, df_mdr, tmp_path):
    df_burden.to_csv(tmp_path / "burden.csv", index=False)
    df_mdr.to_csv(tmp_path / "mdr.csv", index=False)
    df = get_tb_burden(storage, "burden.csv", mdr_file_path="mdr.csv")
    assert len(df) == len(df_burden), "Join must not change the number of rows"
    assert {"e_rr_pct_new", "e_rr_pct_new_lo", "e_rr_pct_new_hi"} <= set(df.columns)
    row = df.loc[(df["country"] == "France") & (df["year"] == 2019)].iloc[0]
    assert row["e_rr_pct_new"] == pytest.approx(1.2)
    assert df.loc[df["year"] == 2018, "e_rr_pct_new"].isna().all()


def test_get_tb_burden_strips_country_names(storage, df_burden, tmp_path):
    df_burden["country"] = df_burden["country"] + "  "
    df_burden.to_csv(tmp_path / "burden.csv", index=False)
    df = get_tb_burden(storage, "burden.csv", mdr_file_path="missing.csv")
    assert "France" in set(df["country"])


def test_get_tb_burden_rejects_duplicates(storage, df_burden, tmp_path):
    df = pd.concat([df_burden, df_burden.head(1)], ignore_index=True)
    df.to_csv(tmp_path / "burden.csv", index=False)
    with pytest.raises(SchemaError):
        get_tb_burden(storage, "burden.csv", mdr_file_path="missing.csv")


def test_get_data_dict(storage, df_dictionary, tmp_path):
    df_dictionary.to_csv(tmp_path / "dictionary.csv", index=False)
    df = get_data_dict(storage, "dictionary.csv")
    assert df["variable_name"].tolist() == df_dictionary["variable_name"].tolist()
