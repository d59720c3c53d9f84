"""
Access to WHO TB datasets held in storage.

The datasets are expected to have been downloaded from https://www.who.int/teams/global-tuberculosis-programme/data
beforehand. Nothing is fetched over the network.
"""

import logging

import pandas as pd

from .settings import SETTINGS
from .storage import LocalStorage, get_storage
from .validation import BurdenSchema, DictionarySchema

__all__ = ["get_tb_burden", "get_data_dict"]

logger = logging.getLogger(__name__)

JOIN_KEYS = ["country", "iso2", "iso3", "iso_numeric", "year"]


def get_tb_burden(
    storage: LocalStorage | None = None,
    file_path: str | None = None,
    mdr_file_path: str | None = None,
    **kwargs,
) -> pd.DataFrame:
    """
    Read country-level TB burden estimates, joined with MDR/RR-TB estimates if available.

    Parameters
    ----------
    storage : LocalStorage, optional
        Storage to read from. Defaults to the storage configured in environment variables.
    file_path : str, optional
        Path to the burden estimates within the storage. Defaults to `SETTINGS.burden_file`.
    mdr_file_path : str, optional
        Path to the MDR/RR-TB estimates within the storage. Defaults to `SETTINGS.mdr_file`.
        The estimates are skipped if the file does not exist.
    **kwargs
        Additional keyword arguments to pass to `storage.read_dataset`.

    Returns
    -------
    pd.DataFrame
        Validated data frame with one row per country and year.
    """
    if storage is None:
        storage = get_storage()
    file_path = file_path or SETTINGS.burden_file
    df = storage.read_dataset(file_path, **kwargs)
    logger.info("Read TB burden estimates of shape %s from %s", df.shape, file_path)

    mdr_file_path = mdr_file_path or SETTINGS.mdr_file
    if mdr_file_path is not None and storage.exists(mdr_file_path):
        df_mdr = storage.read_dataset(mdr_file_path, **kwargs)
        logger.info("Joining MDR/RR-TB estimates of shape %s", df_mdr.shape)
        df = _join_estimates(df, df_mdr)
    else:
        logger.debug("No MDR/RR-TB estimates found at %s", mdr_file_path)
    return BurdenSchema.validate(df)


def get_data_dict(
    storage: LocalStorage | None = None, file_path: str | None = None, **kwargs
) -> pd.DataFrame:
    """
    Read the WHO TB data dictionary.

    Parameters
    ----------
    storage : LocalStorage, optional
        Storage to read from. Defaults to the storage configured in environment variables.
    file_path : str, optional
        Path to the dictionary within the storage. Defaults to `SETTINGS.dictionary_file`.
    **kwargs
        Additional keyword arguments to pass to `storage.read_dataset`.

    Returns
    -------
    pd.DataFrame
        Validated data dictionary with `variable_name`, `dataset` and `definition` columns.
    """
    if storage is None:
        storage = get_storage()
    df = storage.read_dataset(file_path or SETTINGS.dictionary_file, **kwargs)
    return DictionarySchema.validate(df)


def _join_estimates(df: pd.DataFrame, df_mdr: pd.DataFrame) -> pd.DataFrame:
    """
    Left join MDR/RR-TB estimates onto burden estimates using shared identifier columns.

    Columns other than identifiers that appear in both data frames are taken from
    the burden estimates.
    """
    keys = [key for key in JOIN_KEYS if key in df.columns and key in df_mdr.columns]
    if not {"country", "year"}.issubset(keys):
        raise KeyError("MDR/RR-TB estimates must contain `country` and `year` columns")
    columns = keys + [column for column in df_mdr.columns if column not in df.columns]
    return df.merge(df_mdr[columns], how="left", on=keys, validate="one_to_one")
