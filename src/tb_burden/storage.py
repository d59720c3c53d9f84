"""
Local storage for WHO TB datasets and the summaries derived from them.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import AliasChoices, DirectoryPath, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import StorageNotConfigured
from .settings import SETTINGS

__all__ = ["LocalStorage", "get_storage"]

logger = logging.getLogger(__name__)


class LocalStorage(BaseSettings):
    """
    Storage interface for a folder on the local file system.

    Source datasets are read from the root of the folder, while summaries are
    written to dated subfolders so that earlier runs are kept.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    folder_path: DirectoryPath = Field(
        validation_alias=AliasChoices("folder_path", "LOCAL_STORAGE_PATH"),
        description="Directory holding WHO TB datasets and used for writing summaries",
    )

    @property
    def version(self) -> str:
        """
        Version folder for summaries written today, in the format vYY-MM-DD.
        """
        return datetime.now(UTC).strftime("v%y-%m-%d")

    def join_path(self, file_path: str | Path) -> Path:
        """
        Resolve a path relative to the storage folder, creating missing parent folders.

        Parameters
        ----------
        file_path : str or Path
            Path relative to `folder_path`. Absolute paths are returned as is.

        Returns
        -------
        Path
            Full path to the file.
        """
        path = self.folder_path.joinpath(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def exists(self, file_path: str | Path) -> bool:
        return self.folder_path.joinpath(file_path).is_file()

    def read_dataset(self, file_path: str | Path, **kwargs: Any) -> pd.DataFrame:
        """
        Read a dataset, choosing the reader from the file extension.

        WHO publishes its TB data as CSV files, which may also have been converted to
        parquet or Excel.

        Parameters
        ----------
        file_path : str or Path
            Path to the file relative to `folder_path`.
        **kwargs
            Additional keyword arguments to pass to the reading function in `pandas`.

        Returns
        -------
        pd.DataFrame
            Contents of the file.
        """
        path = self.join_path(file_path)
        match path.suffix:
            case ".csv":
                return pd.read_csv(path, low_memory=False, **kwargs)
            case ".parquet":
                return pd.read_parquet(path, **kwargs)
            case ".xlsx":
                return pd.read_excel(path, **kwargs)
            case suffix:
                raise ValueError(f"`{suffix}` extension is not supported.")

    def write_summary(self, df: pd.DataFrame, name: str, folder_path: str = "") -> Path:
        """
        Write a summary as a parquet file in today's version folder.

        Parameters
        ----------
        df : pd.DataFrame
            Summary as returned by `summarise_tb_burden`.
        name : str
            File name without the extension.
        folder_path : str, optional
            Subfolder within the version folder.

        Returns
        -------
        Path
            Full path to the written file.
        """
        if not name:
            raise ValueError("Summary name must be provided.")
        path = self.join_path(Path(self.version, folder_path, f"{name}.parquet"))
        df.to_parquet(path, index=False)
        logger.debug("Wrote summary of shape %s to %s", df.shape, path)
        return path

    def __str__(self):
        return f"{self.__class__.__name__}({self.folder_path})"


def get_storage(**kwargs) -> LocalStorage:
    """
    Get a storage for the folder set in keyword arguments or environment variables.

    Parameters
    ----------
    **kwargs
        Keyword arguments passed to the storage class.

    Returns
    -------
    LocalStorage
        Storage for the configured folder.
    """
    if "folder_path" not in kwargs:
        if SETTINGS.local_storage is None:
            raise StorageNotConfigured
        kwargs["folder_path"] = SETTINGS.local_storage
    storage = LocalStorage(**kwargs)
    logger.info("Using %s storage", storage)
    return storage
