"""
Package settings based on environment variables.
"""

from pydantic import DirectoryPath, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["SETTINGS"]


class Settings(BaseSettings):
    """
    Package settings, including default file names for WHO datasets.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    local_storage: DirectoryPath | None = Field(
        default=None,
        alias="LOCAL_STORAGE_PATH",
        description="Directory holding WHO TB datasets and summary outputs.",
    )
    samples: int = Field(
        default=1000,
        gt=0,
        description="Default number of Monte Carlo draws per country when bootstrapping "
        "confidence intervals.",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for the default random generator. Unseeded if not set.",
    )
    burden_file: str = Field(
        default="TB_burden_countries.csv",
        description="File name of the WHO TB burden estimates.",
    )
    mdr_file: str | None = Field(
        default="MDR_RR_TB_burden_estimates.csv",
        description="File name of the WHO MDR/RR-TB burden estimates. Joined onto the "
        "burden estimates when present.",
    )
    dictionary_file: str = Field(
        default="TB_data_dictionary.csv",
        description="File name of the WHO TB data dictionary.",
    )


SETTINGS = Settings()
