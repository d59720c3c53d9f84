"""
Exceptions raised by the package and reusable exception objects.
"""

__all__ = [
    "TBBurdenError",
    "InvalidGroupSpecification",
    "UnsupportedStatistic",
    "MissingColumn",
    "StorageNotConfigured",
]


class TBBurdenError(Exception):
    """
    Base class for configuration errors raised when summarising TB burden data.
    """


class InvalidGroupSpecification(TBBurdenError):
    """
    Custom comparison groups are not a mapping or a group has no name.
    """


class UnsupportedStatistic(TBBurdenError):
    """
    The requested summary statistic is not one of mean, median, rate or prop.
    """

    def __init__(self, stat: object):
        super().__init__(
            f"`{stat}` is not currently supported. Use one of 'mean', 'median', 'rate' or 'prop'."
        )
        self.stat = stat


class MissingColumn(TBBurdenError):
    """
    A column required for the summary is absent from the data.
    """

    def __init__(self, column: str):
        super().__init__(f"Column `{column}` was not found in the data.")
        self.column = column


StorageNotConfigured = ValueError(
    "Env variable for local storage is not set. You must provide `LOCAL_STORAGE_PATH`"
)
