"""
Summaries of World Health Organization tuberculosis burden estimates by country,
region, globally and for custom groups of countries.
"""

from . import datasets, dictionary, grouping, options, storage, summarise, validation
from .options import StatKind, SummaryOptions
from .summarise import summarise_tb_burden

__all__ = ["StatKind", "SummaryOptions", "summarise_tb_burden"]

__version__ = "1.0.0b0"
