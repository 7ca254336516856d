"""
Core module for kcomplexity.

Contains the record and configuration models, result types, exceptions and
sequence file I/O shared by the scoring engine and the CLI.
"""

from kcomplexity.core.result import Result, Ok, Err
from kcomplexity.core.errors import ConfigurationError, MalformedRecordError
from kcomplexity.core.models import (
    Record,
    KmerComplexity,
    MeasureRow,
    Mode,
    ComplexityConfig,
)
from kcomplexity.core.seqio import read_records, write_records, write_measure_rows

__all__ = [
    "Result",
    "Ok",
    "Err",
    "ConfigurationError",
    "MalformedRecordError",
    "Record",
    "KmerComplexity",
    "MeasureRow",
    "Mode",
    "ComplexityConfig",
    "read_records",
    "write_records",
    "write_measure_rows",
]
