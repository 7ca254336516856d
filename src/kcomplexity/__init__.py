"""
kcomplexity: k-mer based sequence complexity scoring.

Scores DNA/RNA reads by the density of distinct k-mers and uses that score
to report complexity, mask low-complexity regions, or filter out
low-complexity records.
"""

__version__ = "1.0.0"

from kcomplexity.core.result import Result, Ok, Err

__all__ = [
    "__version__",
    "Result",
    "Ok",
    "Err",
]
