"""
K-mer complexity calculators.

Pure functions for scoring sequences by the density of distinct k-mers:
- kmers:  distinct k-mer counting
- score:  normalized complexity of a span
- window: sliding-window low-complexity masking
- report: statistics over measure-mode score tables

The calculators keep no state between calls and are safe to run in
independent worker processes.
"""

from kcomplexity.complexity.kmers import (
    count_distinct_kmers,
    distinct_kmers,
    iter_kmers,
    normalize_sequence,
)
from kcomplexity.complexity.score import (
    calculate_complexity,
    calculate_complexity_batch,
    measure_complexity,
    is_low_complexity,
)
from kcomplexity.complexity.window import (
    compute_mask,
    apply_mask,
    mask_sequence,
    mask_intervals,
    iter_window_scores,
)

__all__ = [
    "count_distinct_kmers",
    "distinct_kmers",
    "iter_kmers",
    "normalize_sequence",
    "calculate_complexity",
    "calculate_complexity_batch",
    "measure_complexity",
    "is_low_complexity",
    "compute_mask",
    "apply_mask",
    "mask_sequence",
    "mask_intervals",
    "iter_window_scores",
]
