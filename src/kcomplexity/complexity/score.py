"""
Normalized k-mer complexity.

The score of a span is the number of distinct k-mers divided by the span
length in bases. The divisor is the raw length, not the number of k-mer
positions (length - k + 1), so a perfectly non-repetitive span scores
slightly below 1. Deployed thresholds (for example 0.55) depend on this
exact rule.

Score meaning:
- Close to 1: every position starts a new k-mer (high complexity)
- Close to 0: a handful of k-mers repeated throughout (low complexity)
- Undefined: empty span
"""

from __future__ import annotations
from typing import Sequence

from kcomplexity.complexity.kmers import count_distinct_kmers
from kcomplexity.core.models import KmerComplexity
from kcomplexity.core.result import Result, Ok, Err


def calculate_complexity(span: str | bytes, k: int = 4) -> Result[float, str]:
    """
    Calculate the normalized complexity of a span.

    Args:
        span: DNA/RNA sequence
        k: K-mer length

    Returns:
        Ok(score in [0, 1]) on success
        Err(message) for an empty span

    Example:
        >>> calculate_complexity("ACGTACGTACGT", k=4).unwrap()
        0.3333333333333333
        >>> calculate_complexity("AAAAAAAAAAAA", k=4).unwrap()
        0.08333333333333333
    """
    if len(span) == 0:
        return Err("Empty sequence provided")

    return Ok(count_distinct_kmers(span, k) / len(span))


def measure_complexity(span: str | bytes, k: int = 4) -> KmerComplexity:
    """
    Length, distinct k-mer count and score of a span.

    Unlike calculate_complexity this never fails on an empty span; the
    score is left as None.
    """
    distinct = count_distinct_kmers(span, k)
    score = distinct / len(span) if len(span) else None
    return KmerComplexity(length=len(span), distinct_kmers=distinct, score=score)


def is_low_complexity(span: str | bytes, k: int, threshold: float) -> bool:
    """
    True if the span scores strictly below ``threshold``.

    An empty span has no defined score and is never low complexity.
    """
    result = calculate_complexity(span, k)
    if result.is_err():
        return False
    return result.unwrap() < threshold


def calculate_complexity_batch(
    sequences: Sequence[str | bytes],
    k: int = 4,
) -> list[Result[float, str]]:
    """Calculate complexity scores for several sequences."""
    return [calculate_complexity(seq, k) for seq in sequences]
