"""
Sliding-window low-complexity masking.

A window of ``window_size`` bases slides along the sequence with step 1.
Every window whose complexity score is strictly below the threshold marks
all of its bases; the mask is the union over all such windows. Sequences
shorter than the window are scored once as a single window.

Window scores are computed incrementally: the k-mer multiset of the
current window is updated by dropping the k-mer that leaves on the left and
adding the one that enters on the right. This gives the same distinct
counts as scoring each window from scratch.
"""

from __future__ import annotations
import logging
from collections import Counter
from typing import Iterable, Iterator

import numpy as np

from kcomplexity.complexity.kmers import check_k, normalize_sequence
from kcomplexity.complexity.score import is_low_complexity
from kcomplexity.core.errors import ConfigurationError
from kcomplexity.core.models import DEFAULT_MASK_SYMBOL

logger = logging.getLogger(__name__)


def _check_window_params(k: int, window_size: int, threshold: float) -> None:
    check_k(k)
    if window_size < k:
        raise ConfigurationError(f"Window size ({window_size}) must be >= k ({k})")
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"Threshold must be within [0, 1], got {threshold}")


def iter_window_scores(
    sequence: str | bytes,
    k: int,
    window_size: int,
) -> Iterator[tuple[int, int, float]]:
    """
    Yield ``(start, end, score)`` for every full window of the sequence.

    Only windows that fit entirely inside the sequence are produced, so
    nothing is yielded when the sequence is shorter than the window.
    """
    seq = normalize_sequence(sequence)
    n = len(seq)
    if n < window_size:
        return

    # k-mers starting at positions [start, start + window_size - k]
    span = window_size - k + 1
    counts = Counter(seq[i:i + k] for i in range(span))
    yield 0, window_size, len(counts) / window_size

    for start in range(1, n - window_size + 1):
        leaving = seq[start - 1:start - 1 + k]
        counts[leaving] -= 1
        if counts[leaving] == 0:
            del counts[leaving]
        entering_pos = start + span - 1
        counts[seq[entering_pos:entering_pos + k]] += 1
        yield start, start + window_size, len(counts) / window_size


def compute_mask(
    sequence: str | bytes,
    k: int,
    window_size: int,
    threshold: float,
) -> frozenset[int]:
    """
    Positions of ``sequence`` that fall in at least one low-complexity window.

    Args:
        sequence: DNA/RNA sequence (any case)
        k: K-mer length (>= 1)
        window_size: Window length (>= k)
        threshold: Windows scoring strictly below this are masked

    Returns:
        Frozen set of 0-based positions to mask (empty for an empty sequence)

    Raises:
        ConfigurationError: if the parameters are out of range

    Example:
        >>> sorted(compute_mask("AAAAAACGTACG", k=4, window_size=6, threshold=0.5))
        [0, 1, 2, 3, 4, 5, 6]
    """
    _check_window_params(k, window_size, threshold)

    n = len(sequence)
    if n == 0:
        return frozenset()

    if n < window_size:
        if is_low_complexity(sequence, k, threshold):
            return frozenset(range(n))
        return frozenset()

    masked = np.zeros(n, dtype=bool)
    for start, end, score in iter_window_scores(sequence, k, window_size):
        if score < threshold:
            masked[start:end] = True

    return frozenset(np.flatnonzero(masked).tolist())


def mask_intervals(mask: Iterable[int]) -> list[tuple[int, int]]:
    """
    Merge masked positions into sorted half-open ``(start, end)`` intervals.

    Example:
        >>> mask_intervals({0, 1, 2, 7, 8})
        [(0, 3), (7, 9)]
    """
    intervals: list[tuple[int, int]] = []
    for pos in sorted(mask):
        if intervals and pos == intervals[-1][1]:
            intervals[-1] = (intervals[-1][0], pos + 1)
        else:
            intervals.append((pos, pos + 1))
    return intervals


def apply_mask(
    sequence: str | bytes,
    mask: Iterable[int],
    symbol: str = DEFAULT_MASK_SYMBOL,
) -> str:
    """
    Replace masked positions with ``symbol``.

    Unmasked bases keep their original case; length is unchanged.
    """
    if isinstance(sequence, (bytes, bytearray)):
        sequence = sequence.decode("ascii")
    bases = list(sequence)
    for pos in mask:
        bases[pos] = symbol
    return "".join(bases)


def mask_sequence(
    sequence: str | bytes,
    k: int,
    window_size: int,
    threshold: float,
    symbol: str = DEFAULT_MASK_SYMBOL,
) -> tuple[str, frozenset[int]]:
    """Compute the mask and apply it, returning ``(masked_sequence, mask)``."""
    mask = compute_mask(sequence, k, window_size, threshold)
    if mask:
        logger.debug(f"Masked {len(mask)}/{len(sequence)} bases in {len(mask_intervals(mask))} region(s)")
    return apply_mask(sequence, mask, symbol), mask
