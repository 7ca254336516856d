"""
Distinct k-mer counting.

K-mers are compared by exact content after uppercasing, so soft-masked
(lowercase) bases do not count as different from their uppercase form.
Ambiguity codes such as N are ordinary symbols here: a k-mer containing N
is just another distinct string.
"""

from __future__ import annotations
from typing import Iterator

from kcomplexity.core.errors import ConfigurationError


def normalize_sequence(sequence: str | bytes) -> str:
    """Return ``sequence`` as an uppercase str (bytes are decoded as ASCII)."""
    if isinstance(sequence, (bytes, bytearray)):
        sequence = sequence.decode("ascii")
    return sequence.upper()


def check_k(k: int) -> None:
    if k < 1:
        raise ConfigurationError(f"k must be >= 1, got {k}")


def iter_kmers(sequence: str | bytes, k: int) -> Iterator[str]:
    """
    Yield every k-mer of ``sequence`` with step 1.

    Positions run from 0 to ``len(sequence) - k`` inclusive; nothing is
    yielded when the sequence is shorter than k.
    """
    check_k(k)
    seq = normalize_sequence(sequence)
    for i in range(len(seq) - k + 1):
        yield seq[i:i + k]


def distinct_kmers(sequence: str | bytes, k: int) -> set[str]:
    """Set of distinct k-mers in ``sequence``."""
    return set(iter_kmers(sequence, k))


def count_distinct_kmers(sequence: str | bytes, k: int) -> int:
    """
    Count distinct k-mers in ``sequence``.

    Args:
        sequence: Bases (str or bytes, any case)
        k: K-mer length (>= 1)

    Returns:
        Number of distinct k-mers; 0 when ``len(sequence) < k``

    Raises:
        ConfigurationError: if k < 1

    Example:
        >>> count_distinct_kmers("ACGTACGTACGT", 4)
        4
        >>> count_distinct_kmers("acgtACGT", 4)
        4
    """
    return len(distinct_kmers(sequence, k))
