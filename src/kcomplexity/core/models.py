"""
Core data models for kcomplexity.

Defines the immutable per-record structures that flow through the scoring
engine and the run configuration that is fixed at startup.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from kcomplexity.core.errors import ConfigurationError


DEFAULT_K = 4
DEFAULT_MASK_SYMBOL = "N"
UNDEFINED_SCORE = "NA"


class Mode(Enum):
    """Processing behaviour selected once per run."""
    MEASURE = "measure"
    MASK = "mask"
    FILTER = "filter"


@dataclass(frozen=True, slots=True)
class Record:
    """
    A single sequencing read or contig.

    Attributes:
        id: Identifier (first whitespace-delimited token of the header)
        sequence: Bases as read from input, original case preserved
        description: Full header line without the leading '>' or '@'
        quality: Per-base quality string (FASTQ only), passed through untouched
    """
    id: str
    sequence: str
    description: str = ""
    quality: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quality is not None and len(self.quality) != len(self.sequence):
            raise ValueError(
                f"Quality length {len(self.quality)} does not match "
                f"sequence length {len(self.sequence)} for {self.id}"
            )

    @property
    def header(self) -> str:
        """Header text to write back out (falls back to the id)."""
        return self.description or self.id

    @property
    def is_fastq(self) -> bool:
        return self.quality is not None

    def with_sequence(self, sequence: str) -> Record:
        """Copy of this record with a same-length replacement sequence."""
        return replace(self, sequence=sequence)

    def __len__(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True, slots=True)
class KmerComplexity:
    """
    Complexity of one scored span.

    ``score`` is None when the span is empty (the ratio is undefined).
    """
    length: int
    distinct_kmers: int
    score: Optional[float]

    @property
    def is_defined(self) -> bool:
        return self.score is not None


@dataclass(frozen=True, slots=True)
class MeasureRow:
    """One line of measure-mode output."""
    record_id: str
    length: int
    distinct_kmers: int
    score: Optional[float]

    @classmethod
    def from_complexity(cls, record_id: str, complexity: KmerComplexity) -> MeasureRow:
        return cls(
            record_id=record_id,
            length=complexity.length,
            distinct_kmers=complexity.distinct_kmers,
            score=complexity.score,
        )

    def to_tsv_line(self) -> str:
        """Format as ``id<TAB>length<TAB>distinct<TAB>score`` (score to 4 decimals)."""
        score = UNDEFINED_SCORE if self.score is None else f"{self.score:.4f}"
        return f"{self.record_id}\t{self.length}\t{self.distinct_kmers}\t{score}"


MEASURE_COLUMNS = ["id", "length", "distinct_kmers", "score"]


@dataclass(frozen=True, slots=True)
class ComplexityConfig:
    """
    Immutable run configuration.

    Built once before any record is read and passed explicitly to every
    per-record operation. Validation failures raise ConfigurationError.

    Attributes:
        mode: Measure, mask or filter
        k: K-mer length used for scoring
        window_size: Sliding window length (mask mode)
        threshold: Complexity cutoff in [0, 1] (mask and filter modes)
        invert: Keep records below the threshold instead (filter mode)
        mask_symbol: Replacement symbol for masked bases
    """
    mode: Mode = Mode.MEASURE
    k: int = DEFAULT_K
    window_size: Optional[int] = None
    threshold: Optional[float] = None
    invert: bool = False
    mask_symbol: str = DEFAULT_MASK_SYMBOL

    def __post_init__(self) -> None:
        if not isinstance(self.mode, Mode):
            raise ConfigurationError(f"Unknown mode: {self.mode!r}")
        if self.k < 1:
            raise ConfigurationError(f"k must be >= 1, got {self.k}")
        if len(self.mask_symbol) != 1:
            raise ConfigurationError(f"Mask symbol must be a single character, got {self.mask_symbol!r}")

        if self.threshold is not None and not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(f"Threshold must be within [0, 1], got {self.threshold}")

        if self.mode is Mode.MASK:
            if self.window_size is None:
                raise ConfigurationError("Mask mode requires a window size")
            if self.threshold is None:
                raise ConfigurationError("Mask mode requires a threshold")
            if self.window_size < self.k:
                raise ConfigurationError(
                    f"Window size ({self.window_size}) must be >= k ({self.k})"
                )
        elif self.mode is Mode.FILTER:
            if self.threshold is None:
                raise ConfigurationError("Filter mode requires a threshold")

        if self.invert and self.mode is not Mode.FILTER:
            raise ConfigurationError("--invert only applies to filter mode")

    def describe(self) -> str:
        """Short human-readable summary for log lines."""
        parts = [f"mode={self.mode.value}", f"k={self.k}"]
        if self.window_size is not None:
            parts.append(f"window={self.window_size}")
        if self.threshold is not None:
            parts.append(f"threshold={self.threshold}")
        if self.invert:
            parts.append("invert")
        return ", ".join(parts)
