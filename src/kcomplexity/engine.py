"""
Per-record mode dispatch and streaming runs.

One configuration is fixed for the whole run and selects exactly one
behaviour:

  measure - one score line per record (never drops a record)
  mask    - every record written back with low-complexity bases replaced
  filter  - records scoring below the threshold are omitted

Records are read, processed and written one at a time; no state is
carried from one record to the next.
"""

import logging
from contextlib import ExitStack
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict, Any, Callable, Iterable, Iterator, Union

from kcomplexity.complexity.score import measure_complexity
from kcomplexity.complexity.window import mask_sequence, mask_intervals
from kcomplexity.core.errors import MalformedRecordError
from kcomplexity.core.models import (
    ComplexityConfig,
    KmerComplexity,
    MeasureRow,
    Mode,
    Record,
)
from kcomplexity.core.result import Result, Ok, Err
from kcomplexity.core.seqio import (
    open_text,
    read_records,
    write_mask_regions,
    write_measure_rows,
    write_records,
)

logger = logging.getLogger(__name__)

ProcessedRecord = Union[MeasureRow, Record, None]
MaskCallback = Callable[[Record, frozenset], None]


@dataclass
class RunStats:
    """Counters accumulated over one run."""
    mode: str
    input_count: int = 0
    output_count: int = 0
    removed_count: int = 0
    undefined_count: int = 0
    masked_records: int = 0
    masked_bases: int = 0
    total_bases: int = 0


def measure_record(record: Record, config: ComplexityConfig) -> MeasureRow:
    """Whole-sequence complexity of a record as an output row."""
    return MeasureRow.from_complexity(record.id, measure_complexity(record.sequence, config.k))


def mask_record(record: Record, config: ComplexityConfig) -> tuple[Record, frozenset]:
    """
    Replace low-complexity bases of a record with the mask symbol.

    Quality values are left untouched.

    Returns:
        (masked record, masked positions)
    """
    masked, mask = mask_sequence(
        record.sequence,
        k=config.k,
        window_size=config.window_size,
        threshold=config.threshold,
        symbol=config.mask_symbol,
    )
    if not mask:
        return record, mask
    return record.with_sequence(masked), mask


def passes_filter(complexity: KmerComplexity, threshold: float, invert: bool = False) -> bool:
    """
    Filter decision for one whole-sequence score.

    A score equal to the threshold passes. An undefined score (empty
    sequence) is not low complexity: it passes normally and is dropped
    when the filter is inverted.
    """
    if complexity.score is None:
        return not invert
    if invert:
        return complexity.score < threshold
    return complexity.score >= threshold


def filter_record(record: Record, config: ComplexityConfig) -> Optional[Record]:
    """The unmodified record if it passes the filter, otherwise None."""
    complexity = measure_complexity(record.sequence, config.k)
    if passes_filter(complexity, config.threshold, config.invert):
        return record
    logger.debug(f"Filtered {record.id} (score={complexity.score})")
    return None


def process_record(
    record: Record,
    config: ComplexityConfig,
    on_mask: Optional[MaskCallback] = None,
) -> ProcessedRecord:
    """
    Apply the configured mode to a single record.

    Args:
        record: Input record
        config: Run configuration
        on_mask: Mask mode only; called with the input record and its
            masked positions whenever at least one base is masked

    Returns:
        MeasureRow (measure), Record (mask, or filter pass) or None (filter reject)
    """
    if config.mode is Mode.MEASURE:
        return measure_record(record, config)
    if config.mode is Mode.MASK:
        masked, mask = mask_record(record, config)
        if mask and on_mask is not None:
            on_mask(record, mask)
        return masked
    return filter_record(record, config)


def process_records(
    records: Iterable[Record],
    config: ComplexityConfig,
    on_mask: Optional[MaskCallback] = None,
) -> Iterator[Union[MeasureRow, Record]]:
    """
    Lazily apply the configured mode to a record stream, preserving order.

    Filtered-out records are skipped; every other record yields exactly one item.
    """
    for record in records:
        result = process_record(record, config, on_mask)
        if result is not None:
            yield result


def _count_input(records: Iterable[Record], config: ComplexityConfig, stats: RunStats) -> Iterator[Record]:
    for record in records:
        stats.input_count += 1
        stats.total_bases += len(record)
        if config.mode is Mode.MEASURE and not record.sequence:
            stats.undefined_count += 1
        yield record


def run_complexity(
    input_path: Union[Path, str],
    output_path: Union[Path, str],
    config: ComplexityConfig,
    input_format: str = "auto",
    regions_path: Optional[Path] = None,
    header: bool = False,
    line_width: int = 0,
    verbose: bool = False,
) -> Result[Dict[str, Any], str]:
    """
    Stream records from input to output under one configuration.

    Main entry point for the measure, mask and filter commands.

    Args:
        input_path: FASTA/FASTQ path (optionally .gz) or ``-`` for stdin
        output_path: Output path or ``-`` for stdout
        config: Validated run configuration
        input_format: ``auto``, ``fasta`` or ``fastq``
        regions_path: Mask mode only; write masked intervals here
        header: Measure mode only; write a TSV header line
        line_width: FASTA line wrap width (0 for none)
        verbose: Enable verbose logging

    Returns:
        Result containing run statistics. A malformed record stops the run
        and is returned as Err; records before it have already been written.
    """
    if verbose:
        logger.setLevel(logging.DEBUG)

    if regions_path is not None and config.mode is not Mode.MASK:
        return Err("A regions file can only be written in mask mode")

    logger.info(f"Processing {input_path} ({config.describe()})")

    stats = RunStats(mode=config.mode.value)

    try:
        with ExitStack() as stack:
            out = stack.enter_context(open_text(output_path, "wt"))
            regions = None
            if regions_path is not None:
                regions = stack.enter_context(open_text(regions_path, "wt"))

            def record_mask(record: Record, mask: frozenset) -> None:
                stats.masked_records += 1
                stats.masked_bases += len(mask)
                if regions is not None:
                    write_mask_regions(record.id, mask_intervals(mask), regions)

            records = _count_input(read_records(input_path, input_format), config, stats)
            processed = process_records(records, config, on_mask=record_mask)

            if config.mode is Mode.MEASURE:
                stats.output_count = write_measure_rows(processed, out, header=header)
            else:
                stats.output_count = write_records(processed, out, line_width=line_width)

    except MalformedRecordError as e:
        logger.error(f"Stopped after {stats.input_count} records: {e}")
        return Err(f"Malformed input: {e}")
    except OSError as e:
        return Err(f"I/O error: {e}")

    stats.removed_count = stats.input_count - stats.output_count
    logger.info(
        f"Processed {stats.input_count} records, wrote {stats.output_count}"
        + (f", removed {stats.removed_count}" if config.mode is Mode.FILTER else "")
    )
    if config.mode is Mode.MASK:
        logger.info(f"Masked {stats.masked_bases} of {stats.total_bases} bases in {stats.masked_records} records")

    result = asdict(stats)
    result["output_file"] = str(output_path)
    return Ok(result)
