"""
FASTA/FASTQ record streaming.

Reads records one at a time with Biopython's low-level parsers so that
headers and quality strings pass through unchanged, and writes records and
measure-mode rows back out. Handles plain and gzip-compressed files and
``-`` for stdin/stdout.
"""

from __future__ import annotations
import gzip
import io
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterable, Iterator, Literal, Optional, TextIO

from Bio.SeqIO.FastaIO import SimpleFastaParser
from Bio.SeqIO.QualityIO import FastqGeneralIterator

from kcomplexity.core.errors import MalformedRecordError
from kcomplexity.core.models import MeasureRow, MEASURE_COLUMNS, Record

logger = logging.getLogger(__name__)

SeqFormat = Literal["fasta", "fastq"]

STDIO = "-"
FASTQ_SUFFIXES = {".fq", ".fastq"}
FASTA_SUFFIXES = {".fa", ".fasta", ".fna", ".fas", ".ffn", ".faa", ".seq"}


def _base_suffix(path: Path) -> str:
    """Suffix of ``path`` ignoring a trailing ``.gz``."""
    if path.suffix.lower() == ".gz":
        return Path(path.stem).suffix.lower()
    return path.suffix.lower()


def format_from_suffix(path: Path | str) -> Optional[SeqFormat]:
    """Guess the sequence format from a file name, or None if unknown."""
    if str(path) == STDIO:
        return None
    suffix = _base_suffix(Path(path))
    if suffix in FASTQ_SUFFIXES:
        return "fastq"
    if suffix in FASTA_SUFFIXES:
        return "fasta"
    return None


def sniff_format(handle: TextIO) -> tuple[SeqFormat, TextIO]:
    """
    Detect FASTA vs FASTQ from the first non-blank character.

    The handle may not be seekable (stdin), so the first non-blank line is
    re-prepended and a new handle is returned alongside the format. Leading
    blank lines are dropped.
    """
    consumed = []
    first = ""
    for line in handle:
        if line.strip():
            consumed.append(line)
            first = line.lstrip()[0]
            break

    fmt: SeqFormat = "fastq" if first == "@" else "fasta"
    rest = io.StringIO("".join(consumed))
    return fmt, _ChainedText(rest, handle)


class _ChainedText(io.TextIOBase):
    """Read-only text stream that drains ``head`` before ``tail``."""

    def __init__(self, head: TextIO, tail: TextIO) -> None:
        self._streams = [head, tail]

    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> str:
        if size is None or size < 0:
            text = "".join(stream.read() for stream in self._streams)
            self._streams = []
            return text
        chunks = []
        while size > 0 and self._streams:
            chunk = self._streams[0].read(size)
            if not chunk:
                self._streams.pop(0)
                continue
            chunks.append(chunk)
            size -= len(chunk)
        return "".join(chunks)

    def readline(self, size: int = -1) -> str:
        while self._streams:
            line = self._streams[0].readline()
            if line:
                return line
            self._streams.pop(0)
        return ""

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self.readline()
        if not line:
            raise StopIteration
        return line


@contextmanager
def open_text(path: Path | str, mode: str = "rt") -> Iterator[IO[str]]:
    """Open a plain or gzip text file; ``-`` maps to stdin/stdout."""
    if str(path) == STDIO:
        yield sys.stdin if "r" in mode else sys.stdout
        return

    path = Path(path)
    if "w" in mode:
        path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".gz":
        handle = gzip.open(path, mode)
    else:
        handle = open(path, mode)
    try:
        yield handle
    finally:
        handle.close()


def _split_header(header: str) -> str:
    parts = header.split(None, 1)
    return parts[0] if parts else ""


def parse_records(handle: TextIO, fmt: SeqFormat) -> Iterator[Record]:
    """
    Stream records from an open text handle.

    Raises:
        MalformedRecordError: on a truncated or inconsistent record. Records
            yielded before the failure are unaffected; nothing after it is read.
    """
    index = 0
    try:
        if fmt == "fastq":
            for title, seq, qual in FastqGeneralIterator(handle):
                index += 1
                yield Record(id=_split_header(title), sequence=seq, description=title, quality=qual)
        else:
            for title, seq in SimpleFastaParser(handle):
                index += 1
                yield Record(id=_split_header(title), sequence=seq, description=title)
    except ValueError as e:
        if isinstance(e, MalformedRecordError):
            raise
        raise MalformedRecordError(str(e), record_index=index + 1) from e


def read_records(
    path: Path | str,
    input_format: str = "auto",
) -> Iterator[Record]:
    """
    Stream records from a FASTA/FASTQ file (optionally gzipped) or stdin.

    Args:
        path: Input path or ``-`` for stdin
        input_format: ``auto``, ``fasta`` or ``fastq``

    Yields:
        Record objects in file order
    """
    with open_text(path, "rt") as handle:
        if input_format == "auto":
            fmt = format_from_suffix(path)
            if fmt is None:
                try:
                    fmt, handle = sniff_format(handle)
                except ValueError as e:
                    # undecodable text in the first record
                    raise MalformedRecordError(str(e), record_index=1) from e
        else:
            fmt = input_format  # type: ignore[assignment]

        logger.debug(f"Reading {fmt} records from {path}")
        yield from parse_records(handle, fmt)


def format_record(record: Record, line_width: int = 0) -> str:
    """
    Render a record as FASTQ (if it has qualities) or FASTA text.

    Args:
        record: Record to render
        line_width: FASTA line wrap width (0 for a single sequence line)
    """
    if record.is_fastq:
        return f"@{record.header}\n{record.sequence}\n+\n{record.quality}\n"

    if line_width > 0 and record.sequence:
        seq = record.sequence
        body = "\n".join(seq[i:i + line_width] for i in range(0, len(seq), line_width))
    else:
        body = record.sequence
    return f">{record.header}\n{body}\n"


def write_records(
    records: Iterable[Record],
    handle: TextIO,
    line_width: int = 0,
) -> int:
    """Write records to an open handle, returning how many were written."""
    written = 0
    for record in records:
        handle.write(format_record(record, line_width))
        written += 1
    return written


def write_measure_rows(
    rows: Iterable[MeasureRow],
    handle: TextIO,
    header: bool = False,
) -> int:
    """Write measure-mode rows as TSV, returning how many rows were written."""
    if header:
        handle.write("\t".join(MEASURE_COLUMNS) + "\n")
    written = 0
    for row in rows:
        handle.write(row.to_tsv_line() + "\n")
        written += 1
    return written


def write_mask_regions(
    record_id: str,
    intervals: Iterable[tuple[int, int]],
    handle: TextIO,
) -> int:
    """
    Write masked intervals of one record as ``id<TAB>start<TAB>end``.

    Coordinates are 0-based, half-open (BED-like).
    """
    written = 0
    for start, end in intervals:
        handle.write(f"{record_id}\t{start}\t{end}\n")
        written += 1
    return written
