"""
Record processing CLI commands.

  measure - Per-record complexity report (TSV)
  mask    - Low-complexity region masking
  filter  - Threshold filtering of whole records
  run     - Mode chosen by --mode, --mask/--filter or a YAML config
"""

import click
from pathlib import Path
from typing import Optional

from kcomplexity.cli.utils import (
    echo_success,
    echo_error,
    echo_info,
    format_number,
    format_percentage,
)
from kcomplexity.core.models import Mode


FORMAT_CHOICE = click.Choice(["auto", "fasta", "fastq"])


def _execute(
    ctx: click.Context,
    input: Path,
    output: Path,
    config_path: Optional[Path],
    input_format: str,
    regions: Optional[Path] = None,
    header: bool = False,
    line_width: int = 0,
    **options,
) -> None:
    """Build the configuration, stream the records and report the outcome."""
    from kcomplexity.config import config_from_options
    from kcomplexity.engine import run_complexity

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    # configuration problems are reported before any input is read
    config_result = config_from_options(config_path, **options)
    if config_result.is_err():
        echo_error(config_result.unwrap_err())
        raise SystemExit(1)
    config = config_result.unwrap()

    if not quiet:
        echo_info(f"Processing {input} ({config.describe()})")

    result = run_complexity(
        input_path=input,
        output_path=output,
        config=config,
        input_format=input_format,
        regions_path=regions,
        header=header,
        line_width=line_width,
        verbose=verbose,
    )

    if result.is_err():
        echo_error(f"Processing failed: {result.unwrap_err()}")
        raise SystemExit(1)

    if quiet:
        return

    stats = result.unwrap()
    if config.mode is Mode.MEASURE:
        echo_success(f"Scored {format_number(stats['input_count'])} records")
        if stats["undefined_count"]:
            echo_info(f"{stats['undefined_count']} empty records have an undefined score (NA)")
    elif config.mode is Mode.MASK:
        echo_success(
            f"Masked {format_number(stats['masked_bases'])} bases "
            f"({format_percentage(stats['masked_bases'], stats['total_bases'])}) "
            f"in {format_number(stats['masked_records'])} of {format_number(stats['input_count'])} records"
        )
    else:
        echo_success(
            f"Kept {format_number(stats['output_count'])} of {format_number(stats['input_count'])} records "
            f"(removed {format_number(stats['removed_count'])})"
        )


def input_option(f):
    return click.option(
        "-i", "--input",
        default="-",
        show_default=True,
        type=click.Path(exists=True, allow_dash=True, dir_okay=False, path_type=Path),
        help="Input FASTA/FASTQ file (.gz accepted), '-' for stdin.",
    )(f)


def output_option(f):
    return click.option(
        "-o", "--output",
        default="-",
        show_default=True,
        type=click.Path(allow_dash=True, dir_okay=False, path_type=Path),
        help="Output file (.gz to compress), '-' for stdout.",
    )(f)


@click.command()
@input_option
@output_option
@click.option(
    "-k", "--kmer",
    type=int,
    help="K-mer length (default: 4).",
)
@click.option(
    "-c", "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file.",
)
@click.option(
    "--format", "input_format",
    type=FORMAT_CHOICE,
    default="auto",
    help="Input format (default: detect from suffix or content).",
)
@click.option(
    "--header/--no_header",
    default=False,
    help="Write a column header line (default: no).",
)
@click.pass_context
def measure(
    ctx: click.Context,
    input: Path,
    output: Path,
    kmer: Optional[int],
    config: Optional[Path],
    input_format: str,
    header: bool,
) -> None:
    """
    Report k-mer complexity for every record.

    Writes one tab-separated line per input record, in input order:

    \b
      id  length  distinct_kmers  score

    The score is distinct k-mers divided by sequence length, printed to
    four decimals. Empty sequences are reported with score NA.

    \b
    Example:
      kcomplexity measure -i reads.fq -o scores.tsv -k 4
    """
    _execute(
        ctx, input, output, config, input_format,
        header=header,
        mode=Mode.MEASURE.value,
        k=kmer,
    )


@click.command()
@input_option
@output_option
@click.option(
    "-k", "--kmer",
    type=int,
    help="K-mer length (default: 4).",
)
@click.option(
    "-w", "--window",
    type=int,
    help="Sliding window length, must be >= k.",
)
@click.option(
    "-t", "--threshold",
    type=float,
    help="Mask windows scoring below this value (0-1).",
)
@click.option(
    "--symbol",
    type=str,
    help="Replacement symbol for masked bases (default: N).",
)
@click.option(
    "--regions",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write masked intervals (id, start, end; 0-based half-open).",
)
@click.option(
    "-c", "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file.",
)
@click.option(
    "--format", "input_format",
    type=FORMAT_CHOICE,
    default="auto",
    help="Input format (default: detect from suffix or content).",
)
@click.option(
    "--line_width",
    default=0,
    type=int,
    help="Wrap FASTA output at this width (default: 0, no wrapping).",
)
@click.pass_context
def mask(
    ctx: click.Context,
    input: Path,
    output: Path,
    kmer: Optional[int],
    window: Optional[int],
    threshold: Optional[float],
    symbol: Optional[str],
    regions: Optional[Path],
    config: Optional[Path],
    input_format: str,
    line_width: int,
) -> None:
    """
    Mask low-complexity regions with N.

    A window slides along each sequence one base at a time. Every window
    whose complexity is below the threshold has all of its bases replaced;
    overlapping windows combine. Sequences shorter than the window are
    scored as a single window. Qualities are passed through unchanged.

    \b
    Example:
      kcomplexity mask -i reads.fq -o masked.fq -w 12 -t 0.55 --regions masked.tsv
    """
    _execute(
        ctx, input, output, config, input_format,
        regions=regions,
        line_width=line_width,
        mode=Mode.MASK.value,
        k=kmer,
        window_size=window,
        threshold=threshold,
        mask_symbol=symbol,
    )


@click.command("filter")
@input_option
@output_option
@click.option(
    "-k", "--kmer",
    type=int,
    help="K-mer length (default: 4).",
)
@click.option(
    "-t", "--threshold",
    type=float,
    help="Keep records scoring at or above this value (0-1).",
)
@click.option(
    "--invert",
    is_flag=True,
    help="Keep records scoring below the threshold instead (for debugging).",
)
@click.option(
    "-c", "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file.",
)
@click.option(
    "--format", "input_format",
    type=FORMAT_CHOICE,
    default="auto",
    help="Input format (default: detect from suffix or content).",
)
@click.option(
    "--line_width",
    default=0,
    type=int,
    help="Wrap FASTA output at this width (default: 0, no wrapping).",
)
@click.pass_context
def filter_cmd(
    ctx: click.Context,
    input: Path,
    output: Path,
    kmer: Optional[int],
    threshold: Optional[float],
    invert: bool,
    config: Optional[Path],
    input_format: str,
    line_width: int,
) -> None:
    """
    Remove low-complexity records.

    Records whose whole-sequence complexity is below the threshold are
    dropped; the rest are written unchanged and in input order. A score
    exactly equal to the threshold is kept. Empty records are kept.

    Headers, bases and qualities are written as read. FASTA sequence lines
    are rejoined into one line unless --line_width is given.

    \b
    Example:
      kcomplexity filter -i reads.fq.gz -o kept.fq -t 0.55
    """
    _execute(
        ctx, input, output, config, input_format,
        line_width=line_width,
        mode=Mode.FILTER.value,
        k=kmer,
        threshold=threshold,
        invert=invert,
    )


@click.command()
@input_option
@output_option
@click.option(
    "-m", "--mode",
    type=click.Choice([m.value for m in Mode]),
    help="Processing mode (default: measure, or from config).",
)
@click.option(
    "--mask", "mask_flag",
    is_flag=True,
    help="Shorthand for --mode mask.",
)
@click.option(
    "--filter", "filter_flag",
    is_flag=True,
    help="Shorthand for --mode filter.",
)
@click.option("-k", "--kmer", type=int, help="K-mer length (default: 4).")
@click.option("-w", "--window", type=int, help="Window length (mask mode).")
@click.option("-t", "--threshold", type=float, help="Complexity threshold (mask/filter modes).")
@click.option("--invert", is_flag=True, help="Keep records below the threshold (filter mode).")
@click.option(
    "-c", "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file.",
)
@click.option(
    "--format", "input_format",
    type=FORMAT_CHOICE,
    default="auto",
    help="Input format (default: detect from suffix or content).",
)
@click.option(
    "--regions",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write masked intervals (mask mode).",
)
@click.option("--header/--no_header", default=False, help="TSV header line (measure mode).")
@click.option("--line_width", default=0, type=int, help="FASTA wrap width (default: 0).")
@click.pass_context
def run(
    ctx: click.Context,
    input: Path,
    output: Path,
    mode: Optional[str],
    mask_flag: bool,
    filter_flag: bool,
    kmer: Optional[int],
    window: Optional[int],
    threshold: Optional[float],
    invert: bool,
    config: Optional[Path],
    input_format: str,
    regions: Optional[Path],
    header: bool,
    line_width: int,
) -> None:
    """
    Process records in the mode given by options or a config file.

    Mask and filter are mutually exclusive; requesting both is rejected
    before any input is read.

    \b
    Example:
      kcomplexity run -c complexity.yaml -i reads.fq -o out.fq
      kcomplexity run --filter -t 0.55 -i reads.fq -o kept.fq
    """
    _execute(
        ctx, input, output, config, input_format,
        regions=regions,
        header=header,
        line_width=line_width,
        mode=mode,
        mask=mask_flag,
        filter=filter_flag,
        k=kmer,
        window_size=window,
        threshold=threshold,
        invert=invert,
    )
