"""
Score table and setup CLI commands.

  zfilter - Select identifiers by complexity z-score
  report  - Summary statistics and distribution plot
  init    - Write a configuration template
"""

import click
from pathlib import Path
from typing import Optional

from kcomplexity.cli.utils import (
    echo_success,
    echo_error,
    echo_info,
    echo_warning,
)


@click.command()
@click.option(
    "-i", "--input",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Score table written by 'kcomplexity measure'.",
)
@click.option(
    "-o", "--output",
    default="-",
    show_default=True,
    type=click.Path(allow_dash=True, dir_okay=False, path_type=Path),
    help="Output file of identifiers, '-' for stdout.",
)
@click.option(
    "-t", "--threshold",
    default=-1.5,
    type=float,
    help="Minimum z-score to keep (default: -1.5).",
)
@click.option(
    "--invert",
    is_flag=True,
    help="Keep identifiers below the z-score threshold (for debugging).",
)
@click.pass_context
def zfilter(
    ctx: click.Context,
    input: Path,
    output: Path,
    threshold: float,
    invert: bool,
) -> None:
    """
    Select identifiers by complexity z-score.

    Standardizes the scores in a measure table (mean and sample standard
    deviation over all defined scores) and writes the ids whose z-score is
    above the threshold, one per line, in table order.

    \b
    Example:
      kcomplexity measure -i reads.fq -o scores.tsv
      kcomplexity zfilter -i scores.tsv -o keep.ids -t -1.5
    """
    from kcomplexity.complexity.report import run_zfilter

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    result = run_zfilter(
        input_path=input,
        output_path=output,
        threshold=threshold,
        invert=invert,
        verbose=verbose,
    )

    if result.is_err():
        echo_error(f"Z-score filtering failed: {result.unwrap_err()}")
        raise SystemExit(1)

    if not quiet:
        stats = result.unwrap()
        echo_success(f"Kept {stats['output_count']} of {stats['input_count']} identifiers")


@click.command()
@click.option(
    "-i", "--input",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Score table written by 'kcomplexity measure'.",
)
@click.option(
    "-o", "--output",
    required=True,
    type=click.Path(path_type=Path),
    help="Output prefix.",
)
@click.option(
    "-t", "--threshold",
    type=float,
    help="Threshold to mark on the plot and count records below.",
)
@click.option(
    "--plot/--no_plot",
    default=True,
    help="Generate score distribution plot (default: yes).",
)
@click.pass_context
def report(
    ctx: click.Context,
    input: Path,
    output: Path,
    threshold: Optional[float],
    plot: bool,
) -> None:
    """
    Summarize a score table.

    \b
    Output files:
      {output}.summary.txt     - Count, mean, std, min, max, median
      {output}.score_dist.png  - Histogram with KDE (with --plot)
    """
    from kcomplexity.complexity.report import run_report

    verbose = ctx.obj.get("verbose", False)

    result = run_report(
        input_path=input,
        output_prefix=output,
        generate_plots=plot,
        threshold=threshold,
        verbose=verbose,
    )

    if result.is_err():
        echo_error(f"Report failed: {result.unwrap_err()}")
        raise SystemExit(1)

    stats = result.unwrap()
    summary = stats["summary"]
    echo_success(f"Summarized {stats['record_count']} records")
    if summary["count"]:
        echo_info(f"Mean score: {summary['mean']:.4f} (median {summary['median']:.4f})")
    echo_info(f"Summary: {stats['summary_file']}")
    if plot and not stats["plot_files"]:
        echo_warning("No plot was generated")


@click.command()
@click.option(
    "-o", "--output",
    default="kcomplexity.yaml",
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path of the configuration file to create.",
)
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite an existing file.",
)
def init(output: Path, force: bool) -> None:
    """
    Write a YAML configuration template.

    \b
    Example:
      kcomplexity init -o complexity.yaml
      kcomplexity run -c complexity.yaml -i reads.fq -o out.fq
    """
    from kcomplexity.config import write_config_template

    result = write_config_template(output, overwrite=force)
    if result.is_err():
        echo_error(result.unwrap_err())
        echo_info("Use --force to overwrite")
        raise SystemExit(1)

    echo_success(f"Configuration template written to {output}")
