"""
Score table analysis.

Works on the TSV written by measure mode (``id, length, distinct_kmers,
score``): summary statistics, z-score based filtering of identifiers, and
distribution plots. Rows with an undefined score (``NA``) are ignored.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List

import numpy as np
import pandas as pd

from kcomplexity.core.models import MEASURE_COLUMNS
from kcomplexity.core.result import Result, Ok, Err
from kcomplexity.core.seqio import open_text

logger = logging.getLogger(__name__)

DEFAULT_ZSCORE_THRESHOLD = -1.5


def read_score_table(path: Path | str) -> Result[pd.DataFrame, str]:
    """
    Load a measure-mode score table.

    Accepts files with or without the header line. Two-column tables
    (``id, score``) are also accepted.

    Returns:
        Ok(DataFrame) with at least ``id`` and ``score`` columns
        Err(message) on failure
    """
    try:
        path = Path(path)
        if not path.exists():
            return Err(f"Score table not found: {path}")

        df = pd.read_csv(
            path,
            sep="\t",
            header=None,
            dtype=str,
            keep_default_na=False,
            comment=None,
        )
        if df.empty:
            return Err(f"Score table is empty: {path}")

        if list(df.iloc[0]) in (MEASURE_COLUMNS, ["id", "score"]):
            df = df.iloc[1:].reset_index(drop=True)

        if df.shape[1] == len(MEASURE_COLUMNS):
            df.columns = MEASURE_COLUMNS
        elif df.shape[1] == 2:
            df.columns = ["id", "score"]
        else:
            return Err(f"Expected {len(MEASURE_COLUMNS)} or 2 columns, found {df.shape[1]}")

        # NA (undefined) and any other non-numeric text become NaN
        df["score"] = pd.to_numeric(df["score"], errors="coerce")
        return Ok(df)

    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        return Err(f"Failed to read score table: {e}")


def calculate_summary_statistics(scores: pd.Series) -> Dict[str, float]:
    """
    Summary of the defined scores.

    Returns:
        Dictionary with count, undefined, mean, std, min, max, median.
        ``std`` is the sample standard deviation (n - 1).
    """
    values = scores.dropna().to_numpy(dtype=float)
    summary: Dict[str, float] = {
        "count": int(values.size),
        "undefined": int(scores.isna().sum()),
    }
    if values.size == 0:
        return summary

    summary.update({
        "mean": float(np.mean(values)),
        "std": float(np.std(values, ddof=1)) if values.size > 1 else 0.0,
        "min": float(np.min(values)),
        "max": float(np.max(values)),
        "median": float(np.median(values)),
    })
    return summary


def zscore_filter(
    df: pd.DataFrame,
    threshold: float = DEFAULT_ZSCORE_THRESHOLD,
    invert: bool = False,
) -> Result[List[str], str]:
    """
    Select identifiers by the z-score of their complexity.

    The mean and sample standard deviation are taken over all defined
    scores in the table.

    Args:
        df: Score table from read_score_table
        threshold: Z-score cutoff
        invert: Keep rows strictly below the cutoff instead of strictly above

    Returns:
        Ok(list of ids in table order) or Err if the deviation is undefined
    """
    scores = df["score"]
    defined = scores.dropna()
    if len(defined) < 2:
        return Err("At least two defined scores are needed to compute z-scores")

    mean = defined.mean()
    sd = defined.std(ddof=1)
    if not sd > 0:
        return Err("Scores have zero standard deviation; z-scores are undefined")

    z = (scores - mean) / sd
    keep = z < threshold if invert else z > threshold
    logger.debug(f"z-score filter: mean={mean:.4f} sd={sd:.4f} kept={int(keep.sum())}/{len(df)}")
    return Ok(df.loc[keep, "id"].tolist())


def generate_score_plot(
    scores: pd.Series,
    output_path: Path,
    threshold: Optional[float] = None,
) -> Result[Path, str]:
    """
    Histogram (with KDE) of defined complexity scores.

    Args:
        scores: Score column
        output_path: PNG path
        threshold: Optional cutoff drawn as a vertical line

    Returns:
        Result containing the written plot path
    """
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import seaborn as sns
    except ImportError:
        return Err("Plotting requires matplotlib and seaborn. Install with: pip install kcomplexity[plot]")

    values = scores.dropna().to_numpy(dtype=float)
    if values.size == 0:
        return Err("No defined scores to plot")

    fig, ax = plt.subplots(figsize=(8, 5))
    sns.histplot(values, kde=values.size > 1, ax=ax)

    mean_val = np.mean(values)
    ax.axvline(mean_val, color="red", linestyle="--", label=f"Mean: {mean_val:.3f}")
    if threshold is not None:
        ax.axvline(threshold, color="black", linestyle=":", label=f"Threshold: {threshold:.3f}")

    ax.set_xlabel("K-mer complexity score")
    ax.set_ylabel("Count")
    ax.set_title("Distribution of complexity scores")
    ax.legend()

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    except OSError as e:
        return Err(f"Failed to save plot: {e}")
    finally:
        plt.close(fig)

    logger.info(f"Saved plot: {output_path}")
    return Ok(output_path)


def run_zfilter(
    input_path: Path,
    output_path: Path | str,
    threshold: float = DEFAULT_ZSCORE_THRESHOLD,
    invert: bool = False,
    verbose: bool = False,
) -> Result[Dict[str, Any], str]:
    """
    Write identifiers whose complexity z-score passes the cutoff, one per line.

    Main entry point for the zfilter command.
    """
    if verbose:
        logger.setLevel(logging.DEBUG)

    table_result = read_score_table(input_path)
    if table_result.is_err():
        return Err(table_result.unwrap_err())
    df = table_result.unwrap()

    ids_result = zscore_filter(df, threshold=threshold, invert=invert)
    if ids_result.is_err():
        return Err(ids_result.unwrap_err())
    ids = ids_result.unwrap()

    try:
        with open_text(output_path, "wt") as handle:
            for record_id in ids:
                handle.write(f"{record_id}\n")
    except OSError as e:
        return Err(f"Failed to write identifiers: {e}")

    logger.info(f"Kept {len(ids)} of {len(df)} identifiers (z {'<' if invert else '>'} {threshold})")

    return Ok({
        "input_count": len(df),
        "output_count": len(ids),
        "threshold": threshold,
        "invert": invert,
    })


def run_report(
    input_path: Path,
    output_prefix: Path,
    generate_plots: bool = True,
    threshold: Optional[float] = None,
    verbose: bool = False,
) -> Result[Dict[str, Any], str]:
    """
    Summarize a score table.

    Writes ``{prefix}.summary.txt`` and, when requested,
    ``{prefix}.score_dist.png``.
    """
    if verbose:
        logger.setLevel(logging.DEBUG)

    table_result = read_score_table(input_path)
    if table_result.is_err():
        return Err(table_result.unwrap_err())
    df = table_result.unwrap()

    summary = calculate_summary_statistics(df["score"])

    summary_path = Path(str(output_prefix) + ".summary.txt")
    try:
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        with open(summary_path, "w") as f:
            f.write("kcomplexity score summary\n")
            f.write("=" * 40 + "\n\n")
            f.write(f"Input: {input_path}\n")
            f.write(f"Records: {len(df)}\n")
            f.write(f"Defined scores: {summary['count']}\n")
            f.write(f"Undefined scores: {summary['undefined']}\n\n")
            if summary["count"]:
                f.write(f"  Mean:   {summary['mean']:.4f}\n")
                f.write(f"  Std:    {summary['std']:.4f}\n")
                f.write(f"  Min:    {summary['min']:.4f}\n")
                f.write(f"  Max:    {summary['max']:.4f}\n")
                f.write(f"  Median: {summary['median']:.4f}\n")
            if threshold is not None and summary["count"]:
                below = int((df["score"] < threshold).sum())
                f.write(f"\nBelow threshold {threshold}: {below}\n")
    except OSError as e:
        return Err(f"Failed to write summary: {e}")

    logger.info(f"Saved summary to {summary_path}")

    plot_files = []
    if generate_plots:
        plot_result = generate_score_plot(
            df["score"],
            Path(str(output_prefix) + ".score_dist.png"),
            threshold=threshold,
        )
        if plot_result.is_ok():
            plot_files.append(str(plot_result.unwrap()))
        else:
            logger.warning(plot_result.unwrap_err())

    return Ok({
        "record_count": len(df),
        "summary": summary,
        "summary_file": str(summary_path),
        "plot_files": plot_files,
    })
