"""
Tests for kcomplexity.complexity.report (score table analysis).
"""

import pytest
import pandas as pd

from kcomplexity.complexity.report import (
    calculate_summary_statistics,
    read_score_table,
    run_report,
    run_zfilter,
    zscore_filter,
)


SCORES = {"a": 0.1, "b": 0.6, "c": 0.62, "d": 0.64, "e": 0.66, "f": 0.68}


@pytest.fixture
def score_table(temp_dir):
    """Measure-mode table with one outlier and one undefined score."""
    path = temp_dir / "scores.tsv"
    lines = ["id\tlength\tdistinct_kmers\tscore"]
    for record_id, score in SCORES.items():
        lines.append(f"{record_id}\t100\t{int(score * 100)}\t{score:.4f}")
    lines.append("g\t0\t0\tNA")
    path.write_text("\n".join(lines) + "\n")
    return path


class TestReadScoreTable:
    """Tests for loading score tables."""

    def test_with_header(self, score_table):
        df = read_score_table(score_table).unwrap()
        assert list(df.columns) == ["id", "length", "distinct_kmers", "score"]
        assert len(df) == 7
        assert df["score"].iloc[0] == pytest.approx(0.1)
        assert pd.isna(df["score"].iloc[-1])

    def test_without_header(self, temp_dir):
        path = temp_dir / "noheader.tsv"
        path.write_text("r1\t10\t5\t0.5000\nr2\t10\t2\t0.2000\n")
        df = read_score_table(path).unwrap()
        assert df["id"].tolist() == ["r1", "r2"]

    def test_two_columns(self, temp_dir):
        path = temp_dir / "two.tsv"
        path.write_text("r1\t0.5\nNA\t0.25\n")
        df = read_score_table(path).unwrap()
        assert df["id"].tolist() == ["r1", "NA"]
        assert df["score"].tolist() == [0.5, 0.25]

    def test_missing_file(self, temp_dir):
        assert read_score_table(temp_dir / "missing.tsv").is_err()

    def test_wrong_column_count(self, temp_dir):
        path = temp_dir / "bad.tsv"
        path.write_text("r1\t1\t0.5\n")
        result = read_score_table(path)
        assert result.is_err()
        assert "columns" in result.unwrap_err()


class TestSummaryStatistics:
    """Tests for summary statistics."""

    def test_summary(self):
        summary = calculate_summary_statistics(pd.Series([0.2, 0.4, 0.6, None]))
        assert summary["count"] == 3
        assert summary["undefined"] == 1
        assert summary["mean"] == pytest.approx(0.4)
        assert summary["std"] == pytest.approx(0.2)
        assert summary["median"] == pytest.approx(0.4)
        assert summary["min"] == pytest.approx(0.2)
        assert summary["max"] == pytest.approx(0.6)

    def test_all_undefined(self):
        summary = calculate_summary_statistics(pd.Series([None, None], dtype=float))
        assert summary == {"count": 0, "undefined": 2}


class TestZscoreFilter:
    """Tests for z-score selection."""

    def test_outlier_removed(self, score_table):
        df = read_score_table(score_table).unwrap()
        ids = zscore_filter(df, threshold=-1.5).unwrap()
        assert ids == ["b", "c", "d", "e", "f"]

    def test_invert_keeps_outlier(self, score_table):
        df = read_score_table(score_table).unwrap()
        assert zscore_filter(df, threshold=-1.5, invert=True).unwrap() == ["a"]

    def test_zero_deviation(self):
        df = pd.DataFrame({"id": ["x", "y"], "score": [0.5, 0.5]})
        assert zscore_filter(df).is_err()

    def test_too_few_scores(self):
        df = pd.DataFrame({"id": ["x"], "score": [0.5]})
        assert zscore_filter(df).is_err()


class TestRunners:
    """Tests for the zfilter and report entry points."""

    def test_run_zfilter(self, score_table, temp_dir):
        out = temp_dir / "keep.ids"
        result = run_zfilter(score_table, out)
        assert result.is_ok()
        assert out.read_text() == "b\nc\nd\ne\nf\n"
        stats = result.unwrap()
        assert stats["input_count"] == 7
        assert stats["output_count"] == 5

    def test_run_zfilter_bad_table(self, temp_dir):
        path = temp_dir / "flat.tsv"
        path.write_text("r1\t0.5\nr2\t0.5\n")
        assert run_zfilter(path, temp_dir / "out.ids").is_err()

    def test_run_report(self, score_table, temp_dir):
        prefix = temp_dir / "report" / "sample"
        result = run_report(score_table, prefix, generate_plots=False, threshold=0.5)
        assert result.is_ok()

        stats = result.unwrap()
        assert stats["record_count"] == 7
        assert stats["plot_files"] == []

        text = (temp_dir / "report" / "sample.summary.txt").read_text()
        assert "Defined scores: 6" in text
        assert "Undefined scores: 1" in text
        assert "Mean:   0.5500" in text
        assert "Below threshold 0.5: 1" in text

    def test_run_zfilter_unwritable_output(self, score_table, temp_dir):
        """Output errors are returned as Err."""
        blocked = temp_dir / "blocked"
        blocked.mkdir()
        result = run_zfilter(score_table, blocked)
        assert result.is_err()
        assert "Failed to write" in result.unwrap_err()

    def test_run_report_unwritable_summary(self, score_table, temp_dir):
        (temp_dir / "sample.summary.txt").mkdir()
        result = run_report(score_table, temp_dir / "sample", generate_plots=False)
        assert result.is_err()
        assert "Failed to write summary" in result.unwrap_err()
