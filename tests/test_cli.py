"""
Tests for the kcomplexity command line.
"""

import pytest
from click.testing import CliRunner

from kcomplexity import __version__
from kcomplexity.cli.main import cli
from kcomplexity.config import load_config
from kcomplexity.core.seqio import read_records


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args, **kwargs):
    return runner.invoke(cli, ["-q", *map(str, args)], obj={}, **kwargs)


class TestProcessingCommands:
    """Tests for measure, mask, filter and run."""

    def test_measure_stdin_to_stdout(self, runner):
        result = invoke(runner, "measure", "--format", "fasta", input=">r1\nACGTACGT\n>r2\n\n")
        assert result.exit_code == 0
        assert result.output == "r1\t8\t4\t0.5000\nr2\t0\t0\tNA\n"

    def test_measure_sniffs_fastq(self, runner):
        result = invoke(runner, "measure", "-k", "2", input="@r1\nAAAA\n+\nIIII\n")
        assert result.exit_code == 0
        assert result.output == "r1\t4\t1\t0.2500\n"

    def test_undecodable_stdin(self, runner):
        result = invoke(runner, "measure", input=b">r1\nAC\xffGT\n")
        assert result.exit_code == 1
        assert "Malformed" in result.output

    def test_mask_with_regions(self, runner, sample_fastq, temp_dir):
        out = temp_dir / "masked.fq"
        regions = temp_dir / "regions.tsv"
        result = invoke(
            runner, "mask", "-i", sample_fastq, "-o", out,
            "-w", "6", "-t", "0.5", "--regions", regions,
        )
        assert result.exit_code == 0
        records = list(read_records(out))
        assert records[0].sequence == "NNNNNNNGTACG"
        assert records[0].quality == "ABCDEFGHIJKL"
        assert regions.read_text().splitlines()[0] == "read1\t0\t7"

    def test_mask_requires_window(self, runner, sample_fasta, temp_dir):
        out = temp_dir / "masked.fa"
        result = invoke(runner, "mask", "-i", sample_fasta, "-o", out, "-t", "0.5")
        assert result.exit_code == 1
        assert not out.exists()

    def test_filter(self, runner, sample_fasta, temp_dir):
        out = temp_dir / "kept.fa"
        result = invoke(runner, "filter", "-i", sample_fasta, "-o", out, "-t", "0.55")
        assert result.exit_code == 0
        assert [r.id for r in read_records(out)] == ["complex", "empty", "mixed"]

    def test_filter_invert(self, runner, sample_fasta, temp_dir):
        out = temp_dir / "low.fa"
        result = invoke(runner, "filter", "-i", sample_fasta, "-o", out, "-t", "0.55", "--invert")
        assert result.exit_code == 0
        assert [r.id for r in read_records(out)] == ["repeat", "tandem"]

    def test_filter_threshold_out_of_range(self, runner, sample_fasta, temp_dir):
        result = invoke(runner, "filter", "-i", sample_fasta, "-o", temp_dir / "o.fa", "-t", "1.5")
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_mask_and_filter_rejected(self, runner, sample_fasta, temp_dir):
        """Both modes at once is a configuration error; no output is produced."""
        out = temp_dir / "out.fa"
        result = invoke(
            runner, "run", "--mask", "--filter", "-w", "6", "-t", "0.5",
            "-i", sample_fasta, "-o", out,
        )
        assert result.exit_code == 1
        assert "cannot both be requested" in result.output
        assert not out.exists()

    def test_run_from_config(self, runner, sample_fastq, temp_dir):
        config = temp_dir / "complexity.yaml"
        config.write_text("k: 4\nmask:\n  window_size: 6\n  threshold: 0.5\n")
        out = temp_dir / "masked.fq"
        result = invoke(runner, "run", "-c", config, "-i", sample_fastq, "-o", out)
        assert result.exit_code == 0
        assert next(read_records(out)).sequence == "NNNNNNNGTACG"

    def test_command_line_overrides_config(self, runner, sample_fasta, temp_dir):
        config = temp_dir / "complexity.yaml"
        config.write_text("filter:\n  threshold: 0.0\n")
        out = temp_dir / "kept.fa"
        result = invoke(runner, "run", "-c", config, "-t", "0.55", "-i", sample_fasta, "-o", out)
        assert result.exit_code == 0
        assert [r.id for r in read_records(out)] == ["complex", "empty", "mixed"]

    def test_command_prefix(self, runner, sample_fasta, temp_dir):
        out = temp_dir / "scores.tsv"
        result = invoke(runner, "meas", "-i", sample_fasta, "-o", out)
        assert result.exit_code == 0
        assert len(out.read_text().splitlines()) == 5


class TestScoreTableCommands:
    """Tests for zfilter and report."""

    @pytest.fixture
    def score_table(self, temp_dir):
        path = temp_dir / "scores.tsv"
        path.write_text("".join(
            f"r{i}\t100\t{n}\t{n / 100:.4f}\n" for i, n in enumerate([10, 60, 62, 64, 66, 68])
        ))
        return path

    def test_zfilter(self, runner, score_table, temp_dir):
        out = temp_dir / "keep.ids"
        result = invoke(runner, "zfilter", "-i", score_table, "-o", out)
        assert result.exit_code == 0
        assert out.read_text().split() == ["r1", "r2", "r3", "r4", "r5"]

    def test_zfilter_invert(self, runner, score_table, temp_dir):
        out = temp_dir / "low.ids"
        result = invoke(runner, "zfilter", "-i", score_table, "-o", out, "--invert")
        assert result.exit_code == 0
        assert out.read_text() == "r0\n"

    def test_report_without_plot(self, runner, score_table, temp_dir):
        prefix = temp_dir / "sample"
        result = invoke(runner, "report", "-i", score_table, "-o", prefix, "--no_plot")
        assert result.exit_code == 0
        assert (temp_dir / "sample.summary.txt").exists()
        assert not (temp_dir / "sample.score_dist.png").exists()


class TestSetupCommands:
    """Tests for init, info and version."""

    def test_init(self, runner, temp_dir):
        path = temp_dir / "kcomplexity.yaml"
        assert invoke(runner, "init", "-o", path).exit_code == 0
        options = load_config(path).unwrap()
        assert options == {"k": 4, "mask_symbol": "N"}

    def test_init_refuses_overwrite(self, runner, temp_dir):
        path = temp_dir / "kcomplexity.yaml"
        path.write_text("k: 5\n")
        assert invoke(runner, "init", "-o", path).exit_code == 1
        assert path.read_text() == "k: 5\n"
        assert invoke(runner, "init", "-o", path, "--force").exit_code == 0
        assert "k: 4" in path.read_text()

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info(self, runner):
        result = runner.invoke(cli, ["info"], obj={})
        assert result.exit_code == 0
        assert "kcomplexity version" in result.output
