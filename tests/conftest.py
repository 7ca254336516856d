"""
Test configuration and fixtures.
"""

import pytest
from pathlib import Path
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir)


@pytest.fixture
def sample_fasta(temp_dir):
    """FASTA file with a complex, a repetitive, a soft-masked and an empty record."""
    fasta_path = temp_dir / "reads.fa"
    fasta_path.write_text(
        ">complex sample=1\n"
        "ACGTCCTGATAAAAAAAAAA\n"
        ">repeat\n"
        "AAAAAAAAAAAA\n"
        ">tandem\n"
        "acgtacgtacgt\n"
        ">empty\n"
        ">mixed\n"
        "AAAAAACGTACG\n"
    )
    return fasta_path


@pytest.fixture
def sample_fastq(temp_dir):
    """FASTQ file with qualities that must pass through untouched."""
    fastq_path = temp_dir / "reads.fq"
    fastq_path.write_text(
        "@read1 lane=1\n"
        "AAAAAACGTACG\n"
        "+\n"
        "ABCDEFGHIJKL\n"
        "@read2\n"
        "ACGTCCTGATAAAAAAAAAA\n"
        "+\n"
        "IIIIIIIIIIIIIIIIIIII\n"
    )
    return fastq_path


@pytest.fixture
def sample_sequences():
    """Sample sequences with known 4-mer complexity."""
    return {
        "tandem": "ACGTACGTACGT",        # 4 distinct / 12
        "homopolymer": "AAAAAAAAAAAA",   # 1 distinct / 12
        "boundary": "ACGTCCTGATAAAAAAAAAA",  # 11 distinct / 20 = 0.55
        "short": "ACG",                  # shorter than k
        "empty": "",
    }
