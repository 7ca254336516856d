"""
Tests for kcomplexity.complexity.window (sliding-window masking).
"""

import random

import pytest
from kcomplexity.complexity.score import calculate_complexity
from kcomplexity.complexity.window import (
    compute_mask,
    apply_mask,
    mask_sequence,
    mask_intervals,
    iter_window_scores,
)
from kcomplexity.core.errors import ConfigurationError


class TestComputeMask:
    """Tests for compute_mask."""

    def test_repeat_prefix_masked(self):
        """Union of the two sub-threshold windows covers positions 0-6."""
        mask = compute_mask("AAAAAACGTACG", k=4, window_size=6, threshold=0.5)
        assert mask == frozenset(range(7))

    def test_masked_output(self):
        """Masked bases become N, the rest are untouched."""
        masked, _ = mask_sequence("AAAAAACGTACG", k=4, window_size=6, threshold=0.5)
        assert masked == "NNNNNNNGTACG"

    def test_complex_sequence_unmasked(self):
        """No window of a non-repetitive sequence falls below threshold."""
        mask = compute_mask("ACGTCCTGATCGAGGTCA", k=4, window_size=8, threshold=0.5)
        assert mask == frozenset()

    def test_empty_sequence(self):
        """Empty sequence yields an empty mask."""
        assert compute_mask("", k=4, window_size=6, threshold=0.9) == frozenset()

    def test_short_sequence_single_window(self):
        """Sequences shorter than the window are scored as one window."""
        assert compute_mask("AAAA", k=4, window_size=6, threshold=0.5) == frozenset(range(4))
        assert compute_mask("ACGTC", k=4, window_size=6, threshold=0.3) == frozenset()

    def test_shorter_than_k(self):
        """A sequence shorter than k scores 0 and is masked at any positive threshold."""
        assert compute_mask("ACG", k=4, window_size=6, threshold=0.01) == frozenset({0, 1, 2})
        assert compute_mask("ACG", k=4, window_size=6, threshold=0.0) == frozenset()

    def test_case_insensitive_scoring(self):
        """Soft-masked input produces the same mask as uppercase input."""
        upper = compute_mask("AAAAAACGTACG", k=4, window_size=6, threshold=0.5)
        lower = compute_mask("aaaaaacgtacg", k=4, window_size=6, threshold=0.5)
        assert upper == lower

    def test_deterministic(self):
        """Identical inputs always give the identical mask."""
        seq = "ACGT" * 5 + "TTTTTTTTTT" + "GATTACA"
        first = compute_mask(seq, 3, 8, 0.5)
        assert all(compute_mask(seq, 3, 8, 0.5) == first for _ in range(3))

    def test_stability_on_remask(self):
        """Re-masking an already masked sequence keeps every masked position."""
        seq = "GATCCTAGAAAAAAAAAAAAGCTAGGCTTACGATCGTGTGTGTGTGTGTCAGT"
        masked, first = mask_sequence(seq, k=4, window_size=10, threshold=0.5)
        _, second = mask_sequence(masked, k=4, window_size=10, threshold=0.5)
        assert first
        assert first <= second

    @pytest.mark.parametrize(
        "k,window,threshold",
        [(0, 6, 0.5), (4, 3, 0.5), (4, 6, -0.1), (4, 6, 1.5)],
    )
    def test_invalid_parameters(self, k, window, threshold):
        """Out-of-range parameters are configuration errors."""
        with pytest.raises(ConfigurationError):
            compute_mask("ACGTACGT", k=k, window_size=window, threshold=threshold)


class TestWindowScores:
    """Tests for incremental window scoring."""

    @pytest.mark.parametrize("seed", range(4))
    @pytest.mark.parametrize("k,window", [(1, 1), (2, 5), (4, 4), (4, 12), (6, 20)])
    def test_matches_independent_scoring(self, seed, k, window):
        """Incremental scores equal scoring each window from scratch."""
        rng = random.Random(seed)
        seq = "".join(rng.choice("AACGTn") for _ in range(80))
        scores = list(iter_window_scores(seq, k, window))

        assert [s for s, _, _ in scores] == list(range(len(seq) - window + 1))
        for start, end, score in scores:
            assert end - start == window
            expected = calculate_complexity(seq[start:end], k).unwrap()
            assert score == pytest.approx(expected)

    def test_no_full_window(self):
        """Nothing is yielded when the sequence is shorter than the window."""
        assert list(iter_window_scores("ACGT", 4, 6)) == []


class TestApplyMask:
    """Tests for mask application helpers."""

    def test_preserves_case_of_unmasked_bases(self):
        """Unmasked bases keep their original case."""
        assert apply_mask("acgtACGT", {0, 1, 6}) == "NNgtACNT"

    def test_custom_symbol(self):
        """Another replacement symbol can be used."""
        assert apply_mask("AAAA", {1, 2}, symbol="X") == "AXXA"

    def test_length_preserved(self):
        """Masking never changes the sequence length."""
        masked, _ = mask_sequence("aaaaaacgtacg", k=4, window_size=6, threshold=0.5)
        assert masked == "NNNNNNNgtacg"
        assert len(masked) == 12

    def test_mask_intervals(self):
        """Positions merge into sorted half-open intervals."""
        assert mask_intervals({8, 0, 1, 2, 7}) == [(0, 3), (7, 9)]
        assert mask_intervals(set()) == []
