"""Command line interface for kcomplexity."""
