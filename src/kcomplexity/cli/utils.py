"""
CLI utility functions.

Styled status messages for CLI commands. Everything goes to stderr so that
records streamed to stdout are never mixed with status text.
"""

import click


COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "blue",
}


def echo_success(message: str) -> None:
    """Print success message with green checkmark."""
    click.echo(click.style("✓ ", fg=COLORS["success"]) + message, err=True)


def echo_error(message: str) -> None:
    """Print error message with red X."""
    click.echo(click.style("✗ ", fg=COLORS["error"]) + message, err=True)


def echo_warning(message: str) -> None:
    """Print warning message with yellow exclamation."""
    click.echo(click.style("! ", fg=COLORS["warning"]) + message, err=True)


def echo_info(message: str) -> None:
    """Print info message with blue arrow."""
    click.echo(click.style("→ ", fg=COLORS["info"]) + message, err=True)


def format_number(n: int) -> str:
    """Format large numbers with thousand separators."""
    return f"{n:,}"


def format_percentage(part: int, whole: int, decimals: int = 1) -> str:
    """``part`` as a percentage of ``whole`` (0% when whole is 0)."""
    value = 100.0 * part / whole if whole else 0.0
    return f"{value:.{decimals}f}%"
