"""
Main CLI entry point for kcomplexity.

Defines the root command group and registers all subcommands.
Uses Click framework for argument parsing and help generation.
"""

import logging
from typing import Optional

import click

from kcomplexity import __version__


CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    max_content_width=120,
)


class AliasedGroup(click.Group):
    """
    Click group that accepts unambiguous command prefixes and treats
    underscores and hyphens as equivalent.
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        normalized_name = cmd_name.replace("_", "-")

        rv = click.Group.get_command(self, ctx, normalized_name)
        if rv is not None:
            return rv

        matches = [x for x in self.list_commands(ctx) if x.startswith(normalized_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail(f"Ambiguous command '{cmd_name}': could be {', '.join(sorted(matches))}")
        return None

    def resolve_command(self, ctx: click.Context, args):
        # report the full command name rather than the typed prefix
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


@click.group(cls=AliasedGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "-V", "--version", prog_name="kcomplexity")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output with detailed logging.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress all output except errors.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """
    kcomplexity: k-mer complexity scoring for sequencing reads.

    Scores each sequence by the number of distinct k-mers divided by its
    length, then reports, masks or filters on that score.

    \b
    Processing commands:
      measure  - Report length, distinct k-mers and score per record
      mask     - Replace low-complexity windows with N
      filter   - Drop records scoring below a threshold
      run      - Any of the above, chosen by --mode or a config file

    \b
    Score table tools:
      zfilter  - Select ids by complexity z-score
      report   - Summary statistics and score histogram

    \b
    Quick start:
      kcomplexity measure -i reads.fq -o scores.tsv
      kcomplexity mask -i reads.fq -o masked.fq -w 12 -t 0.55
      kcomplexity filter -i reads.fq.gz -o kept.fq -t 0.55

    For detailed help on any command, use: kcomplexity <command> --help
    """
    ctx.ensure_object(dict)

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose and not quiet:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    elif quiet:
        logging.basicConfig(level=logging.ERROR)


from kcomplexity.cli.process import measure, mask, filter_cmd, run  # noqa: E402
from kcomplexity.cli.scores import zfilter, report, init  # noqa: E402

cli.add_command(measure)
cli.add_command(mask)
cli.add_command(filter_cmd)
cli.add_command(run)
cli.add_command(zfilter)
cli.add_command(report)
cli.add_command(init)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display version and environment information.

    Shows kcomplexity version, Python version, and installed dependencies.
    """
    import sys
    import platform

    click.echo(f"kcomplexity version: {__version__}")
    click.echo(f"Python version: {sys.version}")
    click.echo(f"Platform: {platform.platform()}")

    click.echo("\nInstalled dependencies:")

    dependencies = {
        "biopython": "Bio",
        "click": "click",
        "pyyaml": "yaml",
        "numpy": "numpy",
        "pandas": "pandas",
        "matplotlib": "matplotlib",
        "seaborn": "seaborn",
    }

    for name, import_name in dependencies.items():
        try:
            module = __import__(import_name)
            version = getattr(module, "__version__", "unknown")
            click.echo(f"  {name}: {version}")
        except ImportError:
            click.echo(f"  {name}: not installed")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
