"""CLI entrypoint for mutrack."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .actions import Action
from .config import LOG_LEVELS, MutrackConfig, resolve_config
from .errors import ConfigError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _mutation_dir(ctx: click.Context) -> Path:
    """The directory to read, from --dir or config. Checked only when a command needs it."""
    mutation_dir: Path | None = ctx.obj["mutation_dir"]
    if mutation_dir is None:
        raise click.ClickException("Mutation directory not set. Pass --dir or set mutation_dir in mutrack.toml.")
    return mutation_dir.resolve()


def _output_json(ctx: click.Context, flag: bool) -> bool:
    config: MutrackConfig = ctx.obj["config"]
    return flag or config.output == "json"


@click.group()
@click.version_option(__version__, prog_name="mutrack")
@click.option(
    "--dir",
    "-d",
    "mutation_dir",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to a mutation directory (defaults to mutation_dir from mutrack.toml)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (defaults to log_level from config, else WARNING)",
)
@click.pass_context
def cli(ctx: click.Context, mutation_dir: Path | None, log_level: str | None) -> None:
    """mutrack - inspect recorded API mutations.

    Reads mutation directories and reports which creates, updates, applies
    and deletes were issued.
    """
    ctx.ensure_object(dict)
    try:
        config = resolve_config(Path.cwd())
    except ConfigError as e:
        raise click.ClickException(str(e))

    _configure_logging((log_level or config.log_level).upper())

    ctx.obj["config"] = config
    ctx.obj["mutation_dir"] = mutation_dir if mutation_dir is not None else config.mutation_dir


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def actions(ctx: click.Context, output_json: bool) -> None:
    """List recorded actions with request counts."""
    from .commands.inspect_cmd import run_actions

    sys.exit(run_actions(_mutation_dir(ctx), output_json=_output_json(ctx, output_json)))


@cli.command()
@click.option(
    "--action",
    type=click.Choice([a.value for a in Action]),
    default=None,
    help="Only show requests for this action",
)
@click.option("--namespace", "-n", type=str, default=None, help="Only show requests in this namespace")
@click.option(
    "--resource",
    "-r",
    type=str,
    default=None,
    metavar="GROUP/VERSION/RESOURCE",
    help="Only show requests for this resource (e.g. apps/v1/deployments, v1/configmaps)",
)
@click.option("--name", type=str, default=None, help="Only show requests for this object name")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def requests(
    ctx: click.Context,
    action: str | None,
    namespace: str | None,
    resource: str | None,
    name: str | None,
    output_json: bool,
) -> None:
    """List recorded requests, ordered by request number.

    Examples:

        mutrack -d testdata/mutations requests --action Create

        mutrack -d testdata/mutations requests -r v1/configmaps -n openshift-config
    """
    from .commands.inspect_cmd import run_requests

    sys.exit(
        run_requests(
            _mutation_dir(ctx),
            action=action,
            namespace=namespace,
            resource=resource,
            name=name,
            output_json=_output_json(ctx, output_json),
        )
    )


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def summary(ctx: click.Context, output_json: bool) -> None:
    """Show a summary of recorded mutations."""
    from .commands.inspect_cmd import run_summary

    sys.exit(run_summary(_mutation_dir(ctx), output_json=_output_json(ctx, output_json)))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
