"""Command line entry point."""

import sys

import click

from ebdeploy import __version__
from ebdeploy.config import load_config
from ebdeploy.core.context import EbDeployContext
from ebdeploy.core.exceptions import ConfigError, EbDeployError
from ebdeploy.core.output import OutputFormat, error_console

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", prog_name="ebdeploy", message="%(prog)s version %(version)s")
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    help="Output format for command results",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option("-q", "--quiet", is_flag=True, help="Only print results and errors")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    envvar="EBDEPLOY_CONFIG",
    metavar="FILE",
    help="Config file, merged over user and project config",
)
@click.option("-a", "--application", help="Application name, overriding config")
@click.option("--region", help="AWS region, overriding config")
@click.pass_context
def cli(
    ctx: click.Context,
    output_format: str | None,
    verbose: int,
    quiet: bool,
    no_color: bool,
    config_file: str | None,
    application: str | None,
    region: str | None,
) -> None:
    """ebdeploy - zero-downtime deployments to Elastic Beanstalk.

    \b
    Examples:
        ebdeploy deploy production -l v42
        ebdeploy swap blue green
        ebdeploy -o json cname production

    \b
    Configuration is read from ~/.ebdeploy/config.yaml, then the nearest
    ebdeploy.yaml, then --config; EBDEPLOY_* variables override all three.
    """
    try:
        config = load_config(config_file)
    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    if application:
        config.application = application
    if region:
        config.aws.region = region

    ctx.obj = EbDeployContext(
        config=config,
        output_format=OutputFormat(output_format.lower()) if output_format else None,
        verbose=verbose,
        quiet=quiet,
        color=not no_color,
    )


def register_commands() -> None:
    from ebdeploy.commands.deploy import deploy
    from ebdeploy.commands.env import cname, name, swap

    for command in (deploy, swap, cname, name):
        cli.add_command(command)


register_commands()


def main() -> None:
    """Run the CLI, mapping uncaught errors to exit codes."""
    try:
        cli()
    except EbDeployError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
