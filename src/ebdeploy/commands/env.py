"""Environment inspection and CNAME swap commands."""

import click

from ebdeploy.core.context import EbDeployContext, pass_context
from ebdeploy.core.exceptions import EbDeployError
from ebdeploy.deploy.naming import derive_id


@click.command("swap")
@click.argument("env_name")
@click.argument("other_name")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation")
@pass_context
def swap(ctx: EbDeployContext, env_name: str, other_name: str, yes: bool) -> None:
    """Swap CNAMEs between two environments.

    \b
    Examples:
        ebdeploy swap blue green -y
    """
    try:
        environment = ctx.environment(env_name)
        other = ctx.environment(other_name)

        if not yes and not ctx.confirm(f"Swap CNAMEs of {environment.env_id} and {other.env_id}?"):
            ctx.output.print_info("Cancelled")
            return

        environment.swap_cname_with(other)
        ctx.output.print_success(f"Swapped CNAMEs of {environment.env_id} and {other.env_id}")

    except EbDeployError as e:
        ctx.output.print_error(f"Swap failed: {e}")
        raise click.Abort()


@click.command("cname")
@click.argument("env_name")
@pass_context
def cname(ctx: EbDeployContext, env_name: str) -> None:
    """Show the current CNAME prefix of an environment."""
    try:
        environment = ctx.environment(env_name)
        ctx.output.print_data(
            {"environment": environment.env_id, "cname_prefix": environment.cname_prefix()},
            title="CNAME",
        )

    except EbDeployError as e:
        ctx.output.print_error(f"Failed to get CNAME: {e}")
        raise click.Abort()


@click.command("name")
@click.argument("env_name")
@pass_context
def name(ctx: EbDeployContext, env_name: str) -> None:
    """Show the provider environment id derived from a name."""
    try:
        app = ctx.config.get_application()
        ctx.output.print_data(
            {"application": app, "name": env_name, "environment": derive_id(app, env_name)},
            title="Environment",
        )

    except EbDeployError as e:
        ctx.output.print_error(str(e))
        raise click.Abort()
