"""Deploy command."""

import click

from ebdeploy.core.context import EbDeployContext, pass_context
from ebdeploy.core.exceptions import EbDeployError
from ebdeploy.deploy.models import DeployRequest


def parse_settings(
    ctx: click.Context,
    param: click.Parameter,
    value: tuple[str, ...],
) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into a mapping."""
    settings: dict[str, str] = {}
    for item in value:
        key, sep, setting = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", ctx=ctx, param=param)
        settings[key] = setting
    return settings


@click.command("deploy")
@click.argument("env_name")
@click.option("-l", "--version-label", required=True, help="Application version label to deploy")
@click.option(
    "-s",
    "--setting",
    "settings",
    multiple=True,
    callback=parse_settings,
    metavar="KEY=VALUE",
    help="Option setting as namespace:OptionName=value (repeatable)",
)
@pass_context
def deploy(
    ctx: EbDeployContext,
    env_name: str,
    version_label: str,
    settings: dict[str, str],
) -> None:
    """Deploy a version to a configured environment.

    \b
    Examples:
        ebdeploy deploy production -l v42
        ebdeploy deploy staging -l v42 -s aws:autoscaling:asg:MinSize=2
    """
    try:
        env_config = ctx.config.get_environment(env_name)
        merged = {**env_config.option_settings, **settings}

        strategy = ctx.strategy(env_name)
        ctx.output.print_info(
            f"Deploying {version_label} to {env_name} using {strategy.strategy_name} strategy"
        )

        environment = strategy.deploy(DeployRequest(version_label=version_label, settings=merged))
        ctx.output.print_success(f"Deployed {version_label} to {environment.env_id}")

    except EbDeployError as e:
        ctx.output.print_error(f"Deployment failed: {e}")
        raise click.Abort()
