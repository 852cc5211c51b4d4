"""Click context object for sharing state across commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from ebdeploy.config import EbDeployConfig, get_default_config
from ebdeploy.core.clock import SystemClock
from ebdeploy.core.logging import LogLevel, setup_logging
from ebdeploy.core.output import OutputFormat, OutputFormatter

if TYPE_CHECKING:
    from ebdeploy.clients.aws import AWSClientFactory
    from ebdeploy.deploy.driver import ProviderDriver
    from ebdeploy.deploy.environment import Environment
    from ebdeploy.deploy.events import EventPoller
    from ebdeploy.deploy.models import CreationOptions
    from ebdeploy.deploy.strategies import DeploymentStrategy


def resolve_log_level(verbose: int, quiet: bool, configured: LogLevel) -> LogLevel:
    """Command line flags win over the configured verbosity."""
    if verbose >= 2:
        return LogLevel.DEBUG
    if verbose == 1:
        return LogLevel.INFO
    if quiet:
        return LogLevel.ERROR
    return configured


class EbDeployContext:
    """Per-invocation state handed to every command via click.

    Holds the merged configuration and output settings, and builds the
    provider driver, event poller, environments and strategies on demand so
    commands that never talk to AWS never create a boto3 session.
    """

    def __init__(
        self,
        config: EbDeployConfig | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        quiet: bool = False,
        color: bool = True,
    ):
        self._config = config or get_default_config()
        settings = self._config.global_settings
        color = color and settings.color != "never"

        setup_logging(resolve_log_level(verbose, quiet, settings.verbosity), rich_output=color)
        self._output = OutputFormatter(
            format=output_format or settings.output_format,
            color=color,
            quiet=quiet,
        )

        self._clock = SystemClock()
        self._aws_factory: AWSClientFactory | None = None
        self._driver: ProviderDriver | None = None
        self._poller: EventPoller | None = None

    @property
    def config(self) -> EbDeployConfig:
        return self._config

    @property
    def output(self) -> OutputFormatter:
        return self._output

    @property
    def aws(self) -> AWSClientFactory:
        """Get or create AWS client factory."""
        if self._aws_factory is None:
            from ebdeploy.clients.aws import AWSClientFactory

            self._aws_factory = AWSClientFactory(self._config.aws)
        return self._aws_factory

    @property
    def driver(self) -> ProviderDriver:
        """Get or create the Elastic Beanstalk driver."""
        if self._driver is None:
            from ebdeploy.deploy.driver import BeanstalkDriver

            self._driver = BeanstalkDriver(self.aws.elasticbeanstalk)
        return self._driver

    @property
    def event_poller(self) -> EventPoller:
        """Get or create the Elastic Beanstalk event poller."""
        if self._poller is None:
            from ebdeploy.deploy.events import BeanstalkEventPoller

            settings = self._config.global_settings
            self._poller = BeanstalkEventPoller(
                self.aws.elasticbeanstalk,
                clock=self._clock,
                interval=settings.event_poll_interval,
                timeout=settings.event_timeout,
            )
        return self._poller

    def creation_options(self, env_name: str) -> CreationOptions:
        """Build creation options for a configured environment."""
        from ebdeploy.deploy.models import CreationOptions

        env_config = self._config.get_environment(env_name)
        return CreationOptions(
            solution_stack=env_config.solution_stack,
            cname_prefix=env_config.cname_prefix,
            phoenix_mode=env_config.phoenix_mode,
            smoke_test=env_config.smoke_test,
        )

    def _environment_kwargs(self) -> dict[str, Any]:
        settings = self._config.global_settings
        return {
            "clock": self._clock,
            "health_timeout": settings.health_timeout,
            "health_interval": settings.health_interval,
        }

    def environment(self, env_name: str) -> Environment:
        """Build an orchestrator for a configured environment."""
        from ebdeploy.deploy.environment import Environment

        return Environment(
            self._config.get_application(),
            env_name,
            self.driver,
            self.event_poller,
            self.creation_options(env_name),
            **self._environment_kwargs(),
        )

    def strategy(self, env_name: str) -> DeploymentStrategy:
        """Build the configured deployment strategy for an environment."""
        from ebdeploy.deploy.strategies import create_strategy

        return create_strategy(
            self._config.get_environment(env_name).strategy,
            self._config.get_application(),
            env_name,
            self.driver,
            self.event_poller,
            self.creation_options(env_name),
            **self._environment_kwargs(),
        )

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask for user confirmation."""
        if not self._config.global_settings.confirm_destructive:
            return True
        return self._output.confirm(message, default)


# Click decorator for passing context
pass_context = click.make_pass_decorator(EbDeployContext, ensure=True)
