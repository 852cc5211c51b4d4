"""Base deployment strategy."""

from abc import ABC, abstractmethod
from typing import Any

from ebdeploy.deploy.driver import ProviderDriver
from ebdeploy.deploy.environment import Environment
from ebdeploy.deploy.events import EventPoller
from ebdeploy.deploy.models import CreationOptions, DeployRequest


class DeploymentStrategy(ABC):
    """Abstract base class for deployment strategies."""

    def __init__(
        self,
        app: str,
        env_name: str,
        driver: ProviderDriver,
        poller: EventPoller,
        options: CreationOptions | None = None,
        **environment_kwargs: Any,
    ):
        """Initialize strategy.

        Args:
            app: Application name
            env_name: Human-chosen environment name
            driver: Provider driver
            poller: Event poller
            options: Creation options
            **environment_kwargs: Passed through to every Environment
                (clock, logger, smoke_test, health_timeout, health_interval)
        """
        self._app = app
        self._env_name = env_name
        self._driver = driver
        self._poller = poller
        self._options = options or CreationOptions()
        self._environment_kwargs = environment_kwargs

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Get strategy name."""
        pass

    @abstractmethod
    def deploy(self, request: DeployRequest) -> Environment:
        """Deploy and return the environment now serving traffic."""
        pass

    def environment(self, name: str, options: CreationOptions | None = None) -> Environment:
        """Build an Environment sharing this strategy's collaborators."""
        return Environment(
            self._app,
            name,
            self._driver,
            self._poller,
            options or self._options,
            **self._environment_kwargs,
        )
