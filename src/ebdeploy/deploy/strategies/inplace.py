"""In-place update strategy."""

from ebdeploy.deploy.environment import Environment
from ebdeploy.deploy.models import DeployRequest
from ebdeploy.deploy.strategies.base import DeploymentStrategy


class InplaceUpdateStrategy(DeploymentStrategy):
    """Deploy straight into the single named environment."""

    @property
    def strategy_name(self) -> str:
        return "inplace-update"

    def deploy(self, request: DeployRequest) -> Environment:
        environment = self.environment(self._env_name)
        environment.deploy(request)
        return environment
