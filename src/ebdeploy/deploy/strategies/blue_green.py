"""Blue-Green deployment strategy."""

from ebdeploy.core.exceptions import ValidationError
from ebdeploy.core.logging import StructuredLogger
from ebdeploy.deploy.environment import Environment
from ebdeploy.deploy.models import DeployRequest
from ebdeploy.deploy.strategies.base import DeploymentStrategy

logger = StructuredLogger(__name__)

SUFFIXES = ("a", "b")
INACTIVE_SUFFIX = "-inactive"


class BlueGreenStrategy(DeploymentStrategy):
    """Deploy to the idle one of two environments, then swap CNAMEs."""

    @property
    def strategy_name(self) -> str:
        return "blue-green"

    def _names(self) -> tuple[str, str]:
        return f"{self._env_name}-{SUFFIXES[0]}", f"{self._env_name}-{SUFFIXES[1]}"

    def deploy(self, request: DeployRequest) -> Environment:
        prefix = self._options.cname_prefix
        if not prefix:
            raise ValidationError("Blue-green deployment requires a cname_prefix")

        names = self._names()
        existing = [
            env for env in (self.environment(name) for name in names)
            if self._driver.environment_exists(env.app, env.env_id)
        ]

        if not existing:
            first = self.environment(names[0])
            logger.info("No environments yet, deploying first one", env=first.env_id)
            first.deploy(request)
            return first

        active = next((env for env in existing if env.cname_prefix() == prefix), existing[0])
        inactive_name = names[1] if active.name == names[0] else names[0]
        inactive = self.environment(
            inactive_name,
            self._options.with_cname_prefix(f"{prefix}{INACTIVE_SUFFIX}"),
        )

        logger.info("Deploying to inactive environment", active=active.env_id, inactive=inactive.env_id)
        inactive.deploy(request)

        active.swap_cname_with(inactive)
        logger.info("Traffic now routed to inactive environment", env=inactive.env_id, cname_prefix=prefix)
        return inactive
