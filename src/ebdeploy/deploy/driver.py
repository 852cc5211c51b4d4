"""Provider driver: create/update/delete/describe/swap against the platform."""

from abc import ABC, abstractmethod
from typing import Any

from ebdeploy.clients.aws import handle_aws_error
from ebdeploy.core.exceptions import EnvironmentNotFound, ValidationError
from ebdeploy.core.logging import StructuredLogger
from ebdeploy.deploy.models import CompletionSignal, Event, HealthStatus, Operation
from ebdeploy.deploy.signals import classify_event

logger = StructuredLogger(__name__)


class ProviderDriver(ABC):
    """Operations the orchestrator needs from the hosting provider."""

    @abstractmethod
    def environment_exists(self, app: str, env: str) -> bool:
        pass

    @abstractmethod
    def create_environment(
        self,
        app: str,
        env: str,
        solution_stack: str | None,
        cname_prefix: str | None,
        version_label: str,
        settings: dict[str, Any],
    ) -> None:
        pass

    @abstractmethod
    def update_environment(
        self,
        app: str,
        env: str,
        version_label: str,
        settings: dict[str, Any],
    ) -> None:
        pass

    @abstractmethod
    def delete_environment(self, app: str, env: str) -> None:
        pass

    @abstractmethod
    def environment_cname(self, app: str, env: str) -> str:
        pass

    @abstractmethod
    def environment_cname_prefix(self, app: str, env: str) -> str:
        pass

    @abstractmethod
    def environment_swap_cname(self, app: str, env_a: str, env_b: str) -> None:
        pass

    @abstractmethod
    def environment_health_state(self, app: str, env: str) -> str:
        pass

    def classify_event(self, operation: Operation, event: Event) -> CompletionSignal:
        """Translate a raw provider event into a completion signal."""
        return classify_event(operation, event.message)


def to_option_settings(settings: dict[str, Any]) -> list[dict[str, str]]:
    """Convert ``{"namespace:OptionName": value}`` into OptionSettings entries.

    The key is split on its last colon, since namespaces contain colons
    themselves (``aws:autoscaling:launchconfiguration``).
    """
    option_settings = []
    for key, value in settings.items():
        namespace, sep, option_name = key.rpartition(":")
        if not sep or not namespace or not option_name:
            raise ValidationError(
                f"Invalid option setting key '{key}', expected 'namespace:OptionName'"
            )
        option_settings.append(
            {"Namespace": namespace, "OptionName": option_name, "Value": str(value)}
        )
    return option_settings


class BeanstalkDriver(ProviderDriver):
    """Provider driver backed by the boto3 Elastic Beanstalk client."""

    def __init__(self, client: Any):
        """Initialize driver.

        Args:
            client: boto3 elasticbeanstalk client
        """
        self._client = client

    @handle_aws_error
    def _describe(self, app: str, env: str) -> dict[str, Any] | None:
        response = self._client.describe_environments(
            ApplicationName=app,
            EnvironmentNames=[env],
            IncludeDeleted=False,
        )
        for environment in response.get("Environments", []):
            if environment.get("Status") != "Terminated":
                return environment
        return None

    def _require(self, app: str, env: str) -> dict[str, Any]:
        environment = self._describe(app, env)
        if environment is None:
            raise EnvironmentNotFound(
                f"Environment {env} not found in application {app}",
                service="elasticbeanstalk",
                operation="DescribeEnvironments",
            )
        return environment

    def environment_exists(self, app: str, env: str) -> bool:
        return self._describe(app, env) is not None

    @handle_aws_error
    def create_environment(
        self,
        app: str,
        env: str,
        solution_stack: str | None,
        cname_prefix: str | None,
        version_label: str,
        settings: dict[str, Any],
    ) -> None:
        params: dict[str, Any] = {
            "ApplicationName": app,
            "EnvironmentName": env,
            "VersionLabel": version_label,
            "OptionSettings": to_option_settings(settings),
        }
        if solution_stack:
            params["SolutionStackName"] = solution_stack
        if cname_prefix:
            params["CNAMEPrefix"] = cname_prefix

        self._client.create_environment(**params)
        logger.info("Requested environment creation", app=app, env=env, version=version_label)

    @handle_aws_error
    def update_environment(
        self,
        app: str,
        env: str,
        version_label: str,
        settings: dict[str, Any],
    ) -> None:
        self._client.update_environment(
            ApplicationName=app,
            EnvironmentName=env,
            VersionLabel=version_label,
            OptionSettings=to_option_settings(settings),
        )
        logger.info("Requested environment update", app=app, env=env, version=version_label)

    @handle_aws_error
    def delete_environment(self, app: str, env: str) -> None:
        self._client.terminate_environment(EnvironmentName=env)
        logger.info("Requested environment termination", app=app, env=env)

    def environment_cname(self, app: str, env: str) -> str:
        return self._require(app, env).get("CNAME", "")

    def environment_cname_prefix(self, app: str, env: str) -> str:
        return self.environment_cname(app, env).split(".", 1)[0]

    @handle_aws_error
    def environment_swap_cname(self, app: str, env_a: str, env_b: str) -> None:
        self._client.swap_environment_cnames(
            SourceEnvironmentName=env_a,
            DestinationEnvironmentName=env_b,
        )
        logger.info("Swapped environment CNAMEs", app=app, source=env_a, destination=env_b)

    def environment_health_state(self, app: str, env: str) -> str:
        return self._require(app, env).get("Health", HealthStatus.GREY.value)
