"""boto3 session and client handling."""

from functools import wraps
from typing import Any, Callable, TypeVar

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ebdeploy.config import AWSConfig
from ebdeploy.core.exceptions import AWSError
from ebdeploy.core.logging import StructuredLogger

logger = StructuredLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_REGION = "us-east-1"

# Beanstalk throttles DescribeEvents aggressively while environments launch
CLIENT_CONFIG = BotoConfig(
    retries={"max_attempts": 5, "mode": "adaptive"},
    connect_timeout=10,
    read_timeout=30,
)


class AWSClientFactory:
    """Builds boto3 clients from one lazily created session."""

    def __init__(self, config: AWSConfig):
        self._config = config
        self._session: boto3.Session | None = None

    @property
    def session(self) -> boto3.Session:
        if self._session is None:
            credentials = {}
            if self._config.access_key_id and self._config.secret_access_key:
                credentials = {
                    "aws_access_key_id": self._config.access_key_id,
                    "aws_secret_access_key": self._config.secret_access_key,
                    "aws_session_token": self._config.session_token,
                }

            profile = self._config.get_profile()
            region = self._config.get_region()
            try:
                self._session = boto3.Session(profile_name=profile, region_name=region, **credentials)
            except BotoCoreError as e:
                raise AWSError(f"Failed to create AWS session: {e}")

            logger.debug("Created AWS session", profile=profile, region=region)
        return self._session

    @property
    def region(self) -> str:
        return self.session.region_name or DEFAULT_REGION

    def client(self, service_name: str) -> Any:
        """Create a client with the shared retry policy and optional endpoint override."""
        try:
            return self.session.client(
                service_name,
                region_name=self.region,
                endpoint_url=self._config.endpoint_url,
                config=CLIENT_CONFIG,
            )
        except BotoCoreError as e:
            raise AWSError(f"Failed to create {service_name} client: {e}", service=service_name)

    @property
    def elasticbeanstalk(self) -> Any:
        return self.client("elasticbeanstalk")


def handle_aws_error(func: F) -> F:
    """Re-raise botocore errors from ``func`` as AWSError."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "Unknown")
            raise AWSError(
                f"{code}: {error.get('Message', str(e))}",
                service="elasticbeanstalk",
                operation=e.operation_name,
                details={"code": code},
            )
        except BotoCoreError as e:
            raise AWSError(str(e), service="elasticbeanstalk")

    return wrapper  # type: ignore[return-value]


def paginate(client: Any, method: str, key: str, **kwargs: Any) -> list[Any]:
    """Collect ``key`` from every page of a paginated call."""
    return [item for page in client.get_paginator(method).paginate(**kwargs) for item in page.get(key, [])]
