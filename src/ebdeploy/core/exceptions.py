"""Custom exceptions for ebdeploy."""

from typing import Any


class EbDeployError(Exception):
    """Base exception for all ebdeploy errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigError(EbDeployError):
    """Configuration-related errors."""

    pass


class ValidationError(EbDeployError):
    """Input validation errors."""

    pass


class NameTooLong(ValidationError):
    """Environment name exceeds the provider's length bound."""

    def __init__(self, name: str, max_length: int):
        super().__init__(
            f"Environment name {name} is too long, it must be at most {max_length} chars"
        )
        self.name = name
        self.max_length = max_length


class AWSError(EbDeployError):
    """AWS API errors."""

    def __init__(
        self,
        message: str,
        service: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.service = service
        self.operation = operation


class EnvironmentNotFound(AWSError):
    """The remote environment does not exist."""

    pass


class DeployError(EbDeployError):
    """Deployment errors. Terminal for the current deploy."""

    pass


class ProviderOperationFailure(DeployError):
    """The provider reported a fatal event for an in-flight operation.

    The message is the provider's own event text, unmodified.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class SmokeTestFailure(DeployError):
    """Post-deploy smoke test did not pass."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HealthCheckTimeout(DeployError):
    """Environment did not become healthy within the allowed time."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        super().__init__(message)
        self.timeout_seconds = timeout_seconds


class EventPollTimeout(DeployError):
    """Event stream produced no terminal event within the allowed time."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        super().__init__(message)
        self.timeout_seconds = timeout_seconds
