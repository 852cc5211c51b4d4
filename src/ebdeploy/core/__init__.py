"""Core utilities and shared components for ebdeploy."""

# Note: Import context lazily to avoid circular imports
# Use: from ebdeploy.core.context import EbDeployContext, pass_context
from ebdeploy.core.exceptions import (
    AWSError,
    ConfigError,
    DeployError,
    EbDeployError,
    HealthCheckTimeout,
    NameTooLong,
    ProviderOperationFailure,
    SmokeTestFailure,
)
from ebdeploy.core.output import OutputFormatter

__all__ = [
    "AWSError",
    "ConfigError",
    "DeployError",
    "EbDeployError",
    "HealthCheckTimeout",
    "NameTooLong",
    "ProviderOperationFailure",
    "SmokeTestFailure",
    "OutputFormatter",
]
