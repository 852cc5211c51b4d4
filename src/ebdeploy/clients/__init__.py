"""API clients for external services."""

from ebdeploy.clients.aws import AWSClientFactory

__all__ = ["AWSClientFactory"]
