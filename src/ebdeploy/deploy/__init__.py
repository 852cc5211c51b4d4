"""Deployment orchestration module."""

from ebdeploy.deploy.driver import BeanstalkDriver, ProviderDriver
from ebdeploy.deploy.environment import Environment
from ebdeploy.deploy.events import BeanstalkEventPoller, EventPoller
from ebdeploy.deploy.models import (
    CompletionSignal,
    CompletionStatus,
    CreationOptions,
    DeployRequest,
    EnvironmentState,
    Event,
    HealthStatus,
    Operation,
)
from ebdeploy.deploy.naming import derive_id
from ebdeploy.deploy.smoke_test import HttpSmokeTest, SmokeTest

__all__ = [
    "BeanstalkDriver",
    "BeanstalkEventPoller",
    "CompletionSignal",
    "CompletionStatus",
    "CreationOptions",
    "DeployRequest",
    "Environment",
    "EnvironmentState",
    "Event",
    "EventPoller",
    "HealthStatus",
    "HttpSmokeTest",
    "Operation",
    "ProviderDriver",
    "SmokeTest",
    "derive_id",
]
