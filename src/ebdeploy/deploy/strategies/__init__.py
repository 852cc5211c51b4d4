"""Deployment strategies."""

from typing import Any

from ebdeploy.core.exceptions import ValidationError
from ebdeploy.deploy.strategies.base import DeploymentStrategy
from ebdeploy.deploy.strategies.blue_green import BlueGreenStrategy
from ebdeploy.deploy.strategies.inplace import InplaceUpdateStrategy

STRATEGIES: dict[str, type[DeploymentStrategy]] = {
    "inplace-update": InplaceUpdateStrategy,
    "blue-green": BlueGreenStrategy,
}


def create_strategy(name: str, *args: Any, **kwargs: Any) -> DeploymentStrategy:
    """Create a strategy by name."""
    if name not in STRATEGIES:
        raise ValidationError(f"Unknown strategy: {name}. Available: {sorted(STRATEGIES)}")
    return STRATEGIES[name](*args, **kwargs)


__all__ = [
    "BlueGreenStrategy",
    "DeploymentStrategy",
    "InplaceUpdateStrategy",
    "STRATEGIES",
    "create_strategy",
]
