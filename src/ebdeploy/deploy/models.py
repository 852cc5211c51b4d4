"""Deployment data models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from ebdeploy.config import SmokeTestConfig


class HealthStatus(str, Enum):
    """Environment health colours reported by the provider.

    Only GREEN is terminal; anything else means keep waiting.
    """

    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"
    GREY = "Grey"


class Operation(str, Enum):
    """Asynchronous provider operations the orchestrator waits on."""

    CREATE = "create"
    UPDATE = "update"
    TERMINATE = "terminate"


class CompletionStatus(str, Enum):
    """Outcome of an operation as far as one event tells."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    PENDING = "pending"


@dataclass(frozen=True)
class CompletionSignal:
    """Typed completion signal derived from a provider event."""

    status: CompletionStatus
    reason: str | None = None

    @classmethod
    def succeeded(cls) -> "CompletionSignal":
        return cls(CompletionStatus.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> "CompletionSignal":
        return cls(CompletionStatus.FAILED, reason)

    @classmethod
    def pending(cls) -> "CompletionSignal":
        return cls(CompletionStatus.PENDING)


class EnvironmentState(str, Enum):
    """States of the deploy state machine."""

    IDLE = "idle"
    TERMINATING = "terminating"
    APPLYING = "applying"
    AWAITING_EVENT = "awaiting_event"
    SMOKE_TESTING = "smoke_testing"
    AWAITING_HEALTH = "awaiting_health"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CreationOptions:
    """Options used when the remote environment has to be created."""

    solution_stack: str | None = None
    cname_prefix: str | None = None
    phoenix_mode: bool = False
    smoke_test: SmokeTestConfig | None = None

    def with_cname_prefix(self, cname_prefix: str) -> "CreationOptions":
        """Copy of these options with a different cname prefix."""
        return replace(self, cname_prefix=cname_prefix)


@dataclass(frozen=True)
class DeployRequest:
    """A version label plus option settings passed verbatim to the provider."""

    version_label: str
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Event:
    """A single provider log event.

    ``request_id`` and ``instance_id`` are set when the provider reports them;
    they tell apart identical messages logged in the same second.
    """

    timestamp: datetime
    message: str
    request_id: str | None = None
    instance_id: str | None = None

    @property
    def key(self) -> tuple[datetime, str, str | None, str | None]:
        return (self.timestamp, self.message, self.request_id, self.instance_id)
