"""Environment orchestrator.

Drives one deploy of a single Elastic Beanstalk environment through a fixed
sequence of phases, each a hard gate for the next:

    [Terminating] -> Applying -> AwaitingEvent -> [SmokeTesting] -> AwaitingHealth

Terminating only runs in phoenix mode and SmokeTesting only when a smoke test
is configured. The first error moves the machine to Failed and is re-raised
unmodified; nothing is retried or compensated. The wait for the provider's
completion event is unbounded here; bound it through the event poller.
"""

from datetime import datetime
from typing import Callable

from ebdeploy.core.clock import Clock, SystemClock
from ebdeploy.core.exceptions import DeployError, HealthCheckTimeout, ProviderOperationFailure
from ebdeploy.core.logging import StructuredLogger
from ebdeploy.deploy.driver import ProviderDriver
from ebdeploy.deploy.events import EventPoller
from ebdeploy.deploy.models import (
    CompletionStatus,
    CreationOptions,
    DeployRequest,
    EnvironmentState,
    HealthStatus,
    Operation,
)
from ebdeploy.deploy.naming import derive_id
from ebdeploy.deploy.smoke_test import HttpSmokeTest, SmokeTest

HEALTH_TIMEOUT = 600  # seconds
HEALTH_INTERVAL = 15  # seconds

State = EnvironmentState

TRANSITIONS: dict[EnvironmentState, frozenset[EnvironmentState]] = {
    State.IDLE: frozenset({State.TERMINATING, State.APPLYING}),
    State.TERMINATING: frozenset({State.AWAITING_EVENT, State.APPLYING}),
    State.APPLYING: frozenset({State.AWAITING_EVENT}),
    State.AWAITING_EVENT: frozenset({State.APPLYING, State.SMOKE_TESTING, State.AWAITING_HEALTH}),
    State.SMOKE_TESTING: frozenset({State.AWAITING_HEALTH}),
    State.AWAITING_HEALTH: frozenset({State.SUCCEEDED}),
    State.SUCCEEDED: frozenset({State.TERMINATING, State.APPLYING}),
    State.FAILED: frozenset({State.TERMINATING, State.APPLYING}),
}


class Environment:
    """One deploy target, identified by (application, environment id)."""

    def __init__(
        self,
        app: str,
        name: str,
        driver: ProviderDriver,
        poller: EventPoller,
        options: CreationOptions | None = None,
        smoke_test: SmokeTest | None = None,
        clock: Clock | None = None,
        logger: StructuredLogger | None = None,
        health_timeout: float = HEALTH_TIMEOUT,
        health_interval: float = HEALTH_INTERVAL,
    ):
        """Initialize environment.

        Args:
            app: Application name
            name: Human-chosen environment name, at most 15 characters
            driver: Provider driver
            poller: Event poller used to await async operations
            options: Creation options
            smoke_test: Smoke test; built from options.smoke_test when omitted
            clock: Clock for timestamps, elapsed time and sleeping
            logger: Log sink; bound to app and env
            health_timeout: Ceiling in seconds for the health wait
            health_interval: Seconds between health polls
        """
        self._app = app
        self._name = name
        self._env_id = derive_id(app, name)
        self._driver = driver
        self._poller = poller
        self._options = options or CreationOptions()
        self._clock = clock or SystemClock()
        self._log = (logger or StructuredLogger(__name__)).bind(app=app, env=self._env_id)
        self._health_timeout = health_timeout
        self._health_interval = health_interval

        if smoke_test is None and self._options.smoke_test is not None:
            smoke_test = HttpSmokeTest(self._options.smoke_test)
        self._smoke_test = smoke_test

        self._state = State.IDLE
        self._history: list[EnvironmentState] = []

    @property
    def app(self) -> str:
        return self._app

    @property
    def name(self) -> str:
        return self._name

    @property
    def env_id(self) -> str:
        return self._env_id

    @property
    def options(self) -> CreationOptions:
        return self._options

    @property
    def state(self) -> EnvironmentState:
        return self._state

    @property
    def history(self) -> tuple[EnvironmentState, ...]:
        """States entered during the latest deploy, in order."""
        return tuple(self._history)

    def deploy(self, request: DeployRequest) -> None:
        """Deploy a version to this environment and wait until it is healthy.

        Raises:
            ProviderOperationFailure: The provider reported a fatal event
            SmokeTestFailure: The smoke test failed
            HealthCheckTimeout: The environment never turned Green
        """
        self._history = []
        self._log.info("Deploying version", version=request.version_label)

        try:
            if self._options.phoenix_mode:
                self._transition(State.TERMINATING)
                self._terminate()

            self._transition(State.APPLYING)
            self._create_or_update(request)

            if self._smoke_test is not None:
                self._transition(State.SMOKE_TESTING)
                self._run_smoke_test()

            self._transition(State.AWAITING_HEALTH)
            self._wait_for_health()

            self._transition(State.SUCCEEDED)
        except BaseException as e:
            # Interrupts land here too, so the handle can deploy again
            self._enter(State.FAILED)
            self._log.error("Deploy failed", error=str(e) or type(e).__name__)
            raise

        self._log.info("Deploy completed", version=request.version_label)

    def cname_prefix(self) -> str:
        """Current routing alias prefix, read from the provider."""
        return self._driver.environment_cname_prefix(self._app, self._env_id)

    def swap_cname_with(self, other: "Environment") -> None:
        """Swap routing aliases with another environment in one provider call."""
        self._log.info("Swapping CNAME", other=other.env_id)
        self._driver.environment_swap_cname(self._app, self._env_id, other.env_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self._app == other._app and self._env_id == other._env_id

    def __hash__(self) -> int:
        return hash((self._app, self._env_id))

    def __repr__(self) -> str:
        return f"Environment(app={self._app!r}, env_id={self._env_id!r})"

    def _transition(self, new_state: EnvironmentState) -> None:
        if new_state not in TRANSITIONS[self._state]:
            raise DeployError(
                f"Illegal state transition {self._state.value} -> {new_state.value}",
                details={"env": self._env_id},
            )
        self._enter(new_state)

    def _enter(self, new_state: EnvironmentState) -> None:
        self._log.debug("State change", old=self._state.value, new=new_state.value)
        self._state = new_state
        self._history.append(new_state)

    def _terminate(self) -> None:
        if not self._driver.environment_exists(self._app, self._env_id):
            self._log.debug("Nothing to terminate")
            return

        self._issue_and_wait(
            Operation.TERMINATE,
            lambda: self._driver.delete_environment(self._app, self._env_id),
        )

    def _create_or_update(self, request: DeployRequest) -> None:
        if self._driver.environment_exists(self._app, self._env_id):
            self._issue_and_wait(
                Operation.UPDATE,
                lambda: self._driver.update_environment(
                    self._app,
                    self._env_id,
                    request.version_label,
                    request.settings,
                ),
            )
        else:
            self._issue_and_wait(
                Operation.CREATE,
                lambda: self._driver.create_environment(
                    self._app,
                    self._env_id,
                    self._options.solution_stack,
                    self._options.cname_prefix,
                    request.version_label,
                    request.settings,
                ),
            )

    def _issue_and_wait(self, operation: Operation, issue: Callable[[], None]) -> None:
        since = self._clock.now()
        issue()
        self._transition(State.AWAITING_EVENT)
        self._await_completion(operation, since)

    def _await_completion(self, operation: Operation, since: datetime) -> None:
        for event in self._poller.poll(self._app, self._env_id, since):
            signal = self._driver.classify_event(operation, event)

            if signal.status == CompletionStatus.FAILED:
                self._log.error(event.message, timestamp=event.timestamp.isoformat())
                raise ProviderOperationFailure(signal.reason or event.message, operation=operation.value)

            self._log.info(event.message, timestamp=event.timestamp.isoformat())

            if signal.status == CompletionStatus.SUCCEEDED:
                return

        raise DeployError(f"Event stream for {self._env_id} ended before {operation.value} completed")

    def _run_smoke_test(self) -> None:
        hostname = self._driver.environment_cname(self._app, self._env_id)
        self._smoke_test.run(hostname)

    def _wait_for_health(self) -> None:
        started = self._clock.monotonic()

        while True:
            status = self._driver.environment_health_state(self._app, self._env_id)
            self._log.info(f"health status: {status}", timestamp=self._clock.now().isoformat())

            if status == HealthStatus.GREEN:
                return

            elapsed = self._clock.monotonic() - started
            if elapsed >= self._health_timeout:
                raise HealthCheckTimeout(
                    f"Environment {self._env_id} did not become {HealthStatus.GREEN.value} "
                    f"within {self._health_timeout}s (last status: {status})",
                    timeout_seconds=self._health_timeout,
                )

            # Final interval is shortened so the wait never passes the ceiling
            self._clock.sleep(min(self._health_interval, self._health_timeout - elapsed))
