"""Pytest fixtures for ebdeploy tests."""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Generator, Iterator

import pytest
from click.testing import CliRunner

from ebdeploy.core.clock import Clock
from ebdeploy.core.exceptions import SmokeTestFailure
from ebdeploy.deploy.driver import ProviderDriver
from ebdeploy.deploy.environment import Environment
from ebdeploy.deploy.events import EventPoller
from ebdeploy.deploy.models import CreationOptions, Event
from ebdeploy.deploy.smoke_test import SmokeTest

START = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)

CREATE_OK = "Successfully launched environment: prod"
UPDATE_OK = "Environment update completed successfully."
TERMINATE_OK = "terminateEnvironment completed successfully."
FATAL = "Failed to deploy application."


class FakeClock(Clock):
    """Clock whose time only moves when someone sleeps."""

    def __init__(self, start: datetime = START):
        self._start = start
        self.elapsed = 0.0
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self.elapsed)

    def monotonic(self) -> float:
        return self.elapsed

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.elapsed += seconds


class FakeDriver(ProviderDriver):
    """In-memory provider that records every call on a shared timeline."""

    def __init__(
        self,
        timeline: list[tuple[str, tuple[Any, ...]]] | None = None,
        existing: set[str] | None = None,
        health: list[str] | None = None,
    ):
        self.timeline = timeline if timeline is not None else []
        self.existing = set(existing or ())
        self.health = list(health or ["Green"])
        self.cname_prefixes: dict[str, str] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.timeline.append((name, args))

    def calls(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.timeline if call == name]

    def environment_exists(self, app, env):
        self._record("environment_exists", app, env)
        return env in self.existing

    def create_environment(self, app, env, solution_stack, cname_prefix, version_label, settings):
        self._record("create_environment", app, env, solution_stack, cname_prefix, version_label, settings)
        self.existing.add(env)
        if cname_prefix:
            self.cname_prefixes[env] = cname_prefix

    def update_environment(self, app, env, version_label, settings):
        self._record("update_environment", app, env, version_label, settings)

    def delete_environment(self, app, env):
        self._record("delete_environment", app, env)
        self.existing.discard(env)

    def environment_cname(self, app, env):
        self._record("environment_cname", app, env)
        return f"{self.cname_prefixes.get(env, env)}.us-east-1.elasticbeanstalk.com"

    def environment_cname_prefix(self, app, env):
        self._record("environment_cname_prefix", app, env)
        return self.cname_prefixes.get(env, env)

    def environment_swap_cname(self, app, env_a, env_b):
        self._record("environment_swap_cname", app, env_a, env_b)
        self.cname_prefixes[env_a], self.cname_prefixes[env_b] = (
            self.cname_prefixes.get(env_b),
            self.cname_prefixes.get(env_a),
        )

    def environment_health_state(self, app, env):
        self._record("environment_health_state", app, env)
        if len(self.health) > 1:
            return self.health.pop(0)
        return self.health[0]


class ScriptedPoller(EventPoller):
    """Poller that plays back one scripted list of messages per poll call."""

    def __init__(self, *scripts: list[str], timeline: list | None = None):
        self._scripts = list(scripts)
        self.timeline = timeline if timeline is not None else []
        self.calls: list[tuple[str, str, datetime]] = []
        self.consumed: list[str] = []

    def poll(self, app_id: str, env_id: str, since: datetime) -> Iterator[Event]:
        self.calls.append((app_id, env_id, since))
        messages = self._scripts.pop(0)
        for offset, message in enumerate(messages):
            self.consumed.append(message)
            self.timeline.append(("event", (message,)))
            yield Event(timestamp=since + timedelta(seconds=offset), message=message)


class RecordingSmokeTest(SmokeTest):
    """Smoke test that records hostnames and optionally fails."""

    def __init__(self, fail: bool = False, timeline: list | None = None):
        self.fail = fail
        self.hostnames: list[str] = []
        self.timeline = timeline if timeline is not None else []

    def run(self, hostname: str) -> None:
        self.hostnames.append(hostname)
        self.timeline.append(("smoke_test", (hostname,)))
        if self.fail:
            raise SmokeTestFailure(f"Smoke test against {hostname} failed", url=hostname, status_code=503)


@pytest.fixture
def timeline() -> list:
    return []


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def driver(timeline: list) -> FakeDriver:
    return FakeDriver(timeline)


@pytest.fixture
def options() -> CreationOptions:
    return CreationOptions(solution_stack="X", cname_prefix="myapp-prod")


@pytest.fixture
def make_environment(driver: FakeDriver, clock: FakeClock, options: CreationOptions):
    """Build an Environment wired to the fake driver and clock."""

    def _make(poller: EventPoller, name: str = "prod", app: str = "myapp", **kwargs: Any) -> Environment:
        kwargs.setdefault("options", options)
        return Environment(app, name, driver, poller, clock=clock, **kwargs)

    return _make


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before each test."""
    env_vars = [
        "EBDEPLOY_AWS_PROFILE",
        "EBDEPLOY_AWS_REGION",
        "EBDEPLOY_APPLICATION",
        "EBDEPLOY_CONFIG",
        "AWS_PROFILE",
        "AWS_REGION",
    ]

    original = {k: os.environ.get(k) for k in env_vars}

    for k in env_vars:
        os.environ.pop(k, None)

    yield

    for k, v in original.items():
        if v is not None:
            os.environ[k] = v
        else:
            os.environ.pop(k, None)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file."""
    config_content = """
version: "1"
application: myapp
aws:
  region: us-east-1
global:
  confirm_destructive: false
environments:
  prod:
    solution_stack: "64bit Amazon Linux 2023 running Python 3.11"
    cname_prefix: myapp-prod
    option_settings:
      "aws:autoscaling:asg:MinSize": 2
  blue:
    cname_prefix: myapp-blue
  green:
    cname_prefix: myapp-green
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return str(config_file)
