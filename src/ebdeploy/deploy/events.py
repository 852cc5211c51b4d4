"""Event pollers: ordered, lazy streams of provider events."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterator

from ebdeploy.clients.aws import handle_aws_error, paginate
from ebdeploy.core.clock import Clock, SystemClock
from ebdeploy.core.exceptions import EventPollTimeout
from ebdeploy.core.logging import StructuredLogger
from ebdeploy.deploy.models import Event

logger = StructuredLogger(__name__)


class EventPoller(ABC):
    """Abstract base class for event pollers."""

    @abstractmethod
    def poll(self, app_id: str, env_id: str, since: datetime) -> Iterator[Event]:
        """Stream events for one environment.

        Implementations must yield only events at or after ``since``, in
        provider chronological order, and must not fetch more than the
        consumer pulls. Each call starts a fresh stream.

        Args:
            app_id: Application name
            env_id: Environment id
            since: Earliest event timestamp of interest

        Yields:
            Events as they become available
        """
        pass


class BeanstalkEventPoller(EventPoller):
    """Event poller backed by Elastic Beanstalk DescribeEvents.

    StartTime is inclusive, so events at the cursor come back on the next
    poll and are dropped by (timestamp, message, RequestId, InstanceId).
    Two events equal on all four are indistinguishable and yielded once.
    """

    def __init__(
        self,
        client: Any,
        clock: Clock | None = None,
        interval: float = 10,
        timeout: float | None = None,
    ):
        """Initialize event poller.

        Args:
            client: boto3 elasticbeanstalk client
            clock: Clock used for sleeping between polls
            interval: Seconds between DescribeEvents calls
            timeout: Give up after this many seconds; None waits forever
        """
        self._client = client
        self._clock = clock or SystemClock()
        self._interval = interval
        self._timeout = timeout

    def poll(self, app_id: str, env_id: str, since: datetime) -> Iterator[Event]:
        cursor = since
        seen: set[tuple[datetime, str, str | None, str | None]] = set()
        started = self._clock.monotonic()

        while True:
            for event in self._fetch(app_id, env_id, cursor):
                if event.timestamp < since:
                    continue

                key = event.key
                if key in seen:
                    continue
                seen.add(key)

                if event.timestamp > cursor:
                    cursor = event.timestamp
                    # StartTime is inclusive, so only events at the cursor can repeat
                    seen = {k for k in seen if k[0] >= cursor}

                yield event

            if self._timeout is not None and self._clock.monotonic() - started >= self._timeout:
                raise EventPollTimeout(
                    f"No terminal event for {env_id} within {self._timeout}s",
                    timeout_seconds=self._timeout,
                )

            logger.debug("Waiting for events", app=app_id, env=env_id, since=cursor.isoformat())
            self._clock.sleep(self._interval)

    @handle_aws_error
    def _fetch(self, app_id: str, env_id: str, start_time: datetime) -> list[Event]:
        """Fetch events oldest-first. DescribeEvents returns newest-first."""
        items = paginate(
            self._client,
            "describe_events",
            "Events",
            ApplicationName=app_id,
            EnvironmentName=env_id,
            StartTime=start_time,
        )
        events = [
            Event(
                timestamp=item["EventDate"],
                message=item.get("Message", ""),
                request_id=item.get("RequestId"),
                instance_id=item.get("InstanceId"),
            )
            for item in reversed(items)
        ]
        return sorted(events, key=lambda e: e.timestamp)
