"""Release stream protocol and implementations."""

import logging
from collections.abc import Callable
from typing import Protocol

from envedit.constants import MOCK_RELEASES
from envedit.models import Release

logger = logging.getLogger(__name__)

ReleaseCallback = Callable[[Release | None, Exception | None], None]


class ReleaseStreamError(Exception):
    """Raised (or delivered to subscribers) when a release stream fails."""


class ReleaseSource(Protocol):
    """Protocol that all release backends must satisfy."""

    def stream_app_release(self, app_name: str, callback: ReleaseCallback) -> Callable[[], None]:
        """Subscribe to the current release of ``app_name``.

        ``callback`` is invoked with ``(release, None)`` for every release and
        with ``(None, error)`` on failure.  The returned callable cancels the
        subscription; after it returns the callback is never invoked again.
        """
        ...


class MockReleaseSource:
    """In-memory release stream seeded from MOCK_RELEASES.

    Delivery is synchronous: subscribers receive the current release as soon
    as they subscribe and every later ``publish`` immediately.
    """

    def __init__(self, releases: dict[str, Release] | None = None) -> None:
        if releases is None:
            releases = {app: Release.model_validate(data) for app, data in MOCK_RELEASES.items()}
        self._releases: dict[str, Release] = dict(releases)
        self._subscribers: dict[str, list[ReleaseCallback]] = {}

    def current(self, app_name: str) -> Release | None:
        return self._releases.get(app_name)

    def subscriber_count(self, app_name: str) -> int:
        return len(self._subscribers.get(app_name, []))

    def stream_app_release(self, app_name: str, callback: ReleaseCallback) -> Callable[[], None]:
        subscribers = self._subscribers.setdefault(app_name, [])
        subscribers.append(callback)
        logger.debug("subscribed to %s (%d subscriber(s))", app_name, len(subscribers))

        current = self._releases.get(app_name)
        if current is not None:
            callback(current, None)

        def cancel() -> None:
            if callback in subscribers:
                subscribers.remove(callback)
                logger.debug("unsubscribed from %s", app_name)

        return cancel

    def publish(self, app_name: str, release: Release) -> None:
        """Make ``release`` current for ``app_name`` and notify subscribers."""
        self._releases[app_name] = release
        for callback in list(self._subscribers.get(app_name, [])):
            callback(release, None)

    def fail(self, app_name: str, error: Exception | str) -> None:
        """Deliver a stream failure to every subscriber of ``app_name``."""
        if not isinstance(error, Exception):
            error = ReleaseStreamError(error)
        logger.debug("delivering stream error for %s: %s", app_name, error)
        for callback in list(self._subscribers.get(app_name, [])):
            callback(None, error)
