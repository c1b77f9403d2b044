"""Environment editor controller.

Ties a ``ReleaseSource`` to an ``EditSession``: it follows the release
stream of one app, keeps the user's unsaved edits alive across refreshes,
and builds the release that a deployment will roll out.
"""

import copy
import logging
from collections.abc import Callable

from envedit.config import AppSettings
from envedit.domain.diff import apply_diff, diff
from envedit.domain.reconcile import reconcile
from envedit.domain.session import EditSession
from envedit.models import DiffOp, Release
from envedit.sources import ReleaseSource

logger = logging.getLogger(__name__)


class InvalidStateError(Exception):
    """Raised when an operation needs a release or session that does not exist yet."""


def _noop() -> None:
    pass


class ReleaseEditor:
    """Edit the environment of an app's current release.

    Lifecycle: ``start`` subscribes to the release stream (loading until the
    first release arrives), ``handle_change``/``handle_filter`` replace the
    working session, ``handle_submit`` enters the deploying state, and
    ``deployment_created`` drops the session once the new release exists.
    ``close`` unsubscribes; no reconciliation happens afterwards.
    """

    def __init__(
        self,
        app_name: str,
        source: ReleaseSource,
        settings: AppSettings | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self.app_name = app_name
        self._source = source
        self._settings = settings or AppSettings()
        self._on_error = on_error
        self._cancel: Callable[[], None] = _noop
        self._session: EditSession | None = None
        self.release: Release | None = None
        self.is_loading = False
        self.is_deploying = False
        self.last_error: Exception | None = None

    def start(self) -> None:
        """(Re)subscribe to the app's release stream, discarding any state."""
        self._cancel()
        self.release = None
        self._session = None
        self.is_loading = True
        self.last_error = None
        self._cancel = self._source.stream_app_release(self.app_name, self._on_release)

    def close(self) -> None:
        self._cancel()
        self._cancel = _noop

    @property
    def session(self) -> EditSession:
        """The working session, created from the current release on first use.

        Raises InvalidStateError while no release has been received.
        """
        if self.release is None:
            raise InvalidStateError(f"no release received yet for {self.app_name}")
        if self._session is None:
            self._session = EditSession(self.release.env_map(), matcher=self._settings.matcher())
        return self._session

    @property
    def has_changes(self) -> bool:
        return self._session is not None and self._session.has_changes

    def handle_change(self, session: EditSession) -> None:
        self._session = session

    def handle_filter(self, filter_text: str) -> None:
        self._session = self.session.filtered(filter_text)

    def handle_submit(self, session: EditSession) -> None:
        if not session.has_changes:
            logger.debug("submitting %s without changes", self.app_name)
        self._session = session
        self.is_deploying = True

    def cancel_deploy(self) -> None:
        self.is_deploying = False

    def deployment_created(self) -> None:
        self.is_deploying = False
        self._session = None

    def pending_diff(self) -> list[DiffOp]:
        """Return the edits of the working session relative to its baseline."""
        session = self.session
        return diff(session.original, session.entries())

    def build_new_release(self, current: Release) -> Release:
        """Build the release to deploy from ``current`` plus the user's edits.

        The env is diffed against ``current`` (which may be newer than the
        session's baseline) and the result applied to it.  Artifacts, labels
        and processes are copied from ``current`` unchanged.
        """
        if self._session is None:
            raise InvalidStateError("build_new_release called without an edit session")
        env = current.env_map()
        ops = diff(env, self._session.entries())
        logger.info("building release for %s with %d env change(s)", self.app_name, len(ops))
        return Release(
            artifacts=list(current.artifacts),
            labels=dict(current.labels),
            processes=copy.deepcopy(current.processes),
            env=apply_diff(env, ops).to_pairs(),
        )

    def _on_release(self, release: Release | None, error: Exception | None) -> None:
        if error is not None:
            logger.error("release stream for %s failed: %s", self.app_name, error)
            self.last_error = error
            if self._on_error is not None:
                self._on_error(error)
            return
        if release is None:
            return

        previous = self.release
        if previous is not None and previous.name == release.name and previous.env == release.env:
            # Same release delivered again; keep the working session as is.
            self.release = release
            self.is_loading = False
            return

        logger.info("received release %s for %s", release.name or "<unnamed>", self.app_name)
        if self._session is not None:
            if self._session.has_changes and not self._settings.carry_edits_on_refresh:
                logger.warning(
                    "discarding %d unsaved change(s) to %s on refresh",
                    len(self._session.changed_indices),
                    self.app_name,
                )
                self._session = None
            else:
                self._session = reconcile(
                    release.env_map(), self._session, matcher=self._settings.matcher()
                )
        self.release = release
        self.is_loading = False
