"""Best-effort push of state changes to the user's sync endpoint.

Each push is one POST, fired on a daemon thread so the calling action
never waits on it. The response body is never read; failures are logged
and recorded as the last sync status, never raised and never retried.
"""

from __future__ import annotations

import json
import logging
import threading
import urllib.error
import urllib.request
from typing import Any, Callable, Optional

from lifetrack.models import Routine, StudySession, SyncKind, SyncStatus
from lifetrack.state import routines_payload, session_payload

log = logging.getLogger(__name__)

Dispatch = Callable[[Callable[[], None]], None]


class SyncClient:
    """Fire-and-forget client for the remote sheet."""

    def __init__(
        self,
        url_provider: Callable[[], str],
        dispatch: Optional[Dispatch] = None,
        timeout: float = 10.0,
    ) -> None:
        self._url_provider = url_provider
        self._dispatch = dispatch or self._spawn
        self.timeout = timeout
        self._lock = threading.Lock()
        self._threads: list[threading.Thread] = []
        self._listeners: list[Callable[[SyncStatus], None]] = []
        self.last_status: Optional[SyncStatus] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def push_routines(self, routines: list[Routine]) -> None:
        self._push(
            SyncKind.SYNC_ROUTINES,
            {"type": SyncKind.SYNC_ROUTINES.value, "routines": routines_payload(routines)},
        )

    def push_session(self, session: StudySession) -> None:
        self._push(
            SyncKind.LOG_SESSION,
            {"type": SyncKind.LOG_SESSION.value, "session": session_payload(session)},
        )

    def subscribe(self, listener: Callable[[SyncStatus], None]) -> None:
        """Call ``listener`` with every sync outcome (from the worker thread)."""
        self._listeners.append(listener)

    def drain(self, timeout: float = 5.0) -> None:
        """Give outstanding pushes up to ``timeout`` seconds each to finish."""
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _push(self, kind: SyncKind, body: dict[str, Any]) -> None:
        url = self._url_provider().strip()
        if not url:
            return
        data = json.dumps(body).encode("utf-8")
        self._dispatch(lambda: self._post(kind, url, data))

    def _spawn(self, job: Callable[[], None]) -> None:
        thread = threading.Thread(target=job, daemon=True)
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()

    def _post(self, kind: SyncKind, url: str, data: bytes) -> None:
        try:
            req = urllib.request.Request(
                url,
                data=data,
                method="POST",
                headers={"Content-Type": "application/json", "User-Agent": "Lifetrack/0.1"},
            )
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                code = resp.status
        except urllib.error.HTTPError as exc:
            log.warning("Sync %s rejected: HTTP %d", kind.value, exc.code)
            self._record(SyncStatus(kind=kind, ok=False, detail=f"HTTP {exc.code}"))
            return
        except (urllib.error.URLError, OSError, ValueError) as exc:
            log.warning("Sync %s failed: %s", kind.value, exc)
            self._record(SyncStatus(kind=kind, ok=False, detail=str(exc)))
            return

        if 200 <= code < 300:
            log.info("Synced %s to cloud", kind.value)
            self._record(SyncStatus(kind=kind, ok=True, detail=f"HTTP {code}"))
        else:
            log.warning("Sync %s got HTTP %d", kind.value, code)
            self._record(SyncStatus(kind=kind, ok=False, detail=f"HTTP {code}"))

    def _record(self, status: SyncStatus) -> None:
        with self._lock:
            self.last_status = status
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(status)
            except Exception:
                log.exception("Sync status listener failed")


def run_inline(job: Callable[[], None]) -> None:
    """Dispatcher that runs the push on the caller's thread."""
    job()
