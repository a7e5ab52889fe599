"""Tests for the sync client."""

from __future__ import annotations

import json
import urllib.error
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from lifetrack.models import StudySession, SyncKind, SyncStatus
from lifetrack.state import seed_routines
from lifetrack.sync import SyncClient, run_inline


def _ok_response(mock_urlopen: MagicMock, status: int = 200) -> None:
    mock_urlopen.return_value.__enter__.return_value.status = status


def _sent_body(mock_urlopen: MagicMock, call: int = 0) -> dict:
    request = mock_urlopen.call_args_list[call][0][0]
    return json.loads(request.data.decode("utf-8"))


@pytest.fixture()
def client() -> SyncClient:
    return SyncClient(lambda: "https://sheet.example/exec", dispatch=run_inline)


class TestNoEndpoint:
    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_empty_url_sends_nothing(self, mock_urlopen) -> None:
        dispatched: list = []
        client = SyncClient(lambda: "", dispatch=dispatched.append)
        client.push_routines(seed_routines())
        client.push_session(StudySession(duration_minutes=25))
        assert dispatched == []
        mock_urlopen.assert_not_called()
        assert client.last_status is None

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_whitespace_url_sends_nothing(self, mock_urlopen) -> None:
        client = SyncClient(lambda: "   ", dispatch=run_inline)
        client.push_routines(seed_routines())
        mock_urlopen.assert_not_called()


class TestPayloads:
    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_push_routines(self, mock_urlopen, client: SyncClient) -> None:
        _ok_response(mock_urlopen)
        client.push_routines(seed_routines())

        assert mock_urlopen.call_count == 1
        request = mock_urlopen.call_args[0][0]
        assert request.full_url == "https://sheet.example/exec"
        assert request.get_method() == "POST"
        assert request.get_header("Content-type") == "application/json"

        body = _sent_body(mock_urlopen)
        assert body["type"] == "sync_routines"
        assert [r["id"] for r in body["routines"]] == [1, 2, 3]
        assert body["routines"][2] == {
            "id": 3,
            "title": "Workout",
            "time": "05:00 PM",
            "completed": False,
            "type": "wellness",
        }

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_push_session(self, mock_urlopen, client: SyncClient) -> None:
        _ok_response(mock_urlopen)
        ts = datetime(2026, 10, 19, 9, 25, tzinfo=timezone.utc)
        client.push_session(StudySession(duration_minutes=25, timestamp=ts))

        body = _sent_body(mock_urlopen)
        assert body == {
            "type": "log_session",
            "session": {"subject": "Deep Work", "duration": 25, "date": "2026-10-19T09:25:00Z"},
        }

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_payload_is_snapshot_at_call_time(self, mock_urlopen) -> None:
        _ok_response(mock_urlopen)
        jobs: list = []
        client = SyncClient(lambda: "https://x", dispatch=jobs.append)
        routines = seed_routines()
        client.push_routines(routines)
        routines[0].completed = True
        jobs[0]()
        assert _sent_body(mock_urlopen)["routines"][0]["completed"] is False


class TestFailures:
    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_success_recorded(self, mock_urlopen, client: SyncClient) -> None:
        _ok_response(mock_urlopen)
        client.push_routines(seed_routines())
        assert client.last_status is not None
        assert client.last_status.ok
        assert client.last_status.kind is SyncKind.SYNC_ROUTINES

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_network_error_is_swallowed(self, mock_urlopen, client: SyncClient) -> None:
        mock_urlopen.side_effect = urllib.error.URLError("no route to host")
        client.push_session(StudySession(duration_minutes=25))
        assert client.last_status is not None
        assert not client.last_status.ok
        assert "no route to host" in client.last_status.detail

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_http_error_is_swallowed(self, mock_urlopen, client: SyncClient) -> None:
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "https://sheet.example/exec", 500, "Server Error", hdrs=None, fp=None  # type: ignore[arg-type]
        )
        client.push_routines(seed_routines())
        assert client.last_status is not None
        assert client.last_status.detail == "HTTP 500"
        assert mock_urlopen.call_count == 1  # no retry

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_non_2xx_status(self, mock_urlopen, client: SyncClient) -> None:
        _ok_response(mock_urlopen, status=302)
        client.push_routines(seed_routines())
        assert client.last_status is not None
        assert not client.last_status.ok

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_bad_url_is_swallowed(self, mock_urlopen) -> None:
        mock_urlopen.side_effect = ValueError("unknown url type: 'not-a-url'")
        client = SyncClient(lambda: "not-a-url", dispatch=run_inline)
        client.push_routines(seed_routines())
        assert client.last_status is not None and not client.last_status.ok

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_url_without_scheme_is_recorded(self, mock_urlopen) -> None:
        client = SyncClient(lambda: "script.google.com/macros/s/abc/exec", dispatch=run_inline)
        client.push_session(StudySession(duration_minutes=25))
        mock_urlopen.assert_not_called()
        assert client.last_status is not None
        assert not client.last_status.ok
        assert client.last_status.kind is SyncKind.LOG_SESSION

    def test_url_without_scheme_on_worker_thread(self) -> None:
        client = SyncClient(lambda: "not-a-url")
        client.push_routines(seed_routines())
        client.drain(5)
        assert client.last_status is not None and not client.last_status.ok


class TestListeners:
    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_subscribers_notified(self, mock_urlopen, client: SyncClient) -> None:
        _ok_response(mock_urlopen)
        seen: list[SyncStatus] = []
        client.subscribe(seen.append)
        client.push_routines(seed_routines())
        assert len(seen) == 1 and seen[0].ok

    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_failing_listener_does_not_propagate(self, mock_urlopen, client: SyncClient) -> None:
        _ok_response(mock_urlopen)

        def boom(status: SyncStatus) -> None:
            raise RuntimeError("listener bug")

        client.subscribe(boom)
        client.push_routines(seed_routines())
        assert client.last_status is not None


class TestBackgroundDispatch:
    @patch("lifetrack.sync.urllib.request.urlopen")
    def test_default_dispatch_runs_on_thread(self, mock_urlopen) -> None:
        _ok_response(mock_urlopen)
        client = SyncClient(lambda: "https://x")
        client.push_routines(seed_routines())
        client.drain(timeout=5)
        assert mock_urlopen.call_count == 1
        assert client.last_status is not None and client.last_status.ok
