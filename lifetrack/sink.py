"""A local stand-in for the spreadsheet web app that receives sync pushes.

Each sheet is a CSV file in ``sheet_dir``; the header row is written the
first time a sheet is used. Every response is JSON with ``status`` and
``message``, and errors are reported in the body rather than the status
code, the way the spreadsheet endpoint does it.
"""

from __future__ import annotations

import csv
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request

log = logging.getLogger(__name__)

ROUTINES_SHEET = "Routines"
SESSIONS_SHEET = "StudyLogs"

_HEADERS: dict[str, list[str]] = {
    ROUTINES_SHEET: ["ID", "Title", "Time", "Type", "Completed", "Timestamp"],
    SESSIONS_SHEET: ["Subject", "Duration", "Timestamp"],
}


class SheetBook:
    """Append-only CSV sheets in one directory."""

    def __init__(self, sheet_dir: Path) -> None:
        self.sheet_dir = sheet_dir
        self._lock = threading.Lock()

    def path(self, sheet: str) -> Path:
        return self.sheet_dir / f"{sheet}.csv"

    def append_rows(self, sheet: str, rows: list[list[Any]]) -> None:
        with self._lock:
            self.sheet_dir.mkdir(parents=True, exist_ok=True)
            path = self.path(sheet)
            is_new = not path.exists()
            with path.open("a", newline="", encoding="utf-8") as fh:
                writer = csv.writer(fh)
                if is_new:
                    writer.writerow(_HEADERS[sheet])
                writer.writerows(rows)

    def read_rows(self, sheet: str) -> list[list[str]]:
        path = self.path(sheet)
        if not path.exists():
            return []
        with path.open(newline="", encoding="utf-8") as fh:
            return list(csv.reader(fh))


def _reply(status: str, message: str) -> dict[str, str]:
    return {"status": status, "message": message}


def create_app(sheet_dir: Path) -> FastAPI:
    """Build the sink application writing into ``sheet_dir``."""
    book = SheetBook(sheet_dir)
    app = FastAPI(title="Lifetrack sheet sink")
    app.state.book = book

    @app.get("/")
    def liveness() -> dict[str, str]:
        return _reply("active", "Server is running")

    @app.post("/")
    async def receive(request: Request) -> dict[str, str]:
        try:
            data = json.loads(await request.body())
            kind = data.get("type")

            if kind == "sync_routines":
                timestamp = datetime.now(timezone.utc).isoformat()
                rows = [
                    [r["id"], r["title"], r["time"], r["type"], r["completed"], timestamp]
                    for r in data["routines"]
                ]
                book.append_rows(ROUTINES_SHEET, rows)
                log.info("Appended %d routine rows", len(rows))
                return _reply("success", "Routines synced")

            if kind == "log_session":
                s = data["session"]
                book.append_rows(SESSIONS_SHEET, [[s["subject"], s["duration"], s["date"]]])
                log.info("Logged session %s", s["date"])
                return _reply("success", "Session logged")

            return _reply("error", "Unknown type")
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            log.warning("Rejected sink payload: %s", exc)
            return _reply("error", str(exc))

    return app
