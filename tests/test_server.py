from __future__ import annotations

import json
from pathlib import Path

from ttrack_mcp.config import TrackerSettings
from ttrack_mcp.server import create_server
from ttrack_mcp.storage import JsonStore


def test_create_server_wires_store_and_status(tmp_path: Path, clock) -> None:
    settings = TrackerSettings(_env_file=None)
    store = JsonStore(tmp_path)

    server = create_server(settings, store=store, clock=clock)
    handles = getattr(server, "tool_handles")

    handles.tasks.create("coding")
    handles.tracker.start("coding")
    clock.advance(minutes=25)
    handles.tracker.stop()

    status = json.loads(getattr(server, "status_snapshot")())

    assert getattr(server, "store") is store
    assert status["storage"]["path"] == str(tmp_path)
    assert status["tracking"]["is_tracking"] is False
    assert status["today"]["total_time"] == 25 * 60 * 1000
    assert status["tasks"]["top"][0]["name"] == "coding"
