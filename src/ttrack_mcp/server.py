"""FastMCP server bootstrap for ttrack."""

import json
import logging
from datetime import datetime
from typing import Callable, Optional

from fastmcp import FastMCP

from . import __version__
from .config import TrackerSettings, get_settings
from .durations import format_duration
from .storage import JsonStore, StoreProtocol
from .tools import register_tools


def configure_logging(level: str) -> None:
    """Configure root logging for the ttrack server."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def create_server(
    settings: Optional[TrackerSettings] = None,
    store: StoreProtocol | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastMCP:
    """Instantiate the FastMCP server with the tracking tools and status resource."""

    settings = settings or get_settings()
    store = store or JsonStore(settings.data_dir)
    clock = clock or datetime.now

    server = FastMCP(
        name="ttrack MCP",
        instructions=(
            "ttrack records time spent on named tasks. Start, pause, resume and stop "
            "tracking, set daily/weekly/monthly/yearly goals, and request period "
            "analytics or goal progress."
        ),
    )

    handles = register_tools(server, settings=settings, store=store, clock=clock)

    def _status_snapshot() -> str:
        """Return a JSON string summarizing basic runtime state."""

        status = handles.tracker.status()
        today = handles.engine.daily()
        summary = handles.engine.task_summary()

        payload = {
            "timestamp": clock().isoformat(),
            "server_version": __version__,
            "log_level": settings.log_level,
            "storage": {"path": str(getattr(store, "path", "")) or None},
            "tracking": {
                **status.to_dict(),
                "elapsed_display": format_duration(status.elapsed),
            },
            "today": {
                "total_time": today.total_time,
                "total_time_display": format_duration(today.total_time),
                "tasks": [task.to_dict(include_sessions=False) for task in today.tasks],
            },
            "tasks": {
                "count": len(summary.tasks),
                "total_time": summary.total_time_all_tasks,
                "top": summary.to_dict()["tasks"][: settings.top_tasks],
            },
        }
        return json.dumps(payload)

    server.resource(
        "resource://ttrack/status",
        name="ttrack_status",
        description="Current tracking state, today's total and the top tasks.",
        mime_type="application/json",
    )(_status_snapshot)

    setattr(server, "store", store)
    setattr(server, "tool_handles", handles)
    setattr(server, "status_snapshot", _status_snapshot)
    return server


def main() -> None:
    """Entry point for running the ttrack MCP server via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching ttrack MCP server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "data_dir": str(settings.data_dir),
        },
    )
    server.run()


if __name__ == "__main__":
    main()
