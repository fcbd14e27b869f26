#!/usr/bin/env python
"""
Start the PLPG API under uvicorn.

Settings are validated before the server boots, so a missing or short
JWT_SECRET / JWT_REFRESH_SECRET stops the launcher with a readable error
instead of a traceback from inside the worker.

Usage:
    uv run python run_api.py
    uv run python run_api.py --reload            # Development mode
    uv run python run_api.py --workers 4         # Production
"""

import argparse
import sys

import uvicorn
from pydantic import ValidationError
from rich.console import Console

from shared.config import get_settings

console = Console(stderr=True)


def main():
    parser = argparse.ArgumentParser(description="Start the PLPG API server")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--host", type=str, help="Bind address (default: HOST)")
    parser.add_argument("--port", type=int, help="Bind port (default: PORT)")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes")
    parser.add_argument("--log-level", type=str, help="Override LOG_LEVEL")
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        for error in e.errors():
            console.print(f"  {error['msg']}")
        sys.exit(1)

    reload = args.reload or settings.reload
    if reload and args.workers > 1:
        parser.error("--reload cannot be combined with --workers")

    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=reload,
        workers=args.workers,
        log_level=(args.log_level or settings.log_level).lower(),
    )


if __name__ == "__main__":
    main()
