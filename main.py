#!/usr/bin/env python3
"""
Police Budget Story — launch the preview server.

Usage:
    python main.py                          # http://localhost:8000
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 127.0.0.1         # bind to localhost only
    python main.py --data-dir /path/to/csv  # read the CSV files from elsewhere
    python main.py --strict                 # fail on malformed cells
    python main.py --reload                 # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import threading
import webbrowser
from pathlib import Path

import uvicorn

from utils.config import DataSources


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the Police Budget Story preview server.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None,
        help="Directory with the CSV files (default: data or STORY_DATA_DIR env var)",
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Treat malformed cells as errors instead of gaps",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    args = parser.parse_args()

    # The app reads its configuration from the environment
    if args.data_dir is not None:
        os.environ["STORY_DATA_DIR"] = str(args.data_dir)
    if args.strict:
        os.environ["STORY_STRICT_PARSE"] = "1"

    data_dir = Path(os.getenv("STORY_DATA_DIR", "data"))
    missing = [f for f in DataSources().files.values() if not (data_dir / f).exists()]
    if missing and not os.getenv("STORY_DATA_URL"):
        print(f"Warning: missing CSV files in {data_dir}: {', '.join(missing)}")
        print("  The page will show a retry message until they are in place.")
        print()

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Police Budget Story at {url}")
    print(f"Data: {os.getenv('STORY_DATA_URL') or data_dir}")
    print()

    if not args.no_browser:
        # Open browser after a short delay to let the server start
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
