"""Development entrypoint for the session tracker HTTP API."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from risktracker.api.app import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the session tracker API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    parser.add_argument("--log-level", default="info", help="Logging level for the app")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.reload:
        uvicorn.run(
            "risktracker.api.app:app",
            host=args.host,
            port=args.port,
            reload=True,
            factory=False,
            log_level=args.log_level,
        )
    else:
        uvicorn.run(
            app,
            host=args.host,
            port=args.port,
            reload=False,
            factory=False,
            log_level=args.log_level,
        )


if __name__ == "__main__":
    main()
