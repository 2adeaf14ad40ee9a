#!/usr/bin/env python3
"""
Entry point for running the keyclaim FastAPI app.

Usage:
    python -m keyclaim [--host HOST] [--port PORT] [--reload]
"""

import argparse
import logging
import os

import uvicorn

from keyclaim.constants import DEFAULT_PORT, PORT


def main():
    parser = argparse.ArgumentParser(description="Run the keyclaim key server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv(PORT, DEFAULT_PORT)),
        help=f"Port to bind to (default: ${PORT} or {DEFAULT_PORT})",
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    print(f"🔑 Key server listening on {args.host}:{args.port}")
    print(f"📖 API docs will be available at http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "keyclaim.fastapi.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )


if __name__ == "__main__":
    main()
