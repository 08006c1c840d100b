#!/usr/bin/env python3
"""
Local development server runner.

Runs the relay with uvicorn for local development.

Usage:
    python run_local.py
    python run_local.py --port 3080
    python run_local.py --mode retention
    python run_local.py --reload  # Auto-reload on code changes
"""

import argparse
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent

try:
    import uvicorn
except ImportError:
    print("ERROR: uvicorn is not installed.")
    print("Please install dependencies: pip install -e .")
    sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        description="Run the webhook relay locally with uvicorn"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", 3080)),
        help="Port to run the server on (default: $PORT or 3080)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--mode",
        choices=["fanout", "retention"],
        help="Distribution mode (overrides DISTRIBUTION_MODE)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (recommended for development)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for uvicorn (default: info)"
    )

    args = parser.parse_args()

    # Settings are read when the app module is imported
    if args.mode:
        os.environ["DISTRIBUTION_MODE"] = args.mode

    print("=" * 60)
    print("Starting Webhook Relay (Local Development)")
    print("=" * 60)
    print(f"Server: http://{args.host}:{args.port}")
    print(f"Webhook: http://{args.host}:{args.port}/api/webhooks/stubhub")
    print(f"Health: http://{args.host}:{args.port}/health")
    print("=" * 60)
    if args.reload:
        print("Auto-reload: ENABLED (code changes will restart server)")
    print()

    uvicorn.run(
        "webhook_relay.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        reload_dirs=[str(project_root / "webhook_relay")] if args.reload else None
    )


if __name__ == "__main__":
    main()
