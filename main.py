#!/usr/bin/env python3
"""
navledger - Entry point for running the analytics API.

Usage:
    python main.py                      # Serve on [::]:8000
    python main.py --port 9000 --debug  # Custom port, debug logging
"""

import argparse
import logging

import uvicorn

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="navledger portfolio performance API")
    parser.add_argument("--host", default="::", help="Web server host")
    parser.add_argument("--port", type=int, default=8000, help="Web server port")
    parser.add_argument("--debug", action="store_true", help="Log simulation progress")
    args = parser.parse_args()

    if args.debug:
        logging.getLogger("navledger").setLevel(logging.DEBUG)

    logger.info(f"Running web server on {args.host}:{args.port}")
    uvicorn.run("navledger.app:app", host=args.host, port=args.port, log_level="debug" if args.debug else "info")


if __name__ == "__main__":
    main()
