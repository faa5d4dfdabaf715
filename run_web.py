#!/usr/bin/env python3
"""
Main entry point for the ScoreSnap scorebook web API.

This script launches the Flask-based JSON server.
"""
import argparse
import logging

from scoresnap.ui.web_app import run_web_app

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the ScoreSnap JSON API")
    parser.add_argument("--data", help="JSON data file (default: $SCORESNAP_DATA or scoresnap_data.json)")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=7122)
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Bind only to localhost unless told otherwise
    run_web_app(host=args.host, port=args.port, data_path=args.data)
