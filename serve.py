# FOLDER: /

# serve.py

"""
================================================================================
MAP GENERATOR HTTP SERVER
================================================================================
Starts the HTTP service that renders density maps on demand.

Usage:
    python serve.py --host 127.0.0.1 --port 8080
================================================================================
"""
import argparse
import logging
import sys

from map_generator import config as DEFAULTS
from map_generator.server import create_app


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Tile density map generator server.")
    parser.add_argument("--host", default=DEFAULTS.DEFAULT_HOST, help=f"Host to bind (default: {DEFAULTS.DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=DEFAULTS.DEFAULT_PORT, help=f"Port to listen on (default: {DEFAULTS.DEFAULT_PORT})")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    # --- Setup Logging ---
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("MapServer")

    app = create_app()
    logger.info(f"map generator server listening on http://{args.host}:{args.port}")
    try:
        app.run(host=args.host, port=args.port, threaded=True)
    except OSError as e:
        logger.critical(f"server error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
