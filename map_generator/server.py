# map_generator/server.py

"""
================================================================================
HTTP SERVICE
================================================================================
A small Flask application that exposes the map generator over HTTP.

Endpoints:
---------------
- GET  /          : Usage hint.
- GET  /healthz   : Liveness probe.
- POST /generate  : JSON request in, PNG out. Diagnostics are returned in the
                    X-Tile-Batches, X-Tile-Count and X-Seed headers.

Each request builds its own MapGenerator, so the app keeps no state between
requests and can be served by a threaded or multi-process WSGI server.
================================================================================
"""
import json
import logging
import time

from flask import Flask, Response, jsonify, request

from .errors import EncodingError, MapGenerationError
from .generator import MapGenerator
from .request import normalize_request

logger = logging.getLogger(__name__)


def _error(message: str, status: int) -> Response:
    response = jsonify({"error": message})
    response.status_code = status
    return response


def create_app() -> Flask:
    """Creates and configures the Flask application but does not start it."""
    app = Flask(__name__)

    @app.errorhandler(405)
    def method_not_allowed(e):
        if request.path == "/generate":
            response = _error("use POST with JSON body", 405)
        else:
            response = _error("method not allowed", 405)
        response.headers["Allow"] = ", ".join(e.valid_methods or [])
        return response

    @app.route("/")
    def index():
        return jsonify({"message": "POST a JSON payload to /generate to receive a PNG map"})

    @app.route("/healthz")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/generate", methods=["POST"])
    def generate():
        raw = request.get_data(cache=False)
        payload = None
        if raw.strip():
            try:
                payload = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                return _error(f"invalid JSON: {e}", 400)

        start = time.perf_counter()
        try:
            params = normalize_request(payload)
            result = MapGenerator(params, logger).generate()
        except EncodingError as e:
            logger.error(f"Map encoding failed: {e}", exc_info=True)
            return _error(str(e), 400)
        except MapGenerationError as e:
            logger.info(f"Rejected request: {e}")
            return _error(str(e), 400)

        response = Response(result.png, status=200, mimetype="image/png")
        response.headers["Cache-Control"] = "no-store"
        response.headers["X-Tile-Batches"] = str(result.batches)
        response.headers["X-Tile-Count"] = str(result.total_placements)
        response.headers["X-Seed"] = str(result.seed)
        logger.debug(f"POST /generate served in {(time.perf_counter() - start) * 1000:.1f}ms")
        return response

    return app
