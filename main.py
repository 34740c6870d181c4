"""
Flask entry point.

    flask --app main run
"""

import logging

from flask import Flask, jsonify, request

from adapters.http import handle_request
from restnodes.config import get_settings

logging.basicConfig(level=get_settings().log_level.upper())

app = Flask(__name__)


@app.route("/", defaults={"path": ""}, methods=["GET", "POST"])
@app.route("/<path:path>", methods=["GET", "POST"])
def dispatch(path: str):
    body, status = handle_request(request)
    return jsonify(body), status


if __name__ == "__main__":
    app.run(port=8080, debug=not get_settings().is_production())
