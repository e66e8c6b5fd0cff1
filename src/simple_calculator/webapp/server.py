"""
Flask server for the calculator web UI.

Serves the keypad page and provides API endpoints that drive the engine.
"""

import logging
import threading
from typing import Dict, Optional

from flask import Flask, current_app, jsonify, render_template, request

from ..engine import DIGITS, CalculatorEngine, InvalidToken

logger = logging.getLogger(__name__)

EXTENSION_KEY = "calculator"

# Keypad rows as laid out on the page
KEYPAD_ROWS = [
    ["7", "8", "9", "/"],
    ["4", "5", "6", "*"],
    ["1", "2", "3", "-"],
    ["0", "C", "=", "+"],
]


class EngineHolder:
    """Owns one engine and serializes access from request threads."""

    def __init__(self, engine: CalculatorEngine):
        self.engine = engine
        self.lock = threading.Lock()


def _holder() -> EngineHolder:
    return current_app.extensions[EXTENSION_KEY]


def _state() -> Dict:
    holder = _holder()
    with holder.lock:
        return holder.engine.snapshot()


def index():
    """Render the calculator keypad."""
    return render_template("index.html", keypad_rows=KEYPAD_ROWS)


def calculate():
    """
    Handle calculator input via API.

    Expected JSON payload:
        {
            "action": "digit|op|equals|clear|press",
            "value": "..."  // digit, operator key or button label
        }

    Returns:
        JSON response with the current calculator state
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return jsonify({"error": "No data provided"}), 400

    action = data.get("action", "")
    value = data.get("value")
    holder = _holder()

    with holder.lock:
        engine = holder.engine
        try:
            if action == "digit":
                if not isinstance(value, str) or value not in DIGITS:
                    raise InvalidToken(f"Not a digit: {value!r}")
                engine.submit_digit(value)
            elif action == "op":
                engine.submit_operator(value)
            elif action == "equals":
                engine.evaluate()
            elif action == "clear":
                engine.clear()
            elif action == "press":
                if not isinstance(value, str):
                    raise InvalidToken(f"Unknown key: {value!r}")
                engine.press(value)
            else:
                return jsonify({"error": f"Unknown action: {action}"}), 400
        except InvalidToken as e:
            return jsonify({"error": str(e)}), 400

        return jsonify(engine.snapshot())


def state():
    """Return the current calculator state."""
    return jsonify(_state())


def history():
    """Return the completed computations, oldest first."""
    return jsonify({"history": _state()["history"]})


def reset():
    """Clear the calculator. History is kept."""
    holder = _holder()
    with holder.lock:
        holder.engine.clear()
        return jsonify(holder.engine.snapshot())


def create_app(engine: Optional[CalculatorEngine] = None, config: Optional[Dict] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        engine: Engine to serve; a fresh one is created when omitted
        config: Values merged into ``app.config``

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    if config:
        app.config.update(config)
    # Operator symbols (− × ÷) are sent as-is
    app.json.ensure_ascii = False

    app.extensions[EXTENSION_KEY] = EngineHolder(engine or CalculatorEngine())

    app.add_url_rule("/", "index", index)
    app.add_url_rule("/api/calculate", "calculate", calculate, methods=["POST"])
    app.add_url_rule("/api/state", "state", state, methods=["GET"])
    app.add_url_rule("/api/history", "history", history, methods=["GET"])
    app.add_url_rule("/api/reset", "reset", reset, methods=["POST"])
    return app


def run_server(host: str, port: int, debug: bool = False) -> None:
    """Run the Flask development server."""
    app = create_app()
    logger.info("Starting calculator web server at http://%s:%s", host, port)
    app.run(host=host, port=port, debug=debug)
