"""HTTP API for incubator status and control commands."""

from flask import Flask, jsonify, request

from errors import UnknownCommand


def _reading_dict(reading):
    return {
        "ts": reading.simulated_time_ms,
        "id": reading.unit_id,
        "temperature": reading.temperature,
        "heatlamp": reading.heatlamp,
    }


def create_app(simulator, ingestor):
    """
    Build the API around a running simulator.

    Status comes from the simulator's latest snapshot, never from live
    incubator state. Commands go through the same ingestor as MQTT.
    """
    app = Flask(__name__)

    @app.route("/api/state")
    def api_state():
        return jsonify({
            "state": simulator.get_state(),
            "simulated_time_ms": simulator.current_time_ms,
            "readings": [_reading_dict(r) for r in simulator.latest_snapshot],
        })

    @app.route("/api/command", methods=["POST"])
    def api_command():
        payload = request.get_json(silent=True) or {}
        try:
            code = int(payload["command"])
            unit_id = payload.get("id")
            if unit_id is not None:
                unit_id = int(unit_id)
        except (KeyError, TypeError, ValueError):
            return jsonify({"ok": False, "error": "expected {\"command\": int, \"id\": int}"}), 400
        try:
            record = ingestor.ingest(code, unit_id)
        except UnknownCommand as exc:
            return jsonify({"ok": False, "error": str(exc)}), 400
        return jsonify({
            "ok": True,
            "scheduled_time_ms": record.scheduled_time_ms,
            "command": record.kind.name,
            "id": record.unit_id,
        }), 202

    return app
