import os
import uuid
import base64
import logging
from flask import Flask, Response, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger('werkzeug')
log.setLevel(logging.ERROR)

from floodguard_config import (
    DEFAULT_ZOOM,
    MAP_CENTER,
    SAFE_POINT_RADIUS_KM,
    get_allowed_origins,
    seed_demo_enabled,
)
from integrations import GeminiFloodClassifier, Siren, plan_navigation
from risk_engine import (
    FloodWatchSession,
    InvalidCoordinates,
    ReportNotFound,
    TimeMode,
    distance_km,
    get_policy,
    parse_location,
)
from risk_engine.time_window import parse_risk_filter
from utils.time_labels import format_time_ago, render_time_label

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# --- Flask App Initialization ---
app = Flask(__name__)

ALLOWED_ORIGINS = get_allowed_origins()

CORS(app, resources={r"/*": {
    "origins": ALLOWED_ORIGINS,
    "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    "allow_headers": ["Content-Type", "Authorization", "Accept"]
}})

# --- SESSION (In-Memory) ---
# One coordinating context owns the report feed, the user's fix and the alert state.
SESSION = FloodWatchSession(
    classifier=GeminiFloodClassifier(),
    siren=Siren(),
    seed_demo=seed_demo_enabled(),
)

# Uploaded photos, served by id so the report feed only carries a short URL.
UPLOADS = {}


def _read_window_args():
    """mode / window / risk query args -> (TimeMode, minutes, risk filter)."""
    mode = TimeMode(request.args.get("mode", TimeMode.URGENT.value))
    risk = parse_risk_filter(request.args.get("risk"))
    policy = get_policy(mode)
    if policy is None:
        return mode, 0, risk

    raw_window = request.args.get("window")
    if raw_window is None:
        return mode, policy.default_minutes, risk
    return mode, policy.check(int(raw_window)), risk


def _serialize(report, now=None):
    data = report.to_dict()
    user_loc = SESSION.user_location
    data["distance_km"] = round(distance_km(user_loc, report.location), 2) if user_loc else None
    data["time_ago"] = format_time_ago(report.timestamp, now or SESSION.clock())
    return data


def _danger_payload(state):
    payload = state.to_dict()
    payload["has_location"] = SESSION.user_location is not None
    return payload


# --- 1. Health Check Route ---
@app.route('/health', methods=['GET'])
def health():
    return jsonify({
        "status": "healthy",
        "reports": len(SESSION.store),
        "classifier": "online" if SESSION.classifier.available else "fallback",
    }), 200


@app.route('/config', methods=['GET'])
def map_config():
    return jsonify({
        "map_center": {"lat": MAP_CENTER[0], "lng": MAP_CENTER[1]},
        "zoom": DEFAULT_ZOOM,
        "time_modes": [p.to_dict() for p in (get_policy(m) for m in TimeMode) if p],
    })


@app.route('/reports', methods=['GET'])
def list_reports():
    try:
        mode, window, risk = _read_window_args()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    active = SESSION.active_reports(mode, window, risk)
    now = SESSION.clock()
    return jsonify({
        "mode": mode.value,
        "window_minutes": window if mode is not TimeMode.HISTORY else None,
        "label": render_time_label(mode.value, window),
        "count": len(active),
        "reports": [_serialize(r, now) for r in active],
    })


@app.route('/reports', methods=['POST', 'OPTIONS'])
def submit_report():
    if request.method == 'OPTIONS':
        return jsonify({"status": "ok"}), 200

    try:
        upload = request.files.get("image")
        if upload is not None:
            image_bytes = upload.read()
            mime_type = upload.mimetype or "image/jpeg"
        else:
            data = request.get_json(silent=True) or {}
            if not data.get("image_base64"):
                return jsonify({"error": "An image file or image_base64 is required"}), 400
            image_bytes = base64.b64decode(data["image_base64"], validate=True)
            mime_type = data.get("mime_type", "image/jpeg")

        if not image_bytes:
            return jsonify({"error": "Empty image"}), 400

        upload_id = uuid.uuid4().hex
        UPLOADS[upload_id] = (image_bytes, mime_type)
        report = SESSION.submit_photo(image_bytes, mime_type, image_url=f"/uploads/{upload_id}")
        return jsonify({
            "report": _serialize(report),
            "danger": _danger_payload(SESSION.danger_state),
        }), 201

    except ValueError as e:
        return jsonify({"error": f"Invalid image payload: {e}"}), 400
    except Exception as e:
        logger.exception(f"Report submission error: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/uploads/<upload_id>', methods=['GET'])
def get_upload(upload_id):
    upload = UPLOADS.get(upload_id)
    if upload is None:
        return jsonify({"error": "Image not found"}), 404
    image_bytes, mime_type = upload
    return Response(image_bytes, mimetype=mime_type)


@app.route('/reports/<report_id>', methods=['GET'])
def get_report(report_id):
    try:
        return jsonify(_serialize(SESSION.get_report(report_id)))
    except ReportNotFound:
        return jsonify({"error": "Report not found"}), 404


@app.route('/reports/<report_id>/safe_point', methods=['GET'])
def safe_point(report_id):
    try:
        radius = float(request.args.get("radius", SAFE_POINT_RADIUS_KM))
        match = SESSION.safe_point_for(report_id, radius)
    except ReportNotFound:
        return jsonify({"error": "Report not found"}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if match is None:
        return jsonify({"safe_point": None, "message": "No nearby safe zone"})

    return jsonify({
        "safe_point": match.to_dict(),
        "navigation": plan_navigation(match.report.location, SESSION.user_location),
    })


@app.route('/reports/<report_id>/navigation', methods=['GET'])
def navigate_to_report(report_id):
    try:
        report = SESSION.get_report(report_id)
    except ReportNotFound:
        return jsonify({"error": "Report not found"}), 404
    return jsonify(plan_navigation(report.location, SESSION.user_location))


@app.route('/reports/<report_id>/status', methods=['PATCH', 'OPTIONS'])
def update_status(report_id):
    if request.method == 'OPTIONS':
        return jsonify({"status": "ok"}), 200
    data = request.get_json(silent=True) or {}
    try:
        report = SESSION.set_status(report_id, data.get("status"))
    except ReportNotFound:
        return jsonify({"error": "Report not found"}), 404
    except ValueError:
        return jsonify({"error": "status must be one of Pending, Acknowledged, Rescued"}), 400
    logger.info(f"Report {report_id} status -> {report.status.value}")
    return jsonify(_serialize(report))


@app.route('/location', methods=['POST', 'OPTIONS'])
def update_location():
    if request.method == 'OPTIONS':
        return jsonify({"status": "ok"}), 200
    try:
        location = parse_location(request.get_json(silent=True))
    except InvalidCoordinates as e:
        return jsonify({"error": str(e)}), 400

    state = SESSION.update_location(location)
    return jsonify(_danger_payload(state))


@app.route('/location', methods=['DELETE'])
def clear_location():
    # GPS fix lost: the last danger state is kept as-is.
    state = SESSION.clear_location()
    logger.info("User location cleared")
    return jsonify(_danger_payload(state))


@app.route('/danger', methods=['GET'])
def danger():
    return jsonify(_danger_payload(SESSION.danger_state))


@app.route('/sos', methods=['POST', 'OPTIONS'])
def sos():
    if request.method == 'OPTIONS':
        return jsonify({"status": "ok"}), 200
    data = request.get_json(silent=True) or {}
    try:
        report = SESSION.raise_sos(note=data.get("note", ""))
        return jsonify({"report": _serialize(report)}), 201
    except Exception as e:
        logger.exception(f"SOS error: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/stats', methods=['GET'])
def stats():
    try:
        mode, window, risk = _read_window_args()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    result = SESSION.rescue_stats(mode, window, risk)
    result["label"] = render_time_label(mode.value, window)
    result["status_counts"] = SESSION.status_counts()
    return jsonify(result)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(debug=False, host="0.0.0.0", port=port, threaded=True)
