# floodguard_config.py
import os

# --- MAP DEFAULTS (Bcons Plaza, Binh Duong) ---
# Reports created without a GPS fix are pinned here.
MAP_CENTER = (10.8850, 106.7810)
DEFAULT_ZOOM = 14

# --- ALERTING RADII (km) ---
LOCAL_TRUTH_RADIUS_KM = 0.05          # 50m: "the user is standing here"
OVERRIDE_SUPPRESSION_RADIUS_KM = 1.0  # warnings silenced by a local safe report
ALERT_RADIUS_KM = 2.0
SAFE_POINT_RADIUS_KM = 2.0            # walkable evacuation target
MAX_NAVIGATION_RADIUS_KM = 30

# --- TIME WINDOW SLIDER (minutes) ---
TIME_MODES = {
    "urgent": {"default": 240, "min": 5, "max": 240, "step": 5},
    "day": {"default": 720, "min": 5, "max": 720, "step": 30},
    "history": None,
}

# --- AI CLASSIFIER ---
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

FALLBACK_ANALYSIS = {
    "depth": "Unknown",
    "risk": "Low",
    "objectsDetected": ["Analysis Failed"],
    "vulnerablePeople": [],
    "advice": "Could not analyze image. Please proceed with caution.",
}

# --- SIREN ---
SIREN_SOUND_URL = os.getenv(
    "SIREN_SOUND_URL",
    "https://assets.mixkit.co/active_storage/sfx/2869/2869-preview.mp3",
)
SIREN_TIMEOUT_SECONDS = 3

# --- NAVIGATION ---
DIRECTIONS_URL = "https://www.google.com/maps/dir/"


def get_gemini_key():
    return os.getenv("GEMINI_API_KEY")


def get_siren_webhook():
    return os.getenv("SIREN_WEBHOOK_URL") or None


def seed_demo_enabled() -> bool:
    """FLOODGUARD_SEED_DEMO=0 starts the service with an empty report feed."""
    return os.getenv("FLOODGUARD_SEED_DEMO", "1").strip().lower() not in ("0", "false", "no", "off")


def get_allowed_origins():
    raw = os.getenv("ALLOWED_ORIGINS", "")
    origins = [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]
    return origins or [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
