# Global knobs (display + detection thresholds + schedule)
SCREEN_W, SCREEN_H = 900, 760
FPS = 30

# Notification admission thresholds
NOTIFICATION_RADIUS_KM = 5.0      # candidate must be strictly closer than this
MINIMUM_ALTITUDE_FT = 10000.0     # candidate must be strictly higher than this

# Poll schedule (s). OpenSky anonymous access is rate limited, so live is coarser.
LIVE_POLL_S = 10.0
SYNTHETIC_POLL_S = 4.0

# Idle "scanning" needle rotation (deg/s)
IDLE_ROTATION_DPS = 30.0

# Fallback position when the location provider fails (lat, lon)
DEFAULT_LOCATION = (10.5925, 76.1555)
FALLBACK_ON_DENIED = True

# Geodesy
EARTH_RADIUS_KM = 6371.0
MPS_TO_KT = 1.944
M_TO_FT = 3.28084

# ---------------------------------------------------------------------
# Live data source (OpenSky REST "states/all" endpoint)
# ---------------------------------------------------------------------
OPENSKY_URL = "https://opensky-network.org/api/states/all"
OPENSKY_TIMEOUT_S = 8.0
OPENSKY_RADIUS_KM = 50.0          # half-width of the bounding box we ask for

# ---------------------------------------------------------------------
# Narration
# ---------------------------------------------------------------------
# "compound": ["between", "North", "and", "East"]
# "named":    ["NorthEast"]
NARRATION_POLICY = "compound"

# Clip files looked up in --clips DIR, one per token
CLIP_EXTENSIONS = (".ogg", ".wav", ".mp3")
ALERT_CLIP = "alert"

# Spoken text per token when using the speech player
SPEECH_WORDS = {
    "North": "north",
    "South": "south",
    "East": "east",
    "West": "west",
    "NorthEast": "north east",
    "SouthEast": "south east",
    "SouthWest": "south west",
    "NorthWest": "north west",
    "between": "between",
    "and": "and",
}
ALERT_SPEECH = "Plane overhead. Look up!"
SPEECH_RATE = 180
SPEECH_VOLUME = 1.0


def speech_clips() -> dict:
    """Token -> spoken phrase mapping for the speech player."""
    clips = dict(SPEECH_WORDS)
    clips[ALERT_CLIP] = ALERT_SPEECH
    return clips
