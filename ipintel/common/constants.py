"""Application constants."""

USER_AGENT = "ip-intel/1.0 (+aggregated ip intelligence)"
AGENT_NAME = "ip-intel-agent"

PRIMARY = "ip-api"
SECONDARY = "ipinfo"
TERTIARY = "ipwho"
SOURCE_PRIORITY = (PRIMARY, SECONDARY, TERTIARY)

OPERATIONS = (
    "overview",
    "lookup",
    "full",
    "batch",
    "threat",
    "distance",
)

STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"

BATCH_MIN_IPS = 1
BATCH_MAX_IPS = 10

EARTH_RADIUS_KM = 6371.0
KM_TO_MILES = 0.621371

RISK_HIGH_THRESHOLD = 50
RISK_MEDIUM_THRESHOLD = 20

EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

JSON_LOG_FIELDS = (
    "timestamp",
    "request_id",
    "operation",
    "source",
    "ip",
    "event",
    "status",
    "duration_ms",
    "error_code",
    "message",
)
