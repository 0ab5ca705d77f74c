"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000"
AUTH_HEADER = "x-admin-auth"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_PAGE_SIZE = 20

AUTH_FAILED_MESSAGE = "Authentication failed. Please check your admin token."
TIMEOUT_MESSAGE = "Request timed out. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."

# ------------------------------------------------------------------
# Durable storage keys
# ------------------------------------------------------------------

STORAGE_KEY_TOKEN = "ees_admin_token"
STORAGE_KEY_API_URL = "ees_admin_api_url"
STORAGE_KEY_SIDEBAR_COLLAPSED = "ees_admin_sidebar_collapsed"

# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

HEALTH = "/health"
READY = "/ready"

FLOORS = "/api/floors"
SYSTEM_STATUS = "/api/floors/system/status"
SYSTEM_CAMERAS_RESET = "/api/floors/system/cameras/reset"
SYSTEM_BULK_UPDATE = "/api/floors/system/bulk-update"

ROUTES = "/api/routes"
ROUTES_LATEST = "/api/routes/latest"
ROUTES_COMPUTE = "/api/routes/compute"

RECORDS = "/api/records"

SETTINGS = "/api/settings"
SETTINGS_SYNC = "/api/settings/sync"


def floor_path(floor_id: str) -> str:
    return f"{FLOORS}/{floor_id}"


def floor_status_path(floor_id: str) -> str:
    return f"{FLOORS}/{floor_id}/status"


def floor_cameras_reset_path(floor_id: str) -> str:
    return f"{FLOORS}/{floor_id}/cameras/reset"


def camera_status_path(floor_id: str, camera_id: str) -> str:
    return f"{FLOORS}/{floor_id}/cameras/{camera_id}/status"


def screen_status_path(floor_id: str, screen_id: str) -> str:
    return f"{FLOORS}/{floor_id}/screens/{screen_id}/status"


def record_path(record_id: str) -> str:
    return f"{RECORDS}/{record_id}"


# ------------------------------------------------------------------
# Floor authoring defaults
# ------------------------------------------------------------------

DEFAULT_STATIC_WEIGHT = 1.0
DEFAULT_PEOPLE_THRESHOLD = 10
DEFAULT_FIRE_THRESHOLD = 0.7
DEFAULT_SMOKE_THRESHOLD = 0.6
DEFAULT_NODE_TYPE = "room"

NODE_TYPES: tuple[str, ...] = ("room", "hall", "door", "entrance", "exit", "junction", "stairs", "elevator")

# Detection probability above which a record counts as fire/smoke.
DETECTION_THRESHOLD = 0.5
