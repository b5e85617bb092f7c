"""Constants for the InstaMapper integration."""

from datetime import timedelta

DOMAIN = "instamapper"

API_HOST = "www.instamapper.com"
API_PATH = "/api"
API_TIMEOUT = 30

ACTION_GET_POSITIONS = "getPositions"

# Hard cap on positions per request imposed by the service.
MAX_POSITIONS = 1000

# Minimum seconds between requests per the InstaMapper API terms.
HTTP_REQUEST_INTERVAL = 10
HTTPS_REQUEST_INTERVAL = 30

CONF_API_KEY = "api_key"
CONF_SSL = "ssl"

DATA_CLIENTS = f"{DOMAIN}_clients"
DATA_VALIDATED_POSITIONS = f"{DOMAIN}_validated_positions"

DEFAULT_SSL = True

UPDATE_INTERVAL = timedelta(minutes=1)

ATTR_SPEED = "speed"
ATTR_HEADING = "heading"
ATTR_ALTITUDE = "altitude"
ATTR_DEVICE_KEY = "device_key"
ATTR_LAST_GPS_UPDATE = "last_gps_update"
