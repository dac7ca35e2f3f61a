from enum import Enum

DEFAULT_BASE_URL = "https://api.zoom.us/v2"
OAUTH_TOKEN_URL = "https://zoom.us/oauth/token"

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 300
DEFAULT_PAGE_SIZE = 30

PASSWORD_MAX_LENGTH = 10


class ZoomAuthType(str, Enum):
    """Supported ways of authenticating against the Zoom API"""

    TOKEN = "TOKEN"
    SERVER_TO_SERVER = "SERVER_TO_SERVER"
