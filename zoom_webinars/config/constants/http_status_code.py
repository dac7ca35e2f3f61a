from enum import Enum


class HttpStatusCode(Enum):
    """Constants for HTTP status codes"""

    # 2xx Success
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # 3xx
    MULTIPLE_CHOICES = 300

    # 4xx Client Errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    TOO_MANY_REQUESTS = 429

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500

    @classmethod
    def is_success(cls, status_code: int) -> bool:
        return cls.OK.value <= status_code < cls.MULTIPLE_CHOICES.value
