"""Error types for the status service client."""

from enum import Enum


class ServiceErrorClass(str, Enum):
    """Classification of status service failures.

    - TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - HTTP_4XX: Client error response
    - HTTP_5XX: Server error response
    - INVALID_JSON: Response body is not JSON
    - INVALID_PAYLOAD: JSON does not match the expected shape
    - UNKNOWN: Unclassified error
    """

    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    INVALID_JSON = "INVALID_JSON"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    UNKNOWN = "UNKNOWN"


class StatusServiceError(Exception):
    """Raised when a status service request fails.

    Attributes:
        error_class: Classification of the failure.
        message: Human-readable message.
        url: Requested URL.
        status_code: HTTP status code, if a response was received.
    """

    def __init__(
        self,
        error_class: ServiceErrorClass,
        message: str,
        url: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.url = url
        self.status_code = status_code
