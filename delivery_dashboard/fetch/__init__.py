"""Status service client."""

from delivery_dashboard.fetch.client import PollbotClient
from delivery_dashboard.fetch.errors import ServiceErrorClass, StatusServiceError
from delivery_dashboard.fetch.protocols import StatusServiceClient


__all__ = [
    "PollbotClient",
    "ServiceErrorClass",
    "StatusServiceClient",
    "StatusServiceError",
]
