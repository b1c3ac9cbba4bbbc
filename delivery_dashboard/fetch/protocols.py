"""Protocol interface for status service clients."""

from typing import Protocol, runtime_checkable

from delivery_dashboard.store.models import (
    CheckResult,
    ReleaseInfo,
    ReleaseInfoError,
    ServiceVersion,
)


@runtime_checkable
class StatusServiceClient(Protocol):
    """Protocol for status service clients.

    The orchestration layer only depends on these four reads, so a fake
    client can stand in for PollbotClient in tests.
    """

    async def get_service_version(self) -> ServiceVersion:
        """Fetch the status service build metadata."""
        ...

    async def get_ongoing_versions(self, product: str) -> dict[str, str]:
        """Fetch the channel to version mapping of a product."""
        ...

    async def get_release_info(
        self, product: str, version: str
    ) -> ReleaseInfo | ReleaseInfoError:
        """Fetch the release info and check list for a version."""
        ...

    async def check_status(self, url: str) -> CheckResult:
        """Fetch the result of a single check.

        Raises:
            StatusServiceError: If the request fails.
        """
        ...
