"""HTTP client for the donor API consumed by the dashboard."""

from typing import Any, Dict, Optional

import requests

from config.config import API_BASE_URL, RECENT_DONATIONS_LIMIT, REQUEST_TIMEOUT_SEC
from config.schemas import (
    AvailableRequestsResponse,
    DonorDetailsResponse,
    DonorProfileResponse,
    DonorStatsResponse,
    RecentDonationsResponse,
)
from utils.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Raised when a request fails in transport, returns an error status or bad JSON."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DonorApiClient:
    """Thin wrapper over ``requests`` for the donor endpoints.

    Every method returns the decoded JSON body. Failures raise :class:`ApiError`;
    the profile lookup is the exception, where a 404 body is returned as-is so
    callers can tell "no profile yet" from a failed request.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None,
             allow_not_found: bool = False) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"GET {path} failed: {e}") from e

        if response.status_code == 404 and allow_not_found:
            return self._decode(response, path)
        if response.status_code >= 400:
            raise ApiError(
                f"GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return self._decode(response, path)

    @staticmethod
    def _decode(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"GET {path} returned invalid JSON: {e}",
                           status_code=response.status_code) from e

    # ----- liveness -----

    def liveness(self) -> str:
        try:
            response = self.session.get(f"{self.base_url}/", timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ApiError(f"GET / failed: {e}") from e
        return response.text

    def health(self) -> Dict[str, Any]:
        return self._get("/health")

    # ----- donor resources -----

    def get_donor_profile(self, user_id: int) -> DonorProfileResponse:
        return self._get(f"/api/profile/donor/{user_id}", allow_not_found=True)

    def get_donor_stats(self, user_id: int) -> DonorStatsResponse:
        return self._get(f"/api/blood-requests/donor/{user_id}/stats")

    def get_available_for_donor(self, user_id: int) -> AvailableRequestsResponse:
        return self._get(f"/api/blood-requests/available/{user_id}")

    def get_donor_details(self, user_id: int) -> DonorDetailsResponse:
        return self._get(f"/api/donor/{user_id}/details")

    def get_recent_donations(self, user_id: int,
                             limit: int = RECENT_DONATIONS_LIMIT) -> RecentDonationsResponse:
        return self._get(f"/api/donor/{user_id}/recent-donations", params={"limit": limit})

    def get_unread_notification_count(self, user_id: int) -> int:
        data = self._get(f"/api/notifications/{user_id}/unread-count")
        return int(data.get("count", 0))

    def close(self) -> None:
        self.session.close()
