"""Client for the GitHub Enterprise cost-center billing API."""
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from cost_center_report.core.errors import NetworkError, ParseError
from cost_center_report.core.schema import APIConfig

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"

_STATUS_ERRORS: dict[int, tuple[str, str]] = {
    401: (NetworkError.UNAUTHENTICATED, "Authentication failed. Please check your GitHub token."),
    403: (
        NetworkError.FORBIDDEN,
        "Access denied. You may not have permission to access this enterprise's cost centers.",
    ),
    404: (NetworkError.NOT_FOUND, "Enterprise not found. Please check your enterprise slug."),
}


def error_for_status(status_code: int) -> NetworkError:
    """Map a non-success status code onto one of the known failure causes."""

    kind, message = _STATUS_ERRORS.get(
        status_code,
        (NetworkError.OTHER, f"API request failed with status {status_code}"),
    )
    return NetworkError(message, kind=kind, status_code=status_code)


class GitHubBillingClient:
    """Issues the single authenticated GET that feeds the report pipeline."""

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_base = api_base.rstrip("/")
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def cost_centers_url(self, enterprise: str) -> str:
        return f"{self._api_base}/enterprises/{quote(enterprise, safe='')}/settings/billing/cost-centers"

    @staticmethod
    def _build_headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def fetch_cost_centers(self, config: APIConfig) -> Any:
        url = self.cost_centers_url(config.enterprise)
        logger.info("Fetching cost centers for enterprise %s", config.enterprise)
        try:
            response = self._client.get(url, headers=self._build_headers(config.token))
        except httpx.HTTPError as exc:
            logger.warning("Cost center request to %s failed: %s", url, exc)
            raise NetworkError("Failed to fetch data from GitHub API") from exc

        if not response.is_success:
            logger.warning("Cost center request to %s returned %s", url, response.status_code)
            raise error_for_status(response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"Invalid JSON in API response: {exc}") from exc

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = ["GitHubBillingClient", "error_for_status"]
