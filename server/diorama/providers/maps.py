# ─────────────────────────────────────────────────────────────────────────────
# Google Maps imagery — Street View Static, Street View metadata, Static Maps
# ─────────────────────────────────────────────────────────────────────────────
# Street View Static answers 200 with a grey placeholder when it has no
# panorama, so coverage must be checked on the metadata endpoint first.
# Without an API key every call answers in mock mode.
# ─────────────────────────────────────────────────────────────────────────────

from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from diorama.exceptions import ImageryFetchError
from diorama.providers.protocol import CoverageResult, ImageData

logger = structlog.get_logger(__name__)

STREET_VIEW_URL = "https://maps.googleapis.com/maps/api/streetview"
STREET_VIEW_METADATA_URL = "https://maps.googleapis.com/maps/api/streetview/metadata"
STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
MOCK_STREET_VIEW_URL = "https://via.placeholder.com/640x480/f5f5f5/666?text=Street+View+Mock"

# Metadata statuses that mean "no panorama here" rather than a request failure
_NO_COVERAGE_STATUSES = frozenset({"ZERO_RESULTS", "NOT_FOUND"})

_MOCK_METADATA: dict[str, Any] = {
    "status": "MOCK",
    "location": {"lat": 33.6, "lng": -117.7},
    "pano_id": "mock_pano_id",
}


class GoogleMapsImagery:
    """ImageryProvider backed by the Google Maps Platform HTTP APIs."""

    def __init__(self, api_key: str, http_client: httpx.AsyncClient) -> None:
        self._api_key = api_key
        self._http = http_client

    @property
    def is_mock(self) -> bool:
        return not self._api_key

    # ── Coverage ─────────────────────────────────────────────────────────

    async def street_view_metadata(self, address: str) -> dict[str, Any]:
        """Raw metadata JSON (status, pano_id, location, date)."""
        if self.is_mock:
            return dict(_MOCK_METADATA)

        try:
            response = await self._http.get(
                STREET_VIEW_METADATA_URL,
                params={"location": address, "key": self._api_key},
            )
            response.raise_for_status()
            data: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ImageryFetchError("street_view_metadata", _describe(e)) from e
        return data

    async def check_coverage(self, address: str) -> CoverageResult:
        """Whether street-level imagery exists. Raises on provider errors."""
        metadata = await self.street_view_metadata(address)
        status = str(metadata.get("status", "UNKNOWN_ERROR"))

        if status in ("OK", "MOCK"):
            return CoverageResult(status=status, available=True, metadata=metadata)
        if status in _NO_COVERAGE_STATUSES:
            return CoverageResult(status=status, available=False, metadata=metadata)

        # REQUEST_DENIED, OVER_QUERY_LIMIT, INVALID_REQUEST, UNKNOWN_ERROR
        raise ImageryFetchError("street_view_metadata", f"status {status}")

    # ── URLs ─────────────────────────────────────────────────────────────

    def street_view_url(
        self,
        address: str,
        size: str,
        fov: int = 90,
        pitch: int = 10,
        heading: int | None = None,
    ) -> str:
        if self.is_mock:
            return MOCK_STREET_VIEW_URL
        params: dict[str, Any] = {
            "location": address,
            "size": size,
            "fov": fov,
            "pitch": pitch,
            "key": self._api_key,
        }
        if heading is not None:
            params["heading"] = heading
        return f"{STREET_VIEW_URL}?{urlencode(params)}"

    def aerial_view_url(self, address: str, size: str, zoom: int) -> str:
        params = {
            "center": address,
            "zoom": zoom,
            "size": size,
            "maptype": "satellite",
            "key": self._api_key,
        }
        return f"{STATIC_MAP_URL}?{urlencode(params)}"

    # ── Fetch ────────────────────────────────────────────────────────────

    async def fetch_street_view(self, address: str, size: str) -> ImageData:
        return await self._fetch(
            "street_view",
            STREET_VIEW_URL,
            {"location": address, "size": size, "key": self._api_key},
            default_mime="image/jpeg",
        )

    async def fetch_aerial_view(self, address: str, size: str, zoom: int) -> ImageData:
        return await self._fetch(
            "aerial",
            STATIC_MAP_URL,
            {
                "center": address,
                "zoom": zoom,
                "size": size,
                "maptype": "satellite",
                "key": self._api_key,
            },
            default_mime="image/png",
        )

    async def _fetch(
        self, kind: str, url: str, params: dict[str, Any], default_mime: str
    ) -> ImageData:
        if self.is_mock:
            raise ImageryFetchError(kind, "Maps API key not configured")

        try:
            response = await self._http.get(url, params=params)
        except httpx.HTTPError as e:
            raise ImageryFetchError(kind, _describe(e)) from e

        if not response.is_success:
            raise ImageryFetchError(kind, f"HTTP {response.status_code} {response.reason_phrase}")
        if not response.content:
            raise ImageryFetchError(kind, "empty image body")

        mime_type = response.headers.get("content-type", default_mime).split(";")[0].strip()
        logger.debug("imagery_fetched", kind=kind, bytes=len(response.content), mime=mime_type)
        return ImageData(data=response.content, mime_type=mime_type or default_mime)


def _describe(error: Exception) -> str:
    """Error text without the request URL (which carries the API key)."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return type(error).__name__
