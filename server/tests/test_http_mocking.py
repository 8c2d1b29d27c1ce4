# ─────────────────────────────────────────────────────────────────────────────
# HTTP Mocking Tests — respx against GoogleMapsImagery
# ─────────────────────────────────────────────────────────────────────────────
# respx intercepts httpx requests at the transport layer (in-process, no
# network), so the real provider code runs against canned Maps responses.
# ─────────────────────────────────────────────────────────────────────────────

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
import respx

from diorama.exceptions import ImageryFetchError
from diorama.providers.maps import (
    MOCK_STREET_VIEW_URL,
    STATIC_MAP_URL,
    STREET_VIEW_METADATA_URL,
    STREET_VIEW_URL,
    GoogleMapsImagery,
)

ADDRESS = "1600 Pennsylvania Ave NW, Washington, DC 20500"
JPEG = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def maps(http_client) -> GoogleMapsImagery:
    return GoogleMapsImagery("maps-key", http_client)


@pytest.fixture
def mock_maps(http_client) -> GoogleMapsImagery:
    return GoogleMapsImagery("", http_client)


class TestCoverage:
    @respx.mock
    async def test_ok(self, maps):
        route = respx.get(STREET_VIEW_METADATA_URL).mock(
            return_value=httpx.Response(200, json={"status": "OK", "pano_id": "abc"})
        )

        coverage = await maps.check_coverage(ADDRESS)

        assert coverage.available is True
        assert coverage.metadata["pano_id"] == "abc"
        params = route.calls.last.request.url.params
        assert params["location"] == ADDRESS
        assert params["key"] == "maps-key"

    @pytest.mark.parametrize("status", ["ZERO_RESULTS", "NOT_FOUND"])
    @respx.mock
    async def test_no_panorama(self, maps, status):
        respx.get(STREET_VIEW_METADATA_URL).mock(
            return_value=httpx.Response(200, json={"status": status})
        )

        coverage = await maps.check_coverage(ADDRESS)

        assert coverage.available is False
        assert coverage.status == status

    @pytest.mark.parametrize("status", ["REQUEST_DENIED", "OVER_QUERY_LIMIT", "UNKNOWN_ERROR"])
    @respx.mock
    async def test_provider_error_status_raises(self, maps, status):
        respx.get(STREET_VIEW_METADATA_URL).mock(
            return_value=httpx.Response(200, json={"status": status})
        )

        with pytest.raises(ImageryFetchError, match=status):
            await maps.check_coverage(ADDRESS)

    @respx.mock
    async def test_http_error_never_leaks_key(self, maps):
        respx.get(STREET_VIEW_METADATA_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(ImageryFetchError) as exc_info:
            await maps.street_view_metadata(ADDRESS)

        assert "HTTP 503" in exc_info.value.message
        assert "maps-key" not in exc_info.value.message

    @respx.mock
    async def test_connection_error(self, maps):
        respx.get(STREET_VIEW_METADATA_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ImageryFetchError, match="ConnectError"):
            await maps.street_view_metadata(ADDRESS)

    async def test_mock_mode_reports_coverage(self, mock_maps):
        coverage = await mock_maps.check_coverage(ADDRESS)
        assert coverage.available is True
        assert coverage.status == "MOCK"


class TestFetch:
    @respx.mock
    async def test_street_view(self, maps):
        route = respx.get(STREET_VIEW_URL).mock(
            return_value=httpx.Response(200, content=JPEG, headers={"content-type": "image/jpeg"})
        )

        image = await maps.fetch_street_view(ADDRESS, "640x480")

        assert image.data == JPEG
        assert image.mime_type == "image/jpeg"
        assert route.calls.last.request.url.params["size"] == "640x480"

    @respx.mock
    async def test_aerial(self, maps):
        route = respx.get(STATIC_MAP_URL).mock(
            return_value=httpx.Response(
                200, content=b"\x89PNG-sat", headers={"content-type": "image/png; charset=binary"}
            )
        )

        image = await maps.fetch_aerial_view(ADDRESS, "640x640", 19)

        assert image.mime_type == "image/png"
        params = route.calls.last.request.url.params
        assert params["maptype"] == "satellite"
        assert params["zoom"] == "19"
        assert params["center"] == ADDRESS

    @respx.mock
    async def test_http_failure(self, maps):
        respx.get(STREET_VIEW_URL).mock(return_value=httpx.Response(403))

        with pytest.raises(ImageryFetchError, match="HTTP 403"):
            await maps.fetch_street_view(ADDRESS, "640x480")

    @respx.mock
    async def test_empty_body(self, maps):
        respx.get(STATIC_MAP_URL).mock(return_value=httpx.Response(200, content=b""))

        with pytest.raises(ImageryFetchError, match="empty image body"):
            await maps.fetch_aerial_view(ADDRESS, "640x640", 19)

    async def test_mock_mode_refuses_fetch(self, mock_maps):
        with pytest.raises(ImageryFetchError, match="not configured"):
            await mock_maps.fetch_street_view(ADDRESS, "640x480")


class TestUrls:
    def test_street_view_url(self, maps):
        url = urlparse(maps.street_view_url(ADDRESS, "640x480", fov=80, pitch=5, heading=180))
        params = parse_qs(url.query)

        assert f"{url.scheme}://{url.netloc}{url.path}" == STREET_VIEW_URL
        assert params["location"] == [ADDRESS]
        assert params["fov"] == ["80"]
        assert params["heading"] == ["180"]

    def test_heading_omitted_by_default(self, maps):
        assert "heading" not in maps.street_view_url(ADDRESS, "640x480")

    def test_mock_street_view_url(self, mock_maps):
        assert mock_maps.street_view_url(ADDRESS, "640x480") == MOCK_STREET_VIEW_URL

    def test_aerial_url(self, maps):
        params = parse_qs(urlparse(maps.aerial_view_url(ADDRESS, "640x640", 18)).query)
        assert params["maptype"] == ["satellite"]
        assert params["zoom"] == ["18"]
