import httpx
import pytest

from widgets.client import AdsApiClient, AdsApiError


def make_client(handler) -> AdsApiClient:
    return AdsApiClient(base_url="http://ads.test/api", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_ads_query_and_parse(ads_client, api_stub):
    api_stub.ads = [
        {"id": 5, "title": "Glucofix", "medicineName": "Glucofix XR", "indications": "Diabetes", "link": "https://glucofix.example"}
    ]

    ads = await ads_client.fetch_ads("doctor", is_new_medicine=True)

    request = api_stub.requests[0]
    assert request.url.path == "/api/ads"
    assert dict(request.url.params) == {"targetAudience": "doctor", "isNewMedicine": "true", "limit": "10"}
    assert len(ads) == 1
    assert ads[0].id == "5"
    assert ads[0].medicine_name == "Glucofix XR"
    assert ads[0].indication_list == ["Diabetes"]


@pytest.mark.asyncio
async def test_fetch_ads_omits_filter_for_patients(ads_client, api_stub):
    await ads_client.fetch_ads("patient")

    assert "isNewMedicine" not in api_stub.requests[0].url.params


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"ads": None}, {"ads": "oops"}, ["not", "a", "dict"]])
async def test_fetch_ads_without_usable_list_is_empty(body):
    async with make_client(lambda request: httpx.Response(200, json=body)) as client:
        assert await client.fetch_ads("patient") == []


@pytest.mark.asyncio
async def test_fetch_ads_http_error():
    async with make_client(lambda request: httpx.Response(503, json={"detail": "down"})) as client:
        with pytest.raises(AdsApiError):
            await client.fetch_ads("patient")

        result = await client.try_fetch_ads("patient")
        assert not result.ok
        assert result.ads == []


@pytest.mark.asyncio
async def test_fetch_ads_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        result = await client.try_fetch_ads("doctor", is_new_medicine=False)

    assert not result.ok
    assert "connection refused" in result.error


@pytest.mark.asyncio
async def test_fetch_ads_non_json_body():
    async with make_client(lambda request: httpx.Response(200, text="<html>502</html>")) as client:
        with pytest.raises(AdsApiError):
            await client.fetch_ads("patient")


@pytest.mark.asyncio
async def test_fetch_ads_malformed_item():
    async with make_client(lambda request: httpx.Response(200, json={"ads": [{"title": "no id"}]})) as client:
        result = await client.try_fetch_ads("patient")

    assert not result.ok


@pytest.mark.asyncio
async def test_track_click(ads_client, api_stub):
    await ads_client.track_click("a1")

    assert api_stub.clicks == ["/api/ads/a1/click"]


@pytest.mark.asyncio
async def test_track_click_failure_raises(api_stub):
    api_stub.click_status = 500
    async with make_client(api_stub) as client:
        with pytest.raises(AdsApiError):
            await client.track_click("a1")


@pytest.mark.asyncio
async def test_bearer_token_sent(api_stub):
    async with AdsApiClient(base_url="http://ads.test/api", token="abc", transport=httpx.MockTransport(api_stub)) as client:
        await client.fetch_ads("patient")

    assert api_stub.requests[0].headers["Authorization"] == "Bearer abc"
