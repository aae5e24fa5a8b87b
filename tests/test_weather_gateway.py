"""
Weather gateway tests against httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from app.exceptions import ProviderUnavailableError
from app.services.weather import WeatherGateway, parse_timeline_payload, round_half_up

BASE_URL = "https://weather.test/timeline"


def timeline_payload(days: int = 15) -> dict:
    return {
        "resolvedAddress": "Paris, Île-de-France, France",
        "currentConditions": {
            "temp": 17.5,
            "feelslike": 16.4,
            "humidity": 71.2,
            "windspeed": 13.0,
            "conditions": "Partially cloudy",
        },
        "days": [
            {
                "datetime": f"2026-10-{18 + i:02d}",
                "tempmin": 8.5 + i,
                "tempmax": 15.49 + i,
                "conditions": "Rain, Partially cloudy",
                "icon": "rain",
            }
            for i in range(days)
        ],
    }


def make_gateway(handler, **kwargs) -> WeatherGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WeatherGateway("secret-key", base_url=BASE_URL, http_client=client, **kwargs)


@pytest.mark.parametrize(
    "value, expected",
    [(17.5, 18), (16.4, 16), (-0.5, 0), (-1.5, -1), (-1.6, -2), (0, 0)],
)
def test_round_half_up_matches_whole_unit_rounding(value, expected):
    assert round_half_up(value) == expected


def test_parse_timeline_payload_normalizes_current_and_forecast():
    snapshot = parse_timeline_payload(timeline_payload())

    assert snapshot.current.temperature == 18
    assert snapshot.current.feels_like == 16
    assert snapshot.current.description == "partially cloudy"
    assert snapshot.current.humidity == 71.2
    assert snapshot.current.wind_speed == 13.0

    # Today is days[0]; the forecast is the next five days
    assert [day.date for day in snapshot.forecast] == [
        "2026-10-19",
        "2026-10-20",
        "2026-10-21",
        "2026-10-22",
        "2026-10-23",
    ]
    assert snapshot.forecast[0].min_temp == 10
    assert snapshot.forecast[0].max_temp == 16
    assert snapshot.forecast[0].description == "Rain, Partially cloudy"
    assert snapshot.forecast[0].icon == "rain"


def test_parse_timeline_payload_short_forecast():
    snapshot = parse_timeline_payload(timeline_payload(days=3))
    assert len(snapshot.forecast) == 2


@pytest.mark.asyncio
async def test_fetch_builds_provider_request():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=timeline_payload())

    gateway = make_gateway(handler)
    snapshot = await gateway.fetch_current_and_forecast("São Paulo")

    assert snapshot.current.temperature == 18
    request = seen[0]
    assert request.url.path == "/timeline/São Paulo"
    assert request.url.raw_path.startswith(b"/timeline/S%C3%A3o%20Paulo?")
    assert request.url.params["unitGroup"] == "metric"
    assert request.url.params["key"] == "secret-key"
    assert request.url.params["contentType"] == "json"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 429, 500])
async def test_http_error_status_is_provider_unavailable(status_code):
    gateway = make_gateway(lambda request: httpx.Response(status_code, text="error"))
    with pytest.raises(ProviderUnavailableError) as exc_info:
        await gateway.fetch_current_and_forecast("Paris")
    assert exc_info.value.city_name == "Paris"
    assert str(status_code) in exc_info.value.cause


@pytest.mark.asyncio
async def test_network_error_is_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = make_gateway(handler)
    with pytest.raises(ProviderUnavailableError):
        await gateway.fetch_current_and_forecast("Paris")


@pytest.mark.asyncio
async def test_timeout_is_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    gateway = make_gateway(handler)
    with pytest.raises(ProviderUnavailableError) as exc_info:
        await gateway.fetch_current_and_forecast("Paris")
    assert exc_info.value.cause == "timeout"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"days": []}),
        httpx.Response(200, json={"currentConditions": {"temp": "warm"}, "days": []}),
        httpx.Response(200, json=[1, 2, 3]),
    ],
)
async def test_malformed_payload_is_provider_unavailable(response):
    gateway = make_gateway(lambda request: response)
    with pytest.raises(ProviderUnavailableError) as exc_info:
        await gateway.fetch_current_and_forecast("Paris")
    assert exc_info.value.cause == "malformed payload"


@pytest.mark.asyncio
async def test_non_finite_temperature_is_provider_unavailable():
    # 1e400 overflows to inf when decoded
    body = json.dumps(timeline_payload()).replace('"temp": 17.5', '"temp": 1e400')
    gateway = make_gateway(lambda request: httpx.Response(200, content=body.encode()))

    with pytest.raises(ProviderUnavailableError) as exc_info:
        await gateway.fetch_current_and_forecast("Atlantis")
    assert exc_info.value.cause == "malformed payload"


@pytest.mark.asyncio
async def test_missing_api_key_is_provider_unavailable():
    gateway = WeatherGateway(None, base_url=BASE_URL)
    try:
        with pytest.raises(ProviderUnavailableError):
            await gateway.fetch_current_and_forecast("Paris")
    finally:
        await gateway.aclose()


@pytest.mark.asyncio
async def test_injected_client_is_not_closed_by_gateway():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    gateway = WeatherGateway("k", base_url=BASE_URL, http_client=client)
    await gateway.aclose()
    assert not client.is_closed
    await client.aclose()
