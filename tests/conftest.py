"""
Pytest configuration and common fixtures for geotime application tests.

Provider HTTP traffic is served by httpx.MockTransport, so tests never reach
the network. All fixtures follow camelCase naming convention.
"""

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

from lib.rate_limiter import RateLimiterManager

PLACE_SEARCH_RESULTS: Dict[str, Dict[str, Any]] = {
    "Paris, France": {
        "status": "OK",
        "results": [
            {
                "name": "Paris",
                "formatted_address": "Paris, France",
                "geometry": {"location": {"lat": 48.856614, "lng": 2.3522219}},
            }
        ],
    },
    "Mumbai, India": {
        "status": "OK",
        "results": [{"name": "Mumbai", "geometry": {"location": {"lat": 19.076, "lng": 72.8777}}}],
    },
}

TIMEZONES: Dict[str, str] = {
    "48.856614,2.3522219": "Europe/Paris",
    "19.076,72.8777": "Asia/Kolkata",
}


class FakeProviders:
    """Serves place search and GeoNames requests, recording them"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.geoNamesStatus = 200

    def requestsTo(self, host: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params

        if request.url.host == "maps.googleapis.com":
            query = params.get("query", "")
            return httpx.Response(200, json=PLACE_SEARCH_RESULTS.get(query, {"status": "ZERO_RESULTS", "results": []}))

        if request.url.host == "api.geonames.org":
            if self.geoNamesStatus != 200:
                return httpx.Response(self.geoNamesStatus, text="Service unavailable")
            key = f"{params.get('lat')},{params.get('lng')}"
            if key not in TIMEZONES:
                return httpx.Response(200, json={"status": {"message": "no timezone information found", "value": 15}})
            return httpx.Response(200, json={"timezoneId": TIMEZONES[key], "lat": params.get("lat")})

        return httpx.Response(404)


@pytest.fixture
def fakeProviders(monkeypatch) -> FakeProviders:
    """
    Route every httpx.AsyncClient created by provider clients to FakeProviders.

    Returns:
        FakeProviders: Recorder of provider requests
    """
    providers = FakeProviders()
    realAsyncClient = httpx.AsyncClient

    def makeClient(*args, **kwargs) -> httpx.AsyncClient:
        kwargs["transport"] = httpx.MockTransport(providers)
        return realAsyncClient(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", makeClient)
    return providers


@pytest.fixture
def configFile(tmp_path: Path, monkeypatch) -> Callable[..., str]:
    """
    Factory writing config.toml into a temporary directory.

    Working directory is switched to that directory, so no stray .env file
    is picked up.
    """
    monkeypatch.chdir(tmp_path)

    def writeConfig(extra: str = "", **credentials: str) -> str:
        apiKey = credentials.get("apiKey", "test_places_key")
        username = credentials.get("username", "test_user")
        content = f"""
[place-search]
api-key = "{apiKey}"

[geonames]
username = "{username}"

[cache]
version = 1.32

[logging]
level = "WARNING"
{extra}
"""
        path = tmp_path / "config.toml"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return writeConfig


@pytest.fixture(autouse=True)
def cleanRateLimiters():
    """Rate limiter manager is a process-wide singleton, reset it around tests"""
    manager = RateLimiterManager.getInstance()
    asyncio.run(manager.destroy())
    yield
    asyncio.run(manager.destroy())
