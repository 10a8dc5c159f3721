import os
import pytest
import httpx
from httpx import AsyncClient, ASGITransport
from typing import AsyncGenerator, Callable, List
from unittest.mock import MagicMock
from apscheduler.schedulers.asyncio import AsyncIOScheduler

# Set test environment vars before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["JWT_SECRET"] = "super-secret-test-key-32-chars-long"
os.environ["ADS_API_URL"] = "http://ads.test/api"
os.environ["ADS_CLICK_RATE_LIMIT"] = "3"

from main import app
from fastapi_limiter import FastAPILimiter
from core.security import create_access_token
from widgets.client import AdsApiClient
from widgets.rotation import shutdown_rotation_scheduler

CHAIN_METHODS = ("select", "insert", "update", "delete", "eq", "neq", "in_", "or_", "is_", "lt", "limit", "order")


def make_chain(return_val=None):
    chain = MagicMock()
    for method in CHAIN_METHODS:
        getattr(chain, method).return_value = chain
    chain.execute.return_value = MagicMock(data=return_val if return_val is not None else [])
    return chain


def make_supabase_mock() -> MagicMock:
    """Supabase client stand-in with one query chain per table"""
    mock_instance = MagicMock()
    tables = {}

    def table_func(table_name):
        if table_name not in tables:
            tables[table_name] = make_chain([])
        return tables[table_name]

    mock_instance.table.side_effect = table_func
    return mock_instance


@pytest.fixture
def supabase_factory() -> Callable[[], MagicMock]:
    return make_supabase_mock


@pytest.fixture
def mock_supabase(mocker):
    mock_instance = make_supabase_mock()
    for target in ("core.database.get_supabase", "services.ad_service.get_supabase", "dependencies.auth.get_supabase"):
        mocker.patch(target, return_value=mock_instance)
    return mock_instance


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Rate limiting stays off unless a test initializes it"""
    FastAPILimiter.redis = None
    yield
    FastAPILimiter.redis = None


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(mock_supabase) -> Callable[[str], dict]:
    """Bearer headers for a user with the given role (users table mocked to match)"""
    def _headers(role: str, user_id: int = 1) -> dict:
        mock_supabase.table("users").execute.return_value.data = [
            {"id": user_id, "role": role, "is_active": True, "name": f"Test {role}"}
        ]
        token = create_access_token({"sub": str(user_id), "role": role})
        return {"Authorization": f"Bearer {token}"}
    return _headers


# Widget helpers
@pytest.fixture(autouse=True)
def reset_rotation_scheduler():
    """Panels mounted without a scheduler share one; never let it outlive a test"""
    yield
    shutdown_rotation_scheduler()


@pytest.fixture
def scheduler() -> AsyncIOScheduler:
    """Never started: jobs stay pending and tests fire ticks by hand"""
    return AsyncIOScheduler()


class AdsApiStub:
    """Handler for httpx.MockTransport that records requests"""

    def __init__(self, ads=None, status_code: int = 200, click_status: int = 200, body=None):
        self.ads = ads if ads is not None else []
        self.status_code = status_code
        self.click_status = click_status
        self.body = body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return httpx.Response(self.click_status, json={"success": self.click_status < 400})
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, json={"success": True, "ads": self.ads})

    @property
    def clicks(self) -> List[str]:
        return [r.url.path for r in self.requests if r.method == "POST"]


@pytest.fixture
def api_stub() -> AdsApiStub:
    return AdsApiStub()


@pytest.fixture
async def ads_client(api_stub) -> AsyncGenerator[AdsApiClient, None]:
    async with AdsApiClient(base_url="http://ads.test/api", transport=httpx.MockTransport(api_stub)) as client:
        yield client
