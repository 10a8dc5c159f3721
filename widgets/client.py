"""
Async HTTP client for the ads API, as used by the ad panels.
"""
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from core.config import settings
from schemas import Ad

logger = logging.getLogger(__name__)


class AdsApiError(Exception):
    """Network, HTTP status or payload failure talking to the ads API."""


class FetchResult(BaseModel):
    """Outcome of a fetch: either the ads or the reason it failed."""
    ads: List[Ad] = []
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AdsApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.ADS_API_URL,
            timeout=timeout if timeout is not None else settings.ADS_API_TIMEOUT,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "AdsApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def fetch_ads(
        self,
        target_audience: str,
        is_new_medicine: Optional[bool] = None,
        limit: int = 10,
    ) -> List[Ad]:
        """GET /ads. A body without a usable `ads` list counts as no ads."""
        params = {"targetAudience": target_audience}
        if is_new_medicine is not None:
            params["isNewMedicine"] = "true" if is_new_medicine else "false"
        params["limit"] = str(limit)

        try:
            response = await self._http.get("/ads", params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise AdsApiError(f"GET /ads failed: {e}") from e
        except ValueError as e:
            raise AdsApiError(f"GET /ads returned a non-JSON body: {e}") from e

        raw_ads = body.get("ads") if isinstance(body, dict) else None
        if not isinstance(raw_ads, list):
            return []
        try:
            return [Ad.model_validate(item) for item in raw_ads]
        except ValidationError as e:
            raise AdsApiError(f"GET /ads returned malformed ads: {e.error_count()} error(s)") from e

    async def try_fetch_ads(
        self,
        target_audience: str,
        is_new_medicine: Optional[bool] = None,
        limit: int = 10,
    ) -> FetchResult:
        try:
            ads = await self.fetch_ads(target_audience, is_new_medicine=is_new_medicine, limit=limit)
        except AdsApiError as e:
            return FetchResult(error=str(e))
        return FetchResult(ads=ads)

    async def track_click(self, ad_id: str):
        try:
            response = await self._http.post(f"/ads/{ad_id}/click")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise AdsApiError(f"POST /ads/{ad_id}/click failed: {e}") from e
        logger.debug(f"Tracked click for ad {ad_id}")
