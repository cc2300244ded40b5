"""Google Business Profile client.

All Google calls go through ``get_valid_access_token`` first: it refreshes the
OAuth access token, persists it, and marks the project disconnected when the
refresh is rejected so the dashboard can prompt a reconnect.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..db.database_models import ProjectDO
from ..db.store import StoreGateway
from ..utils.logger import get_app_logger


REVIEWS_API_BASE = "https://mybusiness.googleapis.com/v4"
BUSINESS_INFO_API_BASE = "https://mybusinessbusinessinformation.googleapis.com/v1"

RECONNECT_MESSAGE = "⚠️ Google connection expired. Please reconnect."


class GoogleReview(BaseModel):
    """Subset of a Google review the reply flow needs."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    review_id: str = Field(alias="reviewId")
    comment: str = ""
    star_rating: str = Field("", alias="starRating")
    review_reply: Optional[Dict[str, Any]] = Field(None, alias="reviewReply")


class GoogleBusinessClient:
    """Thin async wrapper over the Google Business Profile APIs."""

    def __init__(
        self,
        store: StoreGateway,
        client_id: Optional[str],
        client_secret: Optional[str],
        token_url: str = "https://oauth2.googleapis.com/token",
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.store = store
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.timeout = timeout
        self._client = http_client
        self.logger = get_app_logger()

    @staticmethod
    def is_connected(project: ProjectDO) -> bool:
        """Strict check: connected flag, refresh token and location must all be set."""
        return (
            project.google_connected is True
            and bool(project.google_refresh_token)
            and bool(project.google_location_id)
        )

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, timeout=self.timeout, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(method, url, **kwargs)

    async def _mark_disconnected(self, project: ProjectDO) -> None:
        try:
            await self.store.upsert_project(project.id, {"google_connected": False})
        except Exception as e:
            self.logger.error(f"[Google] Failed to mark project {project.id} disconnected: {e}")

    async def get_valid_access_token(self, project: ProjectDO) -> Tuple[Optional[str], Optional[str]]:
        """
        Exchange the stored refresh token for a fresh access token.

        Args:
            project: Project with Google credentials

        Returns:
            (access_token, None) on success, (None, user-facing error) otherwise
        """
        if not project.google_refresh_token:
            return None, RECONNECT_MESSAGE

        try:
            response = await self._request("POST", self.token_url, data={
                "client_id": self.client_id or "",
                "client_secret": self.client_secret or "",
                "refresh_token": project.google_refresh_token,
                "grant_type": "refresh_token",
            })
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"[Google] Token refresh network error: {e}")
            await self._mark_disconnected(project)
            return None, RECONNECT_MESSAGE

        if data.get("error") or not data.get("access_token"):
            self.logger.error(f"[Google] Token refresh error: {data.get('error')}")
            await self._mark_disconnected(project)
            return None, RECONNECT_MESSAGE

        access_token = data["access_token"]
        try:
            await self.store.upsert_project(project.id, {
                "google_access_token": access_token,
                "google_last_validated_at": datetime.utcnow(),
            })
        except Exception as e:
            self.logger.warning(f"[Google] Failed to persist refreshed token: {e}")

        return access_token, None

    async def fetch_reviews(self, project: ProjectDO, access_token: str) -> Tuple[List[GoogleReview], Optional[str]]:
        """
        Fetch the location's reviews.

        Returns:
            (reviews, None) on success, ([], error detail) otherwise
        """
        if not project.google_location_id:
            return [], "No Google location ID configured"

        url = f"{REVIEWS_API_BASE}/{project.google_location_id}/reviews"
        try:
            response = await self._request("GET", url, headers={"Authorization": f"Bearer {access_token}"})
        except httpx.HTTPError as e:
            self.logger.error(f"[Google] Fetch reviews error: {e}")
            return [], "Network error fetching reviews"

        if response.status_code != 200:
            self.logger.error(f"[Google] Fetch reviews failed: {response.text[:200]}")
            return [], f"Failed to fetch reviews: {response.status_code}"

        try:
            raw_reviews = response.json().get("reviews") or []
            return [GoogleReview.model_validate(r) for r in raw_reviews], None
        except ValueError as e:
            self.logger.error(f"[Google] Malformed reviews body: {e}")
            return [], "Malformed reviews response"

    async def reply_to_review(self, project: ProjectDO, access_token: str,
                              review_id: str, reply_text: str) -> Tuple[bool, Optional[str]]:
        """Post (or replace) the owner reply on one review."""
        if not project.google_location_id:
            return False, "No Google location ID configured"

        url = f"{REVIEWS_API_BASE}/{project.google_location_id}/reviews/{review_id}/reply"
        try:
            response = await self._request(
                "PUT", url,
                headers={"Authorization": f"Bearer {access_token}"},
                json={"comment": reply_text}
            )
        except httpx.HTTPError as e:
            self.logger.error(f"[Google] Reply error: {e}")
            return False, "Network error posting reply"

        if response.status_code != 200:
            self.logger.error(f"[Google] Reply failed: {response.text[:200]}")
            return False, f"Reply failed: {response.status_code}"
        return True, None

    async def update_description(self, project: ProjectDO, access_token: str,
                                 description: str) -> Tuple[bool, Optional[str]]:
        """PATCH the profile description of the location."""
        url = f"{BUSINESS_INFO_API_BASE}/{project.google_location_id}"
        try:
            response = await self._request(
                "PATCH", url,
                params={"updateMask": "profile.description"},
                headers={"Authorization": f"Bearer {access_token}"},
                json={"profile": {"description": description}}
            )
        except httpx.HTTPError as e:
            self.logger.error(f"[Google] updateProfile error: {e}")
            return False, str(e)

        if response.status_code != 200:
            self.logger.error(f"[Google] updateProfile failed: {response.text[:200]}")
            return False, response.text
        return True, None
