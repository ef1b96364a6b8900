"""
Async client for the Xano REST backend.

The bearer token is passed in by the caller (request cookie/header, or the
service token for background jobs); this client never obtains or refreshes it.
"""
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import httpx

from src.core.config import settings

logger = logging.getLogger(__name__)

# Query params as a mapping, or pairs when a key repeats (``Ownership_types_ids[]``)
QueryParams = Union[Dict[str, Any], Sequence[Tuple[str, Any]]]


class XanoError(Exception):
    """
    Upstream call failed.

    ``status_code`` is the HTTP status, or 0 for network errors and timeouts.
    """

    def __init__(self, status_code: int, path: str, message: str = ""):
        self.status_code = status_code
        self.path = path
        self.message = message
        super().__init__(f"Xano {path} failed ({status_code}): {message}")

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class XanoClient:
    """
    Client for the Xano API groups used by the dashboard.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = settings.xano_base_url,
        timeout: float = settings.xano_request_timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def get_json(self, path: str, params: Optional[QueryParams] = None) -> Any:
        """GET ``path`` and return the decoded JSON body, raising XanoError on any failure."""
        if not self.client:
            raise RuntimeError("Client context not entered.")

        started = time.perf_counter()
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Network error fetching {path}: {e}")
            raise XanoError(0, path, str(e) or type(e).__name__) from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if response.status_code >= 400:
            logger.warning(f"Xano {path} returned {response.status_code} in {elapsed_ms}ms")
            raise XanoError(response.status_code, path, response.text[:200])

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {path}: {e}")
            raise XanoError(response.status_code, path, "invalid JSON body") from e

        logger.debug(f"Xano {path} ok in {elapsed_ms}ms")
        return data

    # ──── Endpoints ────

    async def get_overview_data(self, sector_id: int) -> Any:
        return await self.get_json(
            f"{settings.xano_sectors_api}/overview_data", params={"Sector_id": sector_id}
        )

    async def get_sector(self, sector_id: int) -> Any:
        return await self.get_json(f"{settings.xano_sectors_api}/sectors/{sector_id}")

    async def get_recent_transactions(self, sector_id: int, top_15: bool = True) -> Any:
        # Endpoint name is misspelled upstream
        return await self.get_json(
            f"{settings.xano_sectors_api}/sectors_resent_trasnactions",
            params={"Sector_id": sector_id, "top_15": "true" if top_15 else "false"},
        )

    async def get_sector_companies(
        self,
        sector_id: int,
        page: int,
        per_page: int,
        ownership_type_ids: Optional[List[int]] = None,
    ) -> Any:
        """
        One page of a sector's companies (``Offset`` is the 1-based page).

        With ownership type ids the filtered companies search is used instead,
        so totals and paging describe the filtered set.
        """
        if not ownership_type_ids:
            return await self.get_json(
                f"{settings.xano_sectors_api}/Get_Sector_s_new_companies",
                params={"Offset": page, "Per_page": per_page, "Sector_id": sector_id},
            )

        params = [
            ("Offset", page),
            ("Per_page", per_page),
            ("Min_linkedin_members", 0),
            ("Max_linkedin_members", 0),
            ("Horizontals_ids", ""),
            ("Primary_sectors_ids[]", sector_id),
        ]
        params.extend(("Ownership_types_ids[]", type_id) for type_id in ownership_type_ids)
        return await self.get_json(f"{settings.xano_companies_api}/Get_new_companies", params=params)

    async def get_sub_sectors(self, sector_id: int) -> Any:
        return await self.get_json(
            f"{settings.xano_sectors_api}/sub_sectors", params={"sectors_id": sector_id}
        )

    async def get_primary_sectors(self) -> Any:
        return await self.get_json(f"{settings.xano_sectors_api}/Primary_sectors_with_companies_counts")

    async def get_corporate_event(self, event_id: int) -> Any:
        return await self.get_json(
            f"{settings.xano_events_api}/corporate_event_v2", params={"corporate_event_id": event_id}
        )

    async def get_content_articles(self, **params: Any) -> Any:
        return await self.get_json(f"{settings.xano_content_api}/Get_All_Content_Articles", params=params or None)
