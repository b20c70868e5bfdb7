import logging
from typing import List

import httpx
from pydantic import BaseModel, ValidationError

from .config import MatchSettings
from .errors import GigNotFound, UpstreamError
from .logs import log_event
from .schemas import AvailabilityRecord, GigRecord, WorkerRecord

logger = logging.getLogger(__name__)


def _validate_rows(model: type[BaseModel], data, kind: str) -> list:
    """
    Validate a list payload row by row; unreadable rows are logged and skipped.
    """
    if not isinstance(data, list):
        raise UpstreamError(f"Malformed {kind} records")

    rows = []
    for item in data:
        try:
            rows.append(model.model_validate(item))
        except ValidationError as e:
            log_event(
                logger,
                "directory_row_skipped",
                level=logging.WARNING,
                kind=kind,
                row_id=item.get("id") if isinstance(item, dict) else None,
                errors=e.error_count(),
            )
    return rows


class DirectoryClient:
    """
    Read-only access to gigs, gig workers and their availability windows.
    """

    def __init__(self, settings: MatchSettings, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = settings.directory_url.rstrip("/")
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(method, url, **kwargs)
                resp.raise_for_status()
                return resp.json()
        except httpx.TimeoutException:
            raise UpstreamError(f"Timeout calling directory: {path}")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamError(f"Directory returned {status} for {path}", status_code=status)
        except httpx.HTTPError:
            raise UpstreamError(f"Directory unreachable: {path}")
        except ValueError:
            raise UpstreamError(f"Directory returned invalid JSON for {path}")

    async def fetch_gig(self, gig_id: str) -> GigRecord:
        try:
            data = await self._request("GET", f"/gigs/{gig_id}")
        except UpstreamError as e:
            if e.status_code == 404:
                raise GigNotFound("Gig not found", status_code=404)
            raise
        try:
            return GigRecord.model_validate(data)
        except ValidationError:
            raise UpstreamError("Malformed gig record")

    async def fetch_workers(self, exclude_user_id: str | None = None) -> List[WorkerRecord]:
        """
        Active, non-banned, non-disabled gig workers, minus the gig's buyer.
        """
        params = {"active": "true"}
        if exclude_user_id:
            params["exclude"] = exclude_user_id
        data = await self._request("GET", "/workers", params=params)
        return _validate_rows(WorkerRecord, data, "worker")

    async def fetch_availability(self, user_ids: List[str]) -> List[AvailabilityRecord]:
        if not user_ids:
            return []
        data = await self._request("POST", "/availability/query", json={"userIds": user_ids})
        return _validate_rows(AvailabilityRecord, data, "availability")
