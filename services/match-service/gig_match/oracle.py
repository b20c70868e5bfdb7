import logging
import math
from typing import List

import httpx
from pydantic import ValidationError

from .config import MatchSettings
from .errors import OracleError
from .logs import log_event
from .schemas import (
    CandidateScore,
    GigContext,
    OracleAvailability,
    OracleGigContext,
    OracleRequest,
    OracleResponse,
    OracleWorker,
    WorkerCandidate,
)
from .scoring import clamp_score

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description provided"
NO_LOCATION = "Location not specified"
NO_REQUIREMENTS = "None"


class OracleClient:
    """
    Client for the delegated AI scorer.

    The oracle is told that every candidate already passed the geo, skill and
    availability gates; it returns a 0-100 score and a few reasons each.
    Anything other than a clean, complete answer raises OracleError.
    """

    def __init__(self, settings: MatchSettings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.transport = transport

    def build_request(self, gig: GigContext, candidates: List[WorkerCandidate]) -> OracleRequest:
        max_bio = self.settings.oracle_bio_max_chars
        limited = candidates[: self.settings.oracle_max_candidates]

        return OracleRequest(
            gig_context=OracleGigContext(
                title=gig.title,
                description=gig.description or NO_DESCRIPTION,
                location=gig.location or NO_LOCATION,
                start_time=gig.start_time,
                end_time=gig.end_time,
                hourly_rate=gig.hourly_rate,
                additional_requirements=gig.additional_requirements or NO_REQUIREMENTS,
            ),
            worker_data=[
                OracleWorker(
                    worker_id=c.id,
                    worker_name=c.name,
                    location=c.location,
                    bio=(c.bio or "")[:max_bio],
                    skills=c.skills,
                    availability=[
                        OracleAvailability(days=w.days, start_time=w.start_time, end_time=w.end_time)
                        for w in c.availability
                    ],
                )
                for c in limited
            ],
        )

    async def _post(self, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.settings.oracle_timeout_seconds,
            transport=self.transport,
        ) as client:
            return await client.post(self.settings.oracle_url, json=payload)

    async def score(self, gig: GigContext, candidates: List[WorkerCandidate]) -> List[CandidateScore]:
        request = self.build_request(gig, candidates)
        batch = {w.worker_id for w in request.worker_data}

        log_event(logger, "oracle_request", url=self.settings.oracle_url, candidates=len(batch))

        try:
            resp = await self._post(request.model_dump(mode="json", by_alias=True))
        except httpx.TimeoutException as e:
            raise OracleError("timeout", f"Timeout calling oracle: {e!r}")
        except httpx.HTTPError as e:
            raise OracleError("transport", f"Oracle transport error: {e!r}")

        if not resp.is_success:
            raise OracleError("status", f"Oracle call failed: {resp.status_code}")

        try:
            body = OracleResponse.model_validate_json(resp.content)
        except ValidationError as e:
            raise OracleError("malformed", f"Unreadable oracle response: {e.error_count()} errors")

        if not body.ok:
            raise OracleError("rejected", f"Oracle reported failure: {body.error or 'no detail'}")

        if not body.matches:
            raise OracleError("empty", "Oracle returned no matches")

        return self._accept(body, batch)

    def _accept(self, body: OracleResponse, batch: set) -> List[CandidateScore]:
        max_reasons = self.settings.max_reasons
        scores = []
        seen = set()
        for m in body.matches:
            if m.worker_id not in batch:
                raise OracleError("malformed", f"Oracle scored unknown worker {m.worker_id}")
            if not math.isfinite(m.match_score):
                raise OracleError("malformed", f"Oracle score for {m.worker_id} is not a number")
            if m.worker_id in seen:
                continue
            seen.add(m.worker_id)
            scores.append(
                CandidateScore(
                    worker_id=m.worker_id,
                    worker_name=m.worker_name,
                    match_score=clamp_score(m.match_score),
                    match_reasons=m.match_reasons[:max_reasons],
                )
            )
        return scores
