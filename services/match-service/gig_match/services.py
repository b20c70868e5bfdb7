import asyncio
import logging
from typing import List

from .aggregate import build_matches
from .config import MatchSettings
from .directory import DirectoryClient
from .errors import OracleError, UpstreamError
from .filters import filter_candidates
from .logs import log_event
from .oracle import OracleClient
from .schemas import (
    AvailabilityRecord,
    GigContext,
    GigRecord,
    MatchmakingResult,
    WorkerCandidate,
    WorkerRecord,
)
from .scoring import FallbackScored, OracleScored, ScoringOutcome, fallback_scores

logger = logging.getLogger(__name__)

NO_WORKERS_NOTE = "No active workers found"


class MatchmakingOrchestrator:
    """
    Fetch -> Filter -> Prepare -> Score -> Aggregate -> Done

    Score forks once: oracle when it answers cleanly, otherwise the local
    fallback scorer for the whole batch. Callers always get a
    MatchmakingResult back, never an exception.
    """

    def __init__(
        self,
        settings: MatchSettings,
        directory: DirectoryClient | None = None,
        oracle: OracleClient | None = None,
    ):
        self.settings = settings
        self.directory = directory
        self.oracle = oracle

    async def find_matching_workers(self, gig_id: str) -> MatchmakingResult:
        log_event(logger, "match_stage", stage="fetch", gig_id=gig_id)
        try:
            gig = await self.directory.fetch_gig(gig_id)
            workers = await self.directory.fetch_workers(exclude_user_id=gig.buyer_id)
        except UpstreamError as e:
            log_event(logger, "match_failed", level=logging.ERROR, gig_id=gig_id, error=str(e))
            return MatchmakingResult(success=False, error=str(e))

        availability = await self._fetch_availability(workers)
        return await self.match(gig, workers, availability)

    async def _fetch_availability(self, workers: List[WorkerRecord]) -> List[AvailabilityRecord]:
        try:
            return await self.directory.fetch_availability([w.id for w in workers])
        except UpstreamError as e:
            # no windows means "assume available", so carry on without them
            log_event(logger, "availability_unavailable", level=logging.WARNING, error=str(e))
            return []

    async def match(
        self,
        gig: GigRecord,
        workers: List[WorkerRecord],
        availability: List[AvailabilityRecord],
    ) -> MatchmakingResult:
        try:
            return await self._run(gig, workers, availability)
        except Exception as e:
            logger.exception("matchmaking crashed for gig %s", gig.id)
            return MatchmakingResult(success=False, error=str(e) or "Unknown error")

    async def _run(
        self,
        gig: GigRecord,
        workers: List[WorkerRecord],
        availability: List[AvailabilityRecord],
    ) -> MatchmakingResult:
        workers = [w for w in workers if not gig.buyer_id or w.id != gig.buyer_id]
        log_event(logger, "match_stage", stage="filter", gig_id=gig.id, workers=len(workers))

        if not workers:
            return MatchmakingResult(success=True, matches=[], total_workers_analyzed=0, note=NO_WORKERS_NOTE)

        context = GigContext.from_record(gig)
        candidates = [WorkerCandidate.from_record(w, availability) for w in workers]
        filtered = filter_candidates(candidates, context, self.settings.max_distance_km)

        log_event(
            logger,
            "match_stage",
            stage="prepare",
            gig_id=gig.id,
            workers=len(workers),
            filtered=len(filtered),
            max_distance_km=self.settings.max_distance_km,
        )

        if not filtered:
            return MatchmakingResult(
                success=True,
                matches=[],
                total_workers_analyzed=0,
                note=f"No workers within {self.settings.max_distance_km:g}km of the gig",
            )

        outcome = await self.score_candidates(context, filtered)
        log_event(logger, "match_stage", stage="aggregate", gig_id=gig.id, method=outcome.method, scored=len(outcome.scores))

        matches = build_matches(outcome.scores, filtered, context, self.settings.max_results)
        log_event(logger, "match_stage", stage="done", gig_id=gig.id, matches=len(matches))

        return MatchmakingResult(success=True, matches=matches, total_workers_analyzed=len(filtered))

    def _fallback(self, gig: GigContext, candidates: List[WorkerCandidate], failure: str | None) -> FallbackScored:
        scores = fallback_scores(
            gig,
            candidates,
            currency_symbol=self.settings.currency_symbol,
            excluded_locations=self.settings.excluded_bonus_locations,
            max_reasons=self.settings.max_reasons,
        )
        return FallbackScored(scores=scores, failure=failure)

    async def score_candidates(self, gig: GigContext, candidates: List[WorkerCandidate]) -> ScoringOutcome:
        """
        One place for the oracle/fallback decision. Never mixes the two:
        either every score comes from the oracle or every score is local.

        Cancellation of the oracle call alone falls back like any other oracle
        failure. Cancellation of the calling task is re-raised instead of
        being turned into a fallback result, so a caller that gave up is not
        kept waiting on local scoring.
        """
        log_event(logger, "match_stage", stage="score", candidates=len(candidates))

        if self.oracle is None or not self.settings.oracle_enabled:
            return self._fallback(gig, candidates, "disabled")

        try:
            scores = await asyncio.wait_for(
                self.oracle.score(gig, candidates),
                timeout=self.settings.oracle_timeout_seconds,
            )
        except OracleError as e:
            failure, detail = e.kind, str(e)
        except asyncio.TimeoutError:
            failure, detail = "timeout", "oracle call exceeded timeout"
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            failure, detail = "cancelled", "oracle call was cancelled"
        except Exception as e:
            failure, detail = "error", repr(e)
        else:
            return OracleScored(scores=scores)

        log_event(logger, "oracle_failed", level=logging.WARNING, kind=failure, detail=detail)
        return self._fallback(gig, candidates, failure)
