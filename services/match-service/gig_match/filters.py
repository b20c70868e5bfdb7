import logging
from dataclasses import dataclass
from typing import List

from .availability import is_worker_available, spans_multiple_days
from .geo import distance_km
from .logs import log_event
from .schemas import GigContext, WorkerCandidate

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_KM = 30.0


@dataclass(frozen=True)
class FilterDecision:
    worker_id: str
    worker_name: str
    accepted: bool
    reason: str
    has_skills: bool
    available: bool
    distance_km: float | None = None


def evaluate_candidate(
    candidate: WorkerCandidate,
    gig: GigContext,
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
) -> FilterDecision:
    """
    Hard gates: at least one skill, and a resolvable position within range of
    the gig. Availability is worked out for the record but never rejects.
    """
    has_skills = len(candidate.skills) > 0
    available = is_worker_available(candidate.availability, gig.start_time, gig.end_time)

    def decide(accepted: bool, reason: str, distance: float | None = None) -> FilterDecision:
        return FilterDecision(
            worker_id=candidate.id,
            worker_name=candidate.name,
            accepted=accepted,
            reason=reason,
            has_skills=has_skills,
            available=available,
            distance_km=distance,
        )

    if not has_skills:
        return decide(False, "no_skills")

    if gig.coordinate is None:
        return decide(False, "no_gig_coordinates")

    worker_coords = candidate.coordinate
    if worker_coords is None:
        return decide(False, "no_worker_coordinates")

    distance = distance_km(gig.coordinate, worker_coords)
    # NaN never compares <=, so it is rejected as out of range
    if not distance <= max_distance_km:
        return decide(False, "out_of_range", distance)

    return decide(True, "within_range", distance)


def filter_candidates(
    candidates: List[WorkerCandidate],
    gig: GigContext,
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
) -> List[WorkerCandidate]:
    if spans_multiple_days(gig.start_time, gig.end_time):
        log_event(
            logger,
            "gig_spans_multiple_days",
            level=logging.WARNING,
            start_time=gig.start_time,
            end_time=gig.end_time,
            note="availability checked against the start day only",
        )

    accepted = []
    for candidate in candidates:
        decision = evaluate_candidate(candidate, gig, max_distance_km)
        log_event(
            logger,
            "worker_filter",
            worker_id=decision.worker_id,
            worker_name=decision.worker_name,
            accepted=decision.accepted,
            reason=decision.reason,
            distance_km=round(decision.distance_km, 2) if decision.distance_km is not None else None,
            has_skills=decision.has_skills,
            available=decision.available,
        )
        if decision.accepted:
            accepted.append(candidate)
    return accepted
