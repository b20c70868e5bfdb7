import logging
from typing import List

from .logs import log_event
from .relevance import find_most_relevant_skill
from .schemas import CandidateScore, GigContext, MatchResult, WorkerCandidate

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_SKILL = "Professional"
DEFAULT_MAX_RESULTS = 5


def to_match_result(score: CandidateScore, candidate: WorkerCandidate, gig: GigContext) -> MatchResult:
    """
    Scorers only carry id/score/reasons; put the worker's profile back on,
    including the full skill list and availability for display.
    """
    relevance = find_most_relevant_skill(candidate.skills, gig.title, gig.description)
    skill = relevance.skill

    log_event(
        logger,
        "primary_skill_selected",
        worker_id=candidate.id,
        skill=skill.name if skill else None,
        relevance=relevance.score,
        gig_title=gig.title,
    )

    return MatchResult(
        worker_id=score.worker_id,
        worker_name=score.worker_name,
        primary_skill=(skill.name if skill else "") or DEFAULT_PRIMARY_SKILL,
        bio=candidate.bio,
        location=candidate.location,
        hourly_rate=skill.agreed_rate if skill else 0,
        experience_years=skill.experience_years if skill else 0,
        match_score=score.match_score,
        match_reasons=score.match_reasons,
        availability=candidate.availability,
        skills=candidate.skills,
    )


def build_matches(
    scores: List[CandidateScore],
    candidates: List[WorkerCandidate],
    gig: GigContext,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> List[MatchResult]:
    by_id = {c.id: c for c in candidates}

    matches = []
    for score in scores:
        candidate = by_id.get(score.worker_id)
        if candidate is None:
            log_event(logger, "score_without_candidate", level=logging.WARNING, worker_id=score.worker_id)
            continue
        matches.append(to_match_result(score, candidate, gig))

    # sorted() is stable, equal scores keep their scoring order
    matches = sorted(matches, key=lambda m: m.match_score, reverse=True)
    return matches[:max_results]
