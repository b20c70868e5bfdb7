import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Union

from .logs import log_event
from .relevance import find_most_relevant_skill
from .schemas import CandidateScore, GigContext, WorkerCandidate

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MAX_SCORE = 100

SKILL_POINTS_FACTOR = 0.3
MAX_SKILL_POINTS = 30

BIO_BONUS = 15
# checked in this order, at most one bio bonus
BIO_ROLE_KEYWORDS = {
    "baker": ("baker", "cake", "pastry"),
    "chef": ("chef", "cook"),
    "server": ("server", "waiter", "bartender"),
    "bartender": ("bartender", "mixologist"),
}

# (minimum years, points); the last tier applies to anything above zero
EXPERIENCE_TIERS = ((5, 15), (2, 10), (0, 5))

RATE_MATCH_PERCENT, RATE_MATCH_BONUS = 20, 10
RATE_RANGE_PERCENT, RATE_RANGE_BONUS = 50, 5
RATE_UNDERCUT_BONUS = 3

LOCATION_BONUS = 5

GENERIC_REASONS = ("Available for work", "Professional service provider")


def format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)


def clamp_score(value: float) -> int:
    """
    Clamp into [0, 100] and round half up.
    """
    value = min(max(value, 0), MAX_SCORE)
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class OracleScored:
    scores: List[CandidateScore]
    method = "oracle"


@dataclass(frozen=True)
class FallbackScored:
    scores: List[CandidateScore]
    failure: str | None = None
    method = "fallback"


ScoringOutcome = Union[OracleScored, FallbackScored]


@dataclass
class _Tally:
    score: float = BASE_SCORE
    reasons: List[str] = field(default_factory=list)

    def add(self, points: float, reason: str) -> None:
        self.score += points
        self.reasons.append(reason)


def score_candidate(
    gig: GigContext,
    candidate: WorkerCandidate,
    *,
    currency_symbol: str = "£",
    excluded_locations: Iterable[str] = (),
    max_reasons: int = 3,
) -> CandidateScore:
    """
    Deterministic multi-factor score for one candidate.

    Contributions are evaluated in a fixed order (skill, bio, experience,
    rate, location), which is also the order reasons survive truncation.
    """
    gig_text = gig.text
    relevance = find_most_relevant_skill(candidate.skills, gig.title, gig.description)
    skill = relevance.skill
    experience = skill.experience_years if skill else 0
    rate = skill.agreed_rate if skill else 0
    bio = (candidate.bio or "").lower()

    tally = _Tally()

    if skill is not None:
        tally.add(
            min(relevance.score * SKILL_POINTS_FACTOR, MAX_SKILL_POINTS),
            f"Relevant {skill.name} experience ({format_number(relevance.score)}% match)",
        )

    if bio:
        for role, keywords in BIO_ROLE_KEYWORDS.items():
            if role in gig_text and any(kw in bio for kw in keywords):
                tally.add(BIO_BONUS, "Bio mentions relevant experience")
                break

    if experience > 0:
        for min_years, points in EXPERIENCE_TIERS:
            if experience >= min_years:
                tally.add(points, f"{format_number(experience)} years of experience")
                break

    gig_rate = gig.hourly_rate
    if rate > 0 and gig_rate > 0:
        rate_percent = abs(rate - gig_rate) / gig_rate * 100
        shown = f"{currency_symbol}{format_number(rate)}/hour"
        if rate_percent <= RATE_MATCH_PERCENT:
            tally.add(RATE_MATCH_BONUS, f"Rate matches budget ({shown})")
        elif rate_percent <= RATE_RANGE_PERCENT:
            tally.add(RATE_RANGE_BONUS, f"Rate within range ({shown})")
        elif rate < gig_rate:
            tally.add(RATE_UNDERCUT_BONUS, f"Competitive rate ({shown})")

    if candidate.location and candidate.location not in set(excluded_locations):
        tally.add(LOCATION_BONUS, f"Located in {candidate.location}")

    reasons = tally.reasons or list(GENERIC_REASONS)

    return CandidateScore(
        worker_id=candidate.id,
        worker_name=candidate.name,
        match_score=clamp_score(tally.score),
        match_reasons=reasons[:max_reasons],
    )


def fallback_scores(
    gig: GigContext,
    candidates: List[WorkerCandidate],
    *,
    currency_symbol: str = "£",
    excluded_locations: Iterable[str] = (),
    max_reasons: int = 3,
) -> List[CandidateScore]:
    """
    Score every candidate independently. A candidate whose scoring blows up
    keeps its place with the base score and generic reasons.
    """
    excluded_locations = tuple(excluded_locations)
    scores = []
    for candidate in candidates:
        try:
            scores.append(
                score_candidate(
                    gig,
                    candidate,
                    currency_symbol=currency_symbol,
                    excluded_locations=excluded_locations,
                    max_reasons=max_reasons,
                )
            )
        except Exception as e:
            log_event(
                logger,
                "fallback_candidate_failed",
                level=logging.ERROR,
                worker_id=candidate.id,
                error=repr(e),
            )
            scores.append(
                CandidateScore(
                    worker_id=candidate.id,
                    worker_name=candidate.name,
                    match_score=BASE_SCORE,
                    match_reasons=list(GENERIC_REASONS)[:max_reasons],
                )
            )
    return scores
