"""
Keyword/taxonomy scoring of a worker's skills against a gig.

Used when the oracle is not: it has to stay cheap, deterministic and easy to
audit, so it is a plain lookup table rather than anything learned.
"""

from dataclasses import dataclass
from typing import List, Optional

from .schemas import Skill

# (gig mentions any of, skill name contains any of, base score)
# First matching row wins, so exact roles come before adjacent ones and
# adjacent roles before broad categories.
RELEVANCE_RULES = (
    # exact role
    (("baker",), ("baker", "cake", "pastry"), 100),
    (("chef",), ("chef", "cook"), 100),
    (("server",), ("server", "waiter", "bartender"), 100),
    (("bartender",), ("bartender", "mixologist"), 100),
    (("waiter",), ("waiter", "server"), 100),
    (("cook",), ("cook", "chef"), 100),
    # adjacent role
    (("baker",), ("chef", "cook"), 80),
    (("server",), ("chef", "cook"), 70),
    (("bartender",), ("server", "waiter"), 80),
    (("waiter",), ("bartender", "server"), 80),
    (("chef",), ("baker", "pastry"), 80),
    # broad category
    (("server", "waiter", "bartender"), ("hospitality", "service", "customer"), 60),
    (("chef", "cook", "baker"), ("food", "kitchen", "culinary"), 60),
    (("event", "catering", "party"), ("event", "catering", "party"), 60),
)

FLOOR_SCORE = 30
SINGLE_SKILL_SCORE = 50

EXPERIENCE_POINTS_PER_YEAR = 2
MAX_EXPERIENCE_BONUS = 20

# agreed rate above this reads as seniority
SENIOR_RATE_THRESHOLD = 15
SENIOR_RATE_BONUS = 10


@dataclass(frozen=True)
class SkillRelevance:
    skill: Optional[Skill]
    score: float


def base_relevance(gig_text: str, skill_name: str) -> int:
    gig_text = gig_text.lower()
    skill_name = skill_name.lower()
    for gig_terms, skill_terms, score in RELEVANCE_RULES:
        if any(t in gig_text for t in gig_terms) and any(t in skill_name for t in skill_terms):
            return score
    return FLOOR_SCORE


def skill_relevance(skill: Skill, gig_text: str) -> float:
    score = base_relevance(gig_text, skill.name)

    if skill.experience_years > 0:
        score += min(skill.experience_years * EXPERIENCE_POINTS_PER_YEAR, MAX_EXPERIENCE_BONUS)

    if skill.agreed_rate > SENIOR_RATE_THRESHOLD:
        score += SENIOR_RATE_BONUS

    return score


def find_most_relevant_skill(skills: List[Skill], title: str, description: str) -> SkillRelevance:
    if not skills:
        return SkillRelevance(None, 0)

    # nothing to compare against
    if len(skills) == 1:
        return SkillRelevance(skills[0], SINGLE_SKILL_SCORE)

    gig_text = f"{title or ''} {description or ''}".lower()
    best = SkillRelevance(skills[0], 0)

    for skill in skills:
        score = skill_relevance(skill, gig_text)
        # strict improvement only: ties keep the earlier skill
        if score > best.score:
            best = SkillRelevance(skill, score)

    return best
