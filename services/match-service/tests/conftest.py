"""
Shared builders for matchmaking tests.

Positions are expressed as offsets from the gig: 0.018 degrees of latitude is
about 2 km, 0.405 degrees about 45 km.
"""

from datetime import datetime

import pytest

from gig_match.config import MatchSettings
from gig_match.schemas import (
    AvailabilityRecord,
    AvailabilityWindow,
    GigContext,
    GigRecord,
    Skill,
    WorkerCandidate,
    WorkerRecord,
)

GIG_LAT = 51.50
GIG_LNG = -0.10

# Friday 16 October 2026, 18:00-23:00
GIG_START = datetime(2026, 10, 16, 18, 0)
GIG_END = datetime(2026, 10, 16, 23, 0)


@pytest.fixture
def settings():
    return MatchSettings(
        directory_url="http://directory.test",
        oracle_base_url="http://oracle.test",
        oracle_timeout_seconds=5.0,
    )


@pytest.fixture
def make_skill():
    def _make(name: str, years: float = 0, rate: float = 0) -> Skill:
        return Skill(name=name, experience_years=years, agreed_rate=rate)

    return _make


@pytest.fixture
def make_gig_record():
    def _make(**overrides) -> GigRecord:
        data = {
            "id": "gig-1",
            "title": "Bartender needed",
            "description": "Evening shift at a cocktail bar, £15/hr",
            "exact_location": f"Shoreditch, London. Coordinates: {GIG_LAT}, {GIG_LNG}",
            "start_time": GIG_START,
            "end_time": GIG_END,
            "hourly_rate": 15,
            "notes_for_worker": "Black shirt please",
            "buyer_id": "buyer-1",
        }
        data.update(overrides)
        return GigRecord(**data)

    return _make


@pytest.fixture
def gig(make_gig_record):
    return GigContext.from_record(make_gig_record())


@pytest.fixture
def make_worker_record(make_skill):
    def _make(
        worker_id: str = "w-1",
        name: str = "Sam Taylor",
        lat_offset: float | None = 0.018,
        skills=None,
        bio: str | None = None,
        location: str | None = "London",
    ) -> WorkerRecord:
        if skills is None:
            skills = [make_skill("Bartender", 6, 14), make_skill("Barista", 1, 12)]
        latitude = GIG_LAT + lat_offset if lat_offset is not None else None
        longitude = GIG_LNG if lat_offset is not None else None
        return WorkerRecord(
            id=worker_id,
            full_name=name,
            bio=bio,
            location=location,
            latitude=latitude,
            longitude=longitude,
            skills=skills,
        )

    return _make


@pytest.fixture
def make_candidate(make_worker_record):
    def _make(availability=None, **kwargs) -> WorkerCandidate:
        record = make_worker_record(**kwargs)
        windows = [
            AvailabilityRecord(user_id=record.id, **w.model_dump()) if isinstance(w, AvailabilityWindow) else w
            for w in (availability or [])
        ]
        return WorkerCandidate.from_record(record, windows)

    return _make
