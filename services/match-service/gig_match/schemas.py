from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .geo import Coordinate, resolve_coordinates, to_number


class CamelModel(BaseModel):
    # wire format is camelCase, python side stays snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Snapshot(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---- Records as served by the directory ----

class Skill(Snapshot):
    name: str = ""
    experience_years: float = 0
    agreed_rate: float = 0

    @field_validator("experience_years", "agreed_rate", mode="before")
    @classmethod
    def _null_as_zero(cls, v):
        return 0 if v in (None, "") else v

    @field_validator("name", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return v or ""


class AvailabilityWindow(Snapshot):
    days: List[str] = Field(default_factory=list)
    start_time: str
    end_time: str
    frequency: Optional[str] = None
    ends: Optional[str] = None


class AvailabilityRecord(AvailabilityWindow):
    user_id: str


class Address(Snapshot):
    lat: Optional[float] = None
    lng: Optional[float] = None

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _loose_number(cls, v):
        return to_number(v)


class GigRecord(Snapshot):
    id: str
    title: str = ""
    description: Optional[str] = None
    exact_location: Optional[str] = None
    address: Optional[Address] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hourly_rate: float = 0
    notes_for_worker: Optional[str] = None
    buyer_id: Optional[str] = None

    @field_validator("hourly_rate", mode="before")
    @classmethod
    def _null_rate(cls, v):
        return 0 if v in (None, "") else v

    @field_validator("title", mode="before")
    @classmethod
    def _null_title(cls, v):
        return v or ""


class WorkerRecord(Snapshot):
    id: str
    full_name: str = ""
    bio: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    skills: List[Skill] = Field(default_factory=list)

    # blank or junk values read as missing
    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _loose_number(cls, v):
        return to_number(v)

    @field_validator("full_name", mode="before")
    @classmethod
    def _null_name(cls, v):
        return v or ""

    @field_validator("skills", mode="before")
    @classmethod
    def _null_skills(cls, v):
        return v or []


# ---- Per-request snapshots ----

class GigContext(Snapshot):
    title: str = ""
    description: str = ""
    location: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hourly_rate: float = 0
    additional_requirements: Optional[str] = None

    @property
    def text(self) -> str:
        return f"{self.title} {self.description}".lower()

    @classmethod
    def from_record(cls, gig: GigRecord) -> "GigContext":
        address = gig.address or Address()
        return cls(
            title=gig.title or "",
            description=gig.description or "",
            location=gig.exact_location,
            coordinate=resolve_coordinates(address.lat, address.lng, gig.exact_location),
            start_time=gig.start_time,
            end_time=gig.end_time,
            hourly_rate=gig.hourly_rate,
            additional_requirements=gig.notes_for_worker,
        )


class WorkerCandidate(Snapshot):
    id: str
    name: str = ""
    bio: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    skills: List[Skill] = Field(default_factory=list)
    availability: List[AvailabilityWindow] = Field(default_factory=list)

    @property
    def coordinate(self) -> Coordinate | None:
        return resolve_coordinates(self.latitude, self.longitude, self.location)

    @classmethod
    def from_record(cls, worker: WorkerRecord, availability: List[AvailabilityRecord]) -> "WorkerCandidate":
        windows = [
            AvailabilityWindow(
                days=a.days,
                start_time=a.start_time,
                end_time=a.end_time,
                frequency=a.frequency,
                ends=a.ends,
            )
            for a in availability
            if a.user_id == worker.id
        ]
        return cls(
            id=worker.id,
            name=worker.full_name,
            bio=worker.bio,
            location=worker.location,
            latitude=worker.latitude,
            longitude=worker.longitude,
            skills=worker.skills,
            availability=windows,
        )


# ---- Scoring output ----

class CandidateScore(Snapshot):
    worker_id: str
    worker_name: str
    match_score: int = Field(ge=0, le=100)
    match_reasons: List[str]


class MatchResult(Snapshot):
    worker_id: str
    worker_name: str
    primary_skill: str
    bio: Optional[str] = None
    location: Optional[str] = None
    hourly_rate: float = 0
    experience_years: float = 0
    match_score: int = Field(ge=0, le=100)
    match_reasons: List[str]
    availability: List[AvailabilityWindow] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)


class MatchmakingResult(CamelModel):
    success: bool
    matches: Optional[List[MatchResult]] = None
    error: Optional[str] = None
    total_workers_analyzed: Optional[int] = None
    note: Optional[str] = None


class MatchRequest(CamelModel):
    gig: GigRecord
    workers: List[WorkerRecord] = Field(default_factory=list)
    availability: List[AvailabilityRecord] = Field(default_factory=list)


# ---- Oracle wire contract ----

class OracleGigContext(CamelModel):
    title: str
    description: str
    location: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hourly_rate: float
    additional_requirements: str


class OracleAvailability(CamelModel):
    days: List[str]
    start_time: str
    end_time: str


class OracleWorker(CamelModel):
    worker_id: str
    worker_name: str
    location: Optional[str] = None
    bio: str = ""
    skills: List[Skill] = Field(default_factory=list)
    availability: List[OracleAvailability] = Field(default_factory=list)


class OracleRequest(CamelModel):
    gig_context: OracleGigContext
    worker_data: List[OracleWorker]


class OracleMatch(CamelModel):
    worker_id: str
    worker_name: str
    match_score: float
    match_reasons: List[str] = Field(min_length=1)


class OracleResponse(CamelModel):
    ok: bool
    matches: Optional[List[OracleMatch]] = None
    error: Optional[str] = None
