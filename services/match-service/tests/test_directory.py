import asyncio
import json
import logging

import httpx
import pytest

from gig_match.directory import DirectoryClient
from gig_match.errors import GigNotFound, UpstreamError


def directory_with(settings, handler):
    return DirectoryClient(settings, transport=httpx.MockTransport(handler))


class TestFetchGig:
    def test_parses_camel_case_record(self, settings):
        payload = {
            "id": "gig-9",
            "title": "Baker",
            "exactLocation": "Leeds. Coordinates: 53.8, -1.55",
            "address": {"lat": 53.8, "lng": -1.55},
            "startTime": "2026-10-16T18:00:00",
            "hourlyRate": None,
            "buyerId": "buyer-9",
        }

        gig = asyncio.run(directory_with(settings, lambda r: httpx.Response(200, json=payload)).fetch_gig("gig-9"))

        assert gig.buyer_id == "buyer-9"
        assert gig.hourly_rate == 0
        assert gig.address.lat == 53.8
        assert gig.start_time.hour == 18

    def test_blank_address_and_title(self, settings):
        payload = {"id": "gig-9", "title": None, "address": {"lat": "", "lng": None}, "exactLocation": "51.5, -0.1"}

        gig = asyncio.run(directory_with(settings, lambda r: httpx.Response(200, json=payload)).fetch_gig("gig-9"))

        assert gig.title == ""
        assert gig.address.lat is None

    def test_not_found(self, settings):
        client = directory_with(settings, lambda r: httpx.Response(404, json={"detail": "nope"}))

        with pytest.raises(GigNotFound) as exc:
            asyncio.run(client.fetch_gig("missing"))

        assert str(exc.value) == "Gig not found"
        assert exc.value.status_code == 404

    def test_malformed_record(self, settings):
        client = directory_with(settings, lambda r: httpx.Response(200, json={"title": "no id"}))

        with pytest.raises(UpstreamError, match="Malformed gig record"):
            asyncio.run(client.fetch_gig("gig-1"))

    def test_invalid_json(self, settings):
        client = directory_with(settings, lambda r: httpx.Response(200, content=b"<html>"))

        with pytest.raises(UpstreamError, match="invalid JSON"):
            asyncio.run(client.fetch_gig("gig-1"))

    def test_timeout(self, settings):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        with pytest.raises(UpstreamError, match="Timeout"):
            asyncio.run(directory_with(settings, handler).fetch_gig("gig-1"))

    def test_unreachable(self, settings):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamError, match="unreachable"):
            asyncio.run(directory_with(settings, handler).fetch_gig("gig-1"))


class TestFetchWorkers:
    def test_null_skill_fields_become_zero(self, settings):
        payload = [{"id": "w-1", "fullName": "Sam", "skills": [{"name": "Chef", "experienceYears": None, "agreedRate": None}]}]

        [worker] = asyncio.run(directory_with(settings, lambda r: httpx.Response(200, json=payload)).fetch_workers())

        assert worker.full_name == "Sam"
        assert worker.skills[0].experience_years == 0
        assert worker.skills[0].agreed_rate == 0

    def test_no_exclude_param_without_buyer(self, settings):
        seen = []

        def handler(request):
            seen.append(request.url.params)
            return httpx.Response(200, json=[])

        asyncio.run(directory_with(settings, handler).fetch_workers())

        assert "exclude" not in seen[0]
        assert seen[0]["active"] == "true"

    def test_blank_fields_read_as_missing(self, settings):
        payload = [
            {"id": "w-1", "fullName": None, "latitude": "", "longitude": "west", "skills": None},
            {"id": "w-2", "latitude": "51.5", "longitude": 0},
        ]

        first, second = asyncio.run(directory_with(settings, lambda r: httpx.Response(200, json=payload)).fetch_workers())

        assert first.full_name == ""
        assert first.latitude is None
        assert first.longitude is None
        assert first.skills == []
        assert (second.latitude, second.longitude) == (51.5, 0.0)

    def test_unreadable_row_skipped(self, settings, caplog):
        caplog.set_level(logging.WARNING, logger="gig_match.directory")
        payload = [{"fullName": "No Id"}, {"id": "w-2", "skills": "lots"}, {"id": "w-3"}]

        workers = asyncio.run(directory_with(settings, lambda r: httpx.Response(200, json=payload)).fetch_workers())

        assert [w.id for w in workers] == ["w-3"]
        skipped = [json.loads(r.getMessage()) for r in caplog.records if r.name == "gig_match.directory"]
        assert [e["row_id"] for e in skipped if e["event"] == "directory_row_skipped"] == [None, "w-2"]

    def test_non_list_payload_fails(self, settings):
        client = directory_with(settings, lambda r: httpx.Response(200, json={"workers": []}))

        with pytest.raises(UpstreamError, match="Malformed worker records"):
            asyncio.run(client.fetch_workers())


class TestFetchAvailability:
    def test_no_ids_skips_the_call(self, settings):
        def handler(request):
            raise AssertionError("should not be called")

        assert asyncio.run(directory_with(settings, handler).fetch_availability([])) == []

    def test_parses_windows(self, settings):
        payload = [{"userId": "w-1", "days": ["Mon", "Fri"], "startTime": "09:00", "endTime": "17:00", "frequency": "weekly"}]

        [window] = asyncio.run(
            directory_with(settings, lambda r: httpx.Response(200, json=payload)).fetch_availability(["w-1"])
        )

        assert window.user_id == "w-1"
        assert window.days == ["Mon", "Fri"]
        assert window.frequency == "weekly"
