"""End-to-end tests for the sponsor fetch pipeline with a mocked backend."""

from __future__ import annotations

import dataclasses
import json

import httpx
import pytest

from cargo_sponsor.pipeline import (
    SponsorRecord,
    collect_fetch_targets,
    fetch_sponsor_records,
)
from tests.helpers.femtologging_capture import capture_femto_logs
from tests.helpers.graphql_backend import (
    RecordingBackend,
    graphql_response,
    make_client,
    repository_backend,
    repository_payload,
)


@dataclasses.dataclass(frozen=True, slots=True)
class _Package:
    name: str
    repository: str | None


_EXAMPLE_PACKAGES = [
    _Package("a", "https://github.com/foo/bar"),
    _Package("b", "https://github.com/foo/bar.git"),
    _Package("c", "https://notgithub.com/x/y"),
]


@pytest.mark.asyncio
async def test_duplicate_repository_is_queried_once() -> None:
    """Shared repositories are fetched once and credited to the first package."""
    backend = repository_backend(
        {
            ("foo", "bar"): repository_payload(
                ["https://opencollective.com/bar"], sponsor_count=5
            )
        }
    )
    client = make_client(backend)

    records = await fetch_sponsor_records(
        collect_fetch_targets(_EXAMPLE_PACKAGES), client, concurrency=10
    )

    assert records == [
        SponsorRecord(
            package_name="a",
            repository_url="https://github.com/foo/bar",
            sponsor_links=["https://opencollective.com/bar"],
            sponsor_count=5,
        )
    ]
    assert backend.call_count == 1
    assert backend.bodies()[0]["variables"] == {"owner": "foo", "repo": "bar"}


@pytest.mark.asyncio
async def test_without_token_reports_nothing() -> None:
    """No token means no requests and an empty report."""
    backend = repository_backend(
        {("foo", "bar"): repository_payload(["https://opencollective.com/bar"])}
    )
    client = make_client(backend, token=None)

    records = await fetch_sponsor_records(
        collect_fetch_targets(_EXAMPLE_PACKAGES), client
    )

    assert records == []
    assert backend.call_count == 0


@pytest.mark.asyncio
async def test_mixed_outcomes() -> None:
    """Funded, unfunded, missing and failing repositories are handled together."""
    packages = [
        _Package("funded", "https://github.com/o/funded"),
        _Package("unfunded", "https://github.com/o/unfunded"),
        _Package("missing", "https://github.com/o/missing"),
        _Package("counted", "https://github.com/o/counted"),
    ]
    backend = repository_backend(
        {
            ("o", "funded"): repository_payload(["https://ko-fi.com/o"]),
            ("o", "unfunded"): repository_payload([], sponsor_count=3),
            ("o", "counted"): repository_payload(
                ["https://github.com/sponsors/o", "https://patreon.com/o"],
                sponsor_count=42,
            ),
        }
    )
    client = make_client(backend)

    records = await fetch_sponsor_records(
        collect_fetch_targets(packages), client, concurrency=2
    )

    by_name = {record.package_name: record for record in records}
    assert set(by_name) == {"funded", "counted"}
    assert by_name["funded"].sponsor_count is None
    assert by_name["counted"].sponsor_links == [
        "https://github.com/sponsors/o",
        "https://patreon.com/o",
    ]
    assert by_name["counted"].sponsor_count == 42
    assert backend.call_count == 4


@pytest.mark.asyncio
async def test_repeated_runs_yield_the_same_records() -> None:
    """Two runs against the same backend agree as unordered collections."""
    packages = [
        _Package(f"pkg-{index}", f"https://github.com/o/repo-{index}")
        for index in range(15)
    ]
    backend = repository_backend(
        {
            ("o", f"repo-{index}"): repository_payload(
                [f"https://example.test/{index}"], sponsor_count=index
            )
            for index in range(0, 15, 2)
        }
    )
    targets = collect_fetch_targets(packages)

    first = await fetch_sponsor_records(targets, make_client(backend), concurrency=3)
    second = await fetch_sponsor_records(targets, make_client(backend), concurrency=3)

    def _key(record: SponsorRecord) -> str:
        return record.package_name

    assert sorted(first, key=_key) == sorted(second, key=_key)
    assert len(first) == 8


@pytest.mark.asyncio
async def test_undecodable_response_does_not_abort_run() -> None:
    """A corrupt body for one repository leaves the others reported."""
    funded = graphql_response(repository_payload(["https://ko-fi.com/good"]))

    def _handler(request: httpx.Request) -> httpx.Response:
        variables = json.loads(request.content.decode("utf-8"))["variables"]
        if variables["repo"] == "bad":
            msg = "bad gzip"
            raise httpx.DecodingError(msg, request=request)
        return funded

    packages = [
        _Package("a", "https://github.com/o/bad"),
        _Package("b", "https://github.com/o/good"),
    ]
    client = make_client(RecordingBackend(_handler))

    with capture_femto_logs("cargo_sponsor.pipeline.aggregate") as capture:
        records = await fetch_sponsor_records(
            collect_fetch_targets(packages), client, concurrency=2
        )
        capture.wait_for_count(1)

    assert [record.package_name for record in records] == ["b"]
    assert "o/bad" in capture.messages()[0]
