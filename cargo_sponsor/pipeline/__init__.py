"""Sponsor fetch pipeline: targets, bounded scheduling and aggregation.

Usage
-----
>>> targets = collect_fetch_targets(packages)
>>> records = await fetch_sponsor_records(targets, client, concurrency=10)

"""

from __future__ import annotations

import typing as typ

from .aggregate import SponsorRecord, aggregate_outcomes
from .scheduler import (
    DEFAULT_CONCURRENCY,
    FetchOutcome,
    FetchProgress,
    NullProgress,
    run_bounded,
)
from .targets import FetchTarget, PackageLike, collect_fetch_targets

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cargo_sponsor.github.client import GitHubSponsorsClient


async def fetch_sponsor_records(
    targets: cabc.Sequence[FetchTarget],
    client: GitHubSponsorsClient,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    progress: FetchProgress | None = None,
) -> list[SponsorRecord]:
    """Query every target and return the sponsorable ones.

    Per-target failures are logged and omitted; the returned records are in
    completion order.
    """
    outcomes = await run_bounded(
        targets,
        client.fetch_repo_info,
        concurrency=concurrency,
        progress=progress,
    )
    return aggregate_outcomes(outcomes)


__all__ = [
    "DEFAULT_CONCURRENCY",
    "FetchOutcome",
    "FetchProgress",
    "FetchTarget",
    "NullProgress",
    "PackageLike",
    "SponsorRecord",
    "aggregate_outcomes",
    "collect_fetch_targets",
    "fetch_sponsor_records",
    "run_bounded",
]
