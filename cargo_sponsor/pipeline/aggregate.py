"""Turn fetch outcomes into the sponsorable-dependency report."""

from __future__ import annotations

import typing as typ

import msgspec

from cargo_sponsor.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .scheduler import FetchOutcome

logger = get_logger(__name__)


class SponsorRecord(msgspec.Struct, frozen=True, kw_only=True):
    """A dependency that can be sponsored.

    Attributes
    ----------
    package_name : str
        Package credited with the repository (the first one that named it).
    repository_url : str
        Repository URL as declared by that package.
    sponsor_links : list[str]
        Funding URLs; never empty.
    sponsor_count : int | None
        Public sponsor count of the repository owner, when listed.

    """

    package_name: str = msgspec.field(name="name")
    repository_url: str = msgspec.field(name="repository")
    sponsor_links: list[str]
    sponsor_count: int | None = None


def aggregate_outcomes(outcomes: cabc.Iterable[FetchOutcome]) -> list[SponsorRecord]:
    """Keep outcomes with funding links, logging and dropping failures.

    Outcomes without repository info or with no funding links produce no
    record. Failed outcomes are logged at WARNING and never abort the run.
    Records follow the order of ``outcomes``.
    """
    records: list[SponsorRecord] = []
    for outcome in outcomes:
        if not outcome.ok:
            log_warning(
                logger,
                "Failed to fetch sponsor info for %s: %s",
                outcome.target.slug,
                outcome.error,
            )
            continue

        info = outcome.info
        if info is None or not info.funding_links:
            continue

        records.append(
            SponsorRecord(
                package_name=outcome.target.package_name,
                repository_url=outcome.target.repository_url,
                sponsor_links=list(info.funding_links),
                sponsor_count=info.sponsor_count,
            )
        )
    return records
