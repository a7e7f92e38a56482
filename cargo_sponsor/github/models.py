"""Typed models for the GitHub sponsorship GraphQL query."""

from __future__ import annotations

import msgspec


class RepoInfo(msgspec.Struct, frozen=True, kw_only=True):
    """Funding information for one repository.

    Attributes
    ----------
    funding_links : list[str]
        Funding URLs registered for the repository, verbatim.
    sponsor_count : int | None
        Total sponsors of the owning account, set only when the owner has a
        public sponsors listing.

    """

    funding_links: list[str] = msgspec.field(default_factory=list)
    sponsor_count: int | None = None


class FundingLink(msgspec.Struct, kw_only=True):
    """Single entry of ``repository.fundingLinks``."""

    url: str


class SponsorConnection(msgspec.Struct, kw_only=True, rename="camel"):
    """The ``sponsors`` connection on a user or organisation."""

    total_count: int


class OwnerData(msgspec.Struct, kw_only=True, rename="camel"):
    """Repository owner fields shared by users and organisations."""

    has_sponsors_listing: bool = False
    sponsors: SponsorConnection | None = None


class RepositoryData(msgspec.Struct, kw_only=True, rename="camel"):
    """The ``repository`` object returned by the sponsorship query."""

    funding_links: list[FundingLink] = msgspec.field(default_factory=list)
    owner: OwnerData = msgspec.field(default_factory=OwnerData)

    def to_repo_info(self) -> RepoInfo:
        """Flatten the GraphQL payload into a :class:`RepoInfo`."""
        sponsor_count = None
        if self.owner.has_sponsors_listing and self.owner.sponsors is not None:
            sponsor_count = self.owner.sponsors.total_count
        return RepoInfo(
            funding_links=[link.url for link in self.funding_links],
            sponsor_count=sponsor_count,
        )


class GraphQLData(msgspec.Struct, kw_only=True):
    """The ``data`` object of a GraphQL response."""

    repository: RepositoryData | None = None


class GraphQLResponse(msgspec.Struct, kw_only=True):
    """Top-level GraphQL response envelope."""

    data: GraphQLData | None = None
