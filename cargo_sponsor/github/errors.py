"""Errors raised while fetching sponsor information for one repository.

Every error carries the ``owner``/``name`` of the repository it concerns so
the aggregator can report it without knowing which request failed.
"""

from __future__ import annotations


class SponsorFetchError(RuntimeError):
    """Base class for per-repository sponsor fetch failures."""

    def __init__(self, message: str, *, owner: str, name: str) -> None:
        """Initialise with a message and the repository it concerns."""
        self.owner = owner
        self.name = name
        super().__init__(message)

    @property
    def slug(self) -> str:
        """Return the ``owner/name`` repository slug."""
        return f"{self.owner}/{self.name}"


class RateLimitedError(SponsorFetchError):
    """Raised when throttling persists past the retry budget."""

    def __init__(
        self, message: str, *, owner: str, name: str, retries: int
    ) -> None:
        """Initialise with the number of retries that were attempted."""
        self.retries = retries
        super().__init__(message, owner=owner, name=name)

    @classmethod
    def exhausted(cls, owner: str, name: str, retries: int) -> RateLimitedError:
        """Return an error for a repository still throttled after ``retries``."""
        return cls(
            f"Rate limited after {retries} retries for {owner}/{name}",
            owner=owner,
            name=name,
            retries=retries,
        )


class GitHubAPIError(SponsorFetchError):
    """Raised when GitHub answers with a non-throttling error status."""

    def __init__(
        self, message: str, *, owner: str, name: str, status_code: int
    ) -> None:
        """Initialise with the HTTP status code GitHub returned."""
        self.status_code = status_code
        super().__init__(message, owner=owner, name=name)

    @classmethod
    def http_error(cls, owner: str, name: str, status_code: int) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"GitHub API error for {owner}/{name}: HTTP {status_code}",
            owner=owner,
            name=name,
            status_code=status_code,
        )


class TransportError(SponsorFetchError):
    """Raised when the request fails before a usable response is read."""

    @classmethod
    def request_failed(cls, owner: str, name: str, detail: str) -> TransportError:
        """Return an error for connection, timeout, redirect or decoding failures."""
        return cls(
            f"Request for {owner}/{name} failed: {detail}",
            owner=owner,
            name=name,
        )


class GitHubResponseShapeError(SponsorFetchError):
    """Raised when a successful response body cannot be decoded."""

    @classmethod
    def undecodable(
        cls, owner: str, name: str, detail: str
    ) -> GitHubResponseShapeError:
        """Return an error for a malformed GraphQL response body."""
        return cls(
            f"GitHub GraphQL response for {owner}/{name} is malformed: {detail}",
            owner=owner,
            name=name,
        )
