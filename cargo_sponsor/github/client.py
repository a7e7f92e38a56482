"""GitHub GraphQL client for repository funding and sponsor information.

The client issues one query per repository and reacts to GitHub's rate
limiting: ``429 Too Many Requests`` and ``403 Forbidden`` are both treated as
throttling and retried up to ``max_retries`` times. Each retry waits for the
server's ``Retry-After`` value when it is a whole number of seconds, falling
back to ``2 ** attempt`` seconds otherwise.

Without a token the client makes no requests at all and reports every
repository as having no sponsor information.
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses
import enum

import httpx
import msgspec

from cargo_sponsor.logging import get_logger, log_debug

from .errors import (
    GitHubAPIError,
    GitHubResponseShapeError,
    RateLimitedError,
    TransportError,
)
from .models import GraphQLResponse, RepoInfo

logger = get_logger(__name__)

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
USER_AGENT = "cargo-sponsor"
MAX_RETRIES = 3
DEFAULT_TIMEOUT_S = 30.0

_HTTP_FORBIDDEN = 403
_HTTP_TOO_MANY_REQUESTS = 429
_THROTTLING_STATUSES = frozenset({_HTTP_FORBIDDEN, _HTTP_TOO_MANY_REQUESTS})

SPONSOR_QUERY = """
query($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    fundingLinks { url }
    owner {
      ... on User {
        hasSponsorsListing
        sponsors { totalCount }
      }
      ... on Organization {
        hasSponsorsListing
        sponsors { totalCount }
      }
    }
  }
}
"""

Sleep = cabc.Callable[[float], cabc.Awaitable[None]]


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubSponsorsConfig:
    """Configuration for the GitHub sponsorship client."""

    token: str | None = None
    endpoint: str = GITHUB_GRAPHQL_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = USER_AGENT
    max_retries: int = MAX_RETRIES


class AttemptOutcome(enum.StrEnum):
    """Transition taken after one HTTP attempt."""

    DONE = "done"
    RETRY = "retry"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True, slots=True)
class RetryDecision:
    """Next step for the retry loop and how long to wait before it."""

    outcome: AttemptOutcome
    delay_s: float = 0.0


def parse_retry_after(value: str | None) -> int | None:
    """Return the ``Retry-After`` header as whole seconds, if it is one.

    >>> parse_retry_after("7")
    7
    >>> parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") is None
    True

    """
    if value is None:
        return None
    stripped = value.strip()
    if not stripped.isdecimal():
        return None
    return int(stripped)


def backoff_delay(attempt: int, retry_after: str | None = None) -> float:
    """Return seconds to wait before retrying attempt ``attempt``.

    The server-advertised ``Retry-After`` wins when it parses; otherwise the
    delay grows as ``2 ** attempt`` with no jitter and no upper bound.
    """
    advertised = parse_retry_after(retry_after)
    if advertised is not None:
        return float(advertised)
    return float(2**attempt)


def next_retry_decision(
    status_code: int,
    attempt: int,
    *,
    retry_after: str | None = None,
    max_retries: int = MAX_RETRIES,
) -> RetryDecision:
    """Decide what follows an HTTP response received on attempt ``attempt``.

    Parameters
    ----------
    status_code
        HTTP status of the response.
    attempt
        Zero-based attempt counter for the current repository.
    retry_after
        Raw ``Retry-After`` header value, if the response carried one.
    max_retries
        Number of retries allowed after the first attempt.

    Returns
    -------
    RetryDecision
        ``DONE`` for a 2xx response, ``RETRY`` with a delay for throttling
        within budget, ``RATE_LIMITED`` once the budget is spent, and
        ``FAILED`` for any other status.

    """
    if status_code in _THROTTLING_STATUSES:
        if attempt >= max_retries:
            return RetryDecision(AttemptOutcome.RATE_LIMITED)
        return RetryDecision(
            AttemptOutcome.RETRY, delay_s=backoff_delay(attempt, retry_after)
        )
    if not httpx.codes.is_success(status_code):
        return RetryDecision(AttemptOutcome.FAILED)
    return RetryDecision(AttemptOutcome.DONE)


def decode_repo_info(owner: str, name: str, body: bytes) -> RepoInfo | None:
    """Decode a GraphQL response body into :class:`RepoInfo`.

    A response without ``data.repository`` (for example a deleted or renamed
    repository) yields ``None`` rather than an error.
    """
    try:
        payload = msgspec.json.decode(body, type=GraphQLResponse)
    except msgspec.DecodeError as exc:
        raise GitHubResponseShapeError.undecodable(owner, name, str(exc)) from exc

    if payload.data is None or payload.data.repository is None:
        return None
    return payload.data.repository.to_repo_info()


class GitHubSponsorsClient:
    """Fetch funding links and sponsor counts from the GitHub GraphQL API.

    A single instance is shared by every concurrent fetch; it holds no
    per-request state.

    Parameters
    ----------
    config
        Token and endpoint configuration.
    http_client
        Optional ``httpx.AsyncClient`` for testing. When omitted the instance
        creates and owns its own client.
    sleep
        Coroutine used to wait between retries.

    """

    def __init__(
        self,
        config: GitHubSponsorsConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        self._config = config
        self._sleep = sleep
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._headers = {"User-Agent": config.user_agent}
        if config.token:
            self._headers["Authorization"] = f"Bearer {config.token}"

    @property
    def config(self) -> GitHubSponsorsConfig:
        """Return the configuration used to build this client."""
        return self._config

    @property
    def has_token(self) -> bool:
        """Return whether requests will be authenticated."""
        return bool(self._config.token)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_repo_info(self, owner: str, name: str) -> RepoInfo | None:
        """Return funding information for ``owner/name``.

        Returns
        -------
        RepoInfo | None
            Funding details, or ``None`` when no token is configured or the
            repository does not exist.

        Raises
        ------
        RateLimitedError
            If GitHub still throttles the request after ``max_retries``.
        GitHubAPIError
            If GitHub answers with any other error status.
        TransportError
            If the request fails before a usable response is read.
        GitHubResponseShapeError
            If a successful response cannot be decoded.

        """
        if not self.has_token:
            return None

        attempt = 0
        while True:
            response = await self._post(owner, name)
            decision = next_retry_decision(
                response.status_code,
                attempt,
                retry_after=response.headers.get("Retry-After"),
                max_retries=self._config.max_retries,
            )
            match decision.outcome:
                case AttemptOutcome.DONE:
                    return decode_repo_info(owner, name, response.content)
                case AttemptOutcome.RATE_LIMITED:
                    raise RateLimitedError.exhausted(owner, name, attempt)
                case AttemptOutcome.FAILED:
                    raise GitHubAPIError.http_error(
                        owner, name, response.status_code
                    )
                case AttemptOutcome.RETRY:
                    attempt += 1
                    log_debug(
                        logger,
                        "Rate limited for %s/%s, waiting %ss (retry %d/%d)",
                        owner,
                        name,
                        f"{decision.delay_s:g}",
                        attempt,
                        self._config.max_retries,
                    )
                    await self._sleep(decision.delay_s)

    async def _post(self, owner: str, name: str) -> httpx.Response:
        """Send the sponsorship query once."""
        try:
            return await self._client.post(
                self._config.endpoint,
                json={
                    "query": SPONSOR_QUERY,
                    "variables": {"owner": owner, "repo": name},
                },
                headers=self._headers,
            )
        except httpx.RequestError as exc:
            raise TransportError.request_failed(owner, name, str(exc)) from exc
