"""GitHub repository resolution and sponsorship client."""

from __future__ import annotations

from .auth import discover_github_token
from .client import (
    MAX_RETRIES,
    GitHubSponsorsClient,
    GitHubSponsorsConfig,
    backoff_delay,
    next_retry_decision,
)
from .errors import (
    GitHubAPIError,
    GitHubResponseShapeError,
    RateLimitedError,
    SponsorFetchError,
    TransportError,
)
from .models import RepoInfo
from .resolver import repo_slug, resolve_github_repo

__all__ = [
    "MAX_RETRIES",
    "GitHubAPIError",
    "GitHubResponseShapeError",
    "GitHubSponsorsClient",
    "GitHubSponsorsConfig",
    "RateLimitedError",
    "RepoInfo",
    "SponsorFetchError",
    "TransportError",
    "backoff_delay",
    "discover_github_token",
    "next_retry_decision",
    "repo_slug",
    "resolve_github_repo",
]
