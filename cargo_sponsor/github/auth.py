"""Discover a GitHub token for authenticated sponsorship queries."""

from __future__ import annotations

import os
import subprocess
import typing as typ

from cargo_sponsor.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

TOKEN_ENV_VAR = "GITHUB_TOKEN"


def _token_from_gh(gh: str) -> str | None:
    """Ask the GitHub CLI for its stored token."""
    try:
        result = subprocess.run(  # noqa: S603 - fixed argv
            [gh, "auth", "token"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        log_debug(logger, "GitHub CLI unavailable: %s", exc)
        return None

    if result.returncode != 0:
        log_debug(logger, "`%s auth token` exited with %d", gh, result.returncode)
        return None
    token = result.stdout.strip()
    return token or None


def discover_github_token(
    environ: cabc.Mapping[str, str] | None = None,
    *,
    gh: str = "gh",
) -> str | None:
    """Return a GitHub token from the environment or the GitHub CLI.

    ``GITHUB_TOKEN`` wins when set to a non-empty value; otherwise
    ``gh auth token`` is consulted. A missing token is not an error: the
    caller simply runs without sponsor data.

    Parameters
    ----------
    environ
        Environment mapping to read; defaults to ``os.environ``.
    gh
        GitHub CLI executable name or path.

    Returns
    -------
    str | None
        The token, or ``None`` when no source provides one.

    """
    env = os.environ if environ is None else environ
    token = env.get(TOKEN_ENV_VAR, "").strip()
    if token:
        return token
    return _token_from_gh(gh)
