"""Runtime configuration for cargo-sponsor.

Defaults can be overridden through environment variables, and command-line
flags override both.

Usage
-----
>>> config = SponsorConfig()
>>> config.concurrency
10

>>> import os
>>> os.environ["CARGO_SPONSOR_CONCURRENCY"] = "4"
>>> SponsorConfig.from_env().concurrency
4

"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from cargo_sponsor.github.client import DEFAULT_TIMEOUT_S, GITHUB_GRAPHQL_URL
from cargo_sponsor.logging import DEFAULT_LOG_LEVEL
from cargo_sponsor.pipeline.scheduler import DEFAULT_CONCURRENCY

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class ConfigError(ValueError):
    """Raised when an environment variable holds an invalid value."""

    @classmethod
    def not_a_number(cls, env_var: str, raw: str) -> ConfigError:
        """Return an error for a value that does not parse as a number."""
        return cls(f"{env_var} must be a number, got: {raw!r}")

    @classmethod
    def not_positive(cls, env_var: str, raw: str) -> ConfigError:
        """Return an error for a zero or negative value."""
        return cls(f"{env_var} must be positive, got: {raw!r}")


@dc.dataclass(frozen=True, slots=True)
class SponsorConfig:
    """Settings for one cargo-sponsor run.

    Attributes
    ----------
    concurrency
        Maximum number of GitHub queries in flight. Default is 10.
    github_endpoint
        GitHub GraphQL endpoint URL.
    timeout_s
        Per-request HTTP timeout in seconds. Default is 30.
    log_level
        femtologging level name. Default is ``WARNING``.

    """

    concurrency: int = DEFAULT_CONCURRENCY
    github_endpoint: str = GITHUB_GRAPHQL_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def _parse_positive_int(
        environ: cabc.Mapping[str, str], env_var: str, default: int
    ) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ConfigError.not_a_number(env_var, raw) from exc
        if value < 1:
            raise ConfigError.not_positive(env_var, raw)
        return value

    @staticmethod
    def _parse_positive_float(
        environ: cabc.Mapping[str, str], env_var: str, default: float
    ) -> float:
        """Read a positive float env var, falling back to a default."""
        raw = environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            raise ConfigError.not_a_number(env_var, raw) from exc
        if value <= 0:
            raise ConfigError.not_positive(env_var, raw)
        return value

    @classmethod
    def from_env(cls, environ: cabc.Mapping[str, str] | None = None) -> SponsorConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``CARGO_SPONSOR_CONCURRENCY``: maximum in-flight queries, a
          positive integer.
        - ``CARGO_SPONSOR_GITHUB_ENDPOINT``: GraphQL endpoint override.
        - ``CARGO_SPONSOR_TIMEOUT_S``: per-request timeout, a positive number.
        - ``CARGO_SPONSOR_LOG_LEVEL``: log level name.

        Raises
        ------
        ConfigError
            If a numeric variable is malformed or not positive.

        """
        env = os.environ if environ is None else environ
        endpoint = env.get("CARGO_SPONSOR_GITHUB_ENDPOINT", "").strip()
        log_level = env.get("CARGO_SPONSOR_LOG_LEVEL", "").strip()
        return cls(
            concurrency=cls._parse_positive_int(
                env, "CARGO_SPONSOR_CONCURRENCY", DEFAULT_CONCURRENCY
            ),
            github_endpoint=endpoint or GITHUB_GRAPHQL_URL,
            timeout_s=cls._parse_positive_float(
                env, "CARGO_SPONSOR_TIMEOUT_S", DEFAULT_TIMEOUT_S
            ),
            log_level=log_level or DEFAULT_LOG_LEVEL,
        )
