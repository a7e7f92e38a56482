"""Command-line entry point for cargo-sponsor.

Lists the dependencies of a Cargo workspace that accept sponsorship.

Usage:
    cargo sponsor                       # rich table for ./Cargo.toml
    cargo sponsor --output json         # machine-readable output
    cargo sponsor --top-level-only      # direct dependencies only
    cargo-sponsor --manifest-path path/to/Cargo.toml --concurrency 4

Environment variables:
    GITHUB_TOKEN                  - GitHub token (falls back to `gh auth token`)
    CARGO_SPONSOR_CONCURRENCY     - Default concurrency (default: 10)
    CARGO_SPONSOR_GITHUB_ENDPOINT - GraphQL endpoint override
    CARGO_SPONSOR_TIMEOUT_S       - Per-request timeout (default: 30)
    CARGO_SPONSOR_LOG_LEVEL       - Log level (default: WARNING)
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter
from rich.console import Console

from cargo_sponsor import __version__
from cargo_sponsor.cargo import (
    SetupError,
    load_cargo_metadata,
    resolve_manifest_path,
    select_dependencies,
)
from cargo_sponsor.config import ConfigError, SponsorConfig
from cargo_sponsor.github import (
    GitHubSponsorsClient,
    GitHubSponsorsConfig,
    discover_github_token,
)
from cargo_sponsor.logging import (
    configure_logging,
    get_logger,
    log_info,
    log_warning,
)
from cargo_sponsor.pipeline import collect_fetch_targets, fetch_sponsor_records
from cargo_sponsor.report import RichFetchProgress, render_json, render_table

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import httpx

    from cargo_sponsor.pipeline import FetchTarget, SponsorRecord

logger = get_logger(__name__)

OutputFormat = typ.Literal["rich", "json"]

_CARGO_SUBCOMMAND = "sponsor"
_NO_TOKEN_NOTE = (
    "Note: Set GITHUB_TOKEN env var or install/auth the GitHub CLI "
    "for sponsor count info and FUNDING.yml parsing"
)

app = App(
    name="cargo-sponsor",
    help="Find sponsorship links for your dependencies",
    version=__version__,
)


@dataclasses.dataclass(frozen=True, slots=True)
class SponsorOptions:
    """Options for a single run, after flags and environment are merged."""

    manifest_path: Path = Path()
    output: OutputFormat = "rich"
    top_level_only: bool = False
    concurrency: int | None = None


@dataclasses.dataclass(slots=True)
class Consoles:
    """Output streams for results and for notes or errors."""

    out: Console = dataclasses.field(default_factory=Console)
    err: Console = dataclasses.field(default_factory=lambda: Console(stderr=True))


async def _fetch_records(
    targets: list[FetchTarget],
    client_config: GitHubSponsorsConfig,
    *,
    concurrency: int,
    progress_console: Console,
    http_client: httpx.AsyncClient | None,
) -> list[SponsorRecord]:
    client = GitHubSponsorsClient(client_config, http_client=http_client)
    try:
        with RichFetchProgress(len(targets), console=progress_console) as progress:
            records = await fetch_sponsor_records(
                targets, client, concurrency=concurrency, progress=progress
            )
            log_info(
                logger,
                "Queried %d of %d repositories, %d sponsorable",
                progress.completed_count,
                len(targets),
                len(records),
            )
            return records
    finally:
        await client.aclose()


def run_sponsor(
    options: SponsorOptions,
    *,
    config: SponsorConfig,
    consoles: Consoles | None = None,
    environ: cabc.Mapping[str, str] | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> int:
    """Run the full lookup and print the report.

    Returns
    -------
    int
        Exit code: 0 on completion (even when some lookups failed), 1 when
        the workspace cannot be loaded or the options are invalid.

    """
    streams = consoles or Consoles()
    concurrency = (
        config.concurrency if options.concurrency is None else options.concurrency
    )
    if concurrency < 1:
        streams.err.print(f"error: concurrency must be at least 1, got {concurrency}")
        return 1

    manifest_path = resolve_manifest_path(options.manifest_path)
    try:
        metadata = load_cargo_metadata(manifest_path)
    except SetupError as exc:
        streams.err.print(f"error: {exc}", markup=False, highlight=False)
        return 1

    token = discover_github_token(environ)
    if token is None:
        streams.err.print(_NO_TOKEN_NOTE)
        streams.err.print()

    packages = select_dependencies(metadata, top_level_only=options.top_level_only)
    targets = collect_fetch_targets(packages)
    log_info(
        logger,
        "Resolved %d packages to %d GitHub repositories",
        len(packages),
        len(targets),
    )

    client_config = GitHubSponsorsConfig(
        token=token,
        endpoint=config.github_endpoint,
        timeout_s=config.timeout_s,
    )
    records = asyncio.run(
        _fetch_records(
            targets,
            client_config,
            concurrency=concurrency,
            progress_console=streams.err,
            http_client=http_client,
        )
    )

    if options.output == "json":
        print(render_json(records))  # noqa: T201 - raw JSON for pipes
    else:
        render_table(records, streams.out)
    return 0


@app.default
def sponsor(
    *,
    manifest_path: Path = Path(),
    output: OutputFormat = "rich",
    top_level_only: bool = False,
    concurrency: int | None = None,
    log_level: typ.Annotated[
        str | None, Parameter(env_var="CARGO_SPONSOR_LOG_LEVEL")
    ] = None,
) -> int:
    """Find sponsorship links for the dependencies of a Cargo workspace.

    Parameters
    ----------
    manifest_path
        Path to Cargo.toml or the directory containing it.
    output
        Output format: a rich table or JSON.
    top_level_only
        Only report direct dependencies of workspace members.
    concurrency
        Maximum number of concurrent GitHub queries.
    log_level
        Log level for diagnostic output.

    """
    err = Console(stderr=True)
    try:
        config = SponsorConfig.from_env()
    except ConfigError as exc:
        err.print(f"error: {exc}", markup=False, highlight=False)
        return 1

    level_str = log_level or config.log_level
    normalized_level, invalid_level = configure_logging(level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            level_str,
            normalized_level,
        )

    options = SponsorOptions(
        manifest_path=manifest_path,
        output=output,
        top_level_only=top_level_only,
        concurrency=concurrency,
    )
    return run_sponsor(options, config=config, consoles=Consoles(err=err))


def _strip_cargo_subcommand(tokens: list[str]) -> list[str]:
    """Drop the ``sponsor`` argument cargo passes to external subcommands."""
    if tokens and tokens[0] == _CARGO_SUBCOMMAND:
        return tokens[1:]
    return tokens


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``cargo-sponsor`` console script."""
    tokens = _strip_cargo_subcommand(list(sys.argv[1:] if argv is None else argv))
    try:
        result = app(tokens)
    except SystemExit as exc:
        code = exc.code
        if code is None:
            return 0
        return code if isinstance(code, int) else 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    sys.exit(main())
