"""Run sponsor fetches with a fixed ceiling on in-flight requests.

Targets are admitted in input order. Once ``concurrency`` fetches are
outstanding the scheduler waits for any one of them to finish before
starting the next, so completions, and therefore results, arrive in no
particular order.
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ

from cargo_sponsor.github.errors import SponsorFetchError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cargo_sponsor.github.models import RepoInfo

    from .targets import FetchTarget

DEFAULT_CONCURRENCY = 10

FetchFn = typ.Callable[[str, str], typ.Awaitable["RepoInfo | None"]]


@dataclasses.dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Result of querying one target: repository info or the error raised."""

    target: FetchTarget
    info: RepoInfo | None = None
    error: SponsorFetchError | None = None

    @property
    def ok(self) -> bool:
        """Return whether the fetch completed without error."""
        return self.error is None


class FetchProgress(typ.Protocol):
    """Receives a notification as each fetch starts and finishes.

    Calls arrive from many concurrent tasks and must return promptly.
    """

    def started(self, target: FetchTarget) -> None:
        """Record that ``target`` is being fetched."""
        ...

    def completed(self, target: FetchTarget) -> None:
        """Record that ``target`` has finished, successfully or not."""
        ...


class NullProgress:
    """Progress sink that discards all notifications."""

    def started(self, target: FetchTarget) -> None:
        """Ignore the start notification."""
        del target

    def completed(self, target: FetchTarget) -> None:
        """Ignore the completion notification."""
        del target


async def _fetch_one(
    target: FetchTarget, fetch: FetchFn, progress: FetchProgress
) -> FetchOutcome:
    progress.started(target)
    try:
        info = await fetch(target.owner, target.repo_name)
    except SponsorFetchError as exc:
        outcome = FetchOutcome(target=target, error=exc)
    else:
        outcome = FetchOutcome(target=target, info=info)
    progress.completed(target)
    return outcome


async def _drain_one(in_flight: set[asyncio.Task[FetchOutcome]]) -> FetchOutcome:
    """Remove one finished task from ``in_flight`` and return its outcome."""
    finished = next((task for task in in_flight if task.done()), None)
    if finished is None:
        done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
        finished = next(iter(done))
    in_flight.discard(finished)
    return finished.result()


async def run_bounded(
    targets: cabc.Iterable[FetchTarget],
    fetch: FetchFn,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    progress: FetchProgress | None = None,
) -> list[FetchOutcome]:
    """Fetch every target with at most ``concurrency`` requests in flight.

    Parameters
    ----------
    targets
        Targets to fetch, started in this order.
    fetch
        Coroutine function taking ``(owner, name)``. ``SponsorFetchError``
        it raises is recorded on the outcome; anything else propagates.
    concurrency
        Maximum number of outstanding fetches; must be at least 1.
    progress
        Optional sink notified as each fetch starts and completes.

    Returns
    -------
    list[FetchOutcome]
        One outcome per target, in completion order.

    Raises
    ------
    ValueError
        If ``concurrency`` is less than 1.

    """
    if concurrency < 1:
        msg = f"concurrency must be at least 1, got {concurrency}"
        raise ValueError(msg)

    sink = progress if progress is not None else NullProgress()
    in_flight: set[asyncio.Task[FetchOutcome]] = set()
    outcomes: list[FetchOutcome] = []

    try:
        for target in targets:
            if len(in_flight) >= concurrency:
                outcomes.append(await _drain_one(in_flight))
            in_flight.add(asyncio.create_task(_fetch_one(target, fetch, sink)))

        while in_flight:
            outcomes.append(await _drain_one(in_flight))
    finally:
        for task in in_flight:
            task.cancel()

    return outcomes
