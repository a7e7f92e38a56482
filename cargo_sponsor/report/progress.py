"""Terminal progress bar fed by the fetch scheduler."""

from __future__ import annotations

import typing as typ

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
)

if typ.TYPE_CHECKING:
    from rich.console import Console

    from cargo_sponsor.pipeline.targets import FetchTarget

_DESCRIPTION = "Retrieving GitHub sponsor information..."


class RichFetchProgress:
    """Show fetch progress with a transient rich progress bar.

    Use as a context manager around the fetch; the bar disappears when the
    block exits. ``rich.progress.Progress`` serialises its own updates, so
    concurrent tasks may call :meth:`started` and :meth:`completed` freely.
    """

    def __init__(self, total: int, *, console: Console | None = None) -> None:
        """Create a progress bar expecting ``total`` completions."""
        self._progress = Progress(
            SpinnerColumn(style="green"),
            TextColumn("{task.description}"),
            BarColumn(complete_style="cyan", finished_style="blue"),
            MofNCompleteColumn(),
            TextColumn("{task.fields[package]}"),
            console=console,
            transient=True,
        )
        self._task_id = self._progress.add_task(_DESCRIPTION, total=total, package="")

    def __enter__(self) -> RichFetchProgress:
        """Start rendering the progress bar."""
        self._progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Stop rendering and clear the progress bar."""
        self._progress.stop()

    @property
    def completed_count(self) -> int:
        """Return how many fetches have completed."""
        return int(self._progress.tasks[0].completed)

    def started(self, target: FetchTarget) -> None:
        """Show the package currently being fetched."""
        self._progress.update(self._task_id, package=target.package_name)

    def completed(self, target: FetchTarget) -> None:
        """Advance the bar by one completed fetch."""
        del target
        self._progress.advance(self._task_id)
