"""Fatal errors raised before any sponsorship query starts."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

# Keep stderr excerpts short enough for a terminal message.
_STDERR_PREVIEW_LIMIT = 500


class SetupError(Exception):
    """Raised when the dependency graph cannot be loaded.

    The CLI reports these errors and exits with a non-zero status; nothing
    is fetched once one has been raised.
    """

    @classmethod
    def manifest_not_found(cls, manifest_path: Path) -> SetupError:
        """Return an error for a manifest path that does not exist."""
        return cls(f"Cargo manifest not found: {manifest_path}")

    @classmethod
    def cargo_unavailable(cls, cargo: str, detail: str) -> SetupError:
        """Return an error when the cargo executable cannot be started."""
        return cls(f"Failed to run {cargo!r}: {detail}")

    @classmethod
    def metadata_failed(cls, exit_code: int, stderr: str) -> SetupError:
        """Return an error for a failed ``cargo metadata`` invocation."""
        detail = stderr.strip()
        if len(detail) > _STDERR_PREVIEW_LIMIT:
            detail = detail[:_STDERR_PREVIEW_LIMIT] + "..."
        message = f"Failed to get cargo metadata (exit code {exit_code})"
        if detail:
            message = f"{message}: {detail}"
        return cls(message)

    @classmethod
    def invalid_metadata(cls, detail: str) -> SetupError:
        """Return an error for ``cargo metadata`` output that cannot be parsed."""
        return cls(f"Failed to parse cargo metadata: {detail}")
