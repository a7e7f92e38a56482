"""Output rendering and progress reporting."""

from __future__ import annotations

from .progress import RichFetchProgress
from .render import build_sponsor_table, render_json, render_table

__all__ = [
    "RichFetchProgress",
    "build_sponsor_table",
    "render_json",
    "render_table",
]
