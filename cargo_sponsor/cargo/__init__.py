"""Cargo workspace dependency loading."""

from __future__ import annotations

from .errors import SetupError
from .metadata import (
    CargoDependency,
    CargoMetadata,
    CargoPackage,
    load_cargo_metadata,
    parse_cargo_metadata,
    resolve_manifest_path,
    select_dependencies,
)

__all__ = [
    "CargoDependency",
    "CargoMetadata",
    "CargoPackage",
    "SetupError",
    "load_cargo_metadata",
    "parse_cargo_metadata",
    "resolve_manifest_path",
    "select_dependencies",
]
