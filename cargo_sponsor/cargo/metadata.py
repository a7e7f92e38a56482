"""Load the dependency graph of a Cargo workspace.

``cargo metadata`` already resolves the full graph, so this module only runs
it, decodes the JSON it prints, and selects the packages worth querying.

Usage
-----
>>> metadata = load_cargo_metadata(resolve_manifest_path(Path(".")))
>>> deps = select_dependencies(metadata, top_level_only=True)

"""

from __future__ import annotations

import subprocess
import typing as typ
from pathlib import Path

import msgspec

from .errors import SetupError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

MANIFEST_FILE_NAME = "Cargo.toml"


class CargoDependency(msgspec.Struct, kw_only=True):
    """Dependency declaration of a package."""

    name: str
    kind: str | None = None


class CargoPackage(msgspec.Struct, kw_only=True):
    """Package entry from ``cargo metadata``.

    Attributes
    ----------
    id : str
        Opaque package identifier used by ``workspace_members``.
    name : str
        Crate name.
    repository : str | None
        Repository URL declared in the crate manifest, if any.
    dependencies : list[CargoDependency]
        Declared (direct) dependencies.

    """

    id: str
    name: str
    version: str = ""
    repository: str | None = None
    dependencies: list[CargoDependency] = msgspec.field(default_factory=list)


class CargoMetadata(msgspec.Struct, kw_only=True):
    """The subset of ``cargo metadata --format-version 1`` output we use."""

    packages: list[CargoPackage]
    workspace_members: list[str] = msgspec.field(default_factory=list)

    def root_packages(self) -> list[CargoPackage]:
        """Return workspace member packages in ``workspace_members`` order."""
        by_id = {package.id: package for package in self.packages}
        return [by_id[id_] for id_ in self.workspace_members if id_ in by_id]


def resolve_manifest_path(path: Path) -> Path:
    """Return ``path/Cargo.toml`` for directories and ``path`` otherwise."""
    if path.is_dir():
        return path / MANIFEST_FILE_NAME
    return path


def parse_cargo_metadata(raw: bytes | str) -> CargoMetadata:
    """Decode ``cargo metadata`` JSON output.

    Raises
    ------
    SetupError
        If the output is not valid metadata JSON.

    """
    try:
        return msgspec.json.decode(raw, type=CargoMetadata)
    except msgspec.DecodeError as exc:
        raise SetupError.invalid_metadata(str(exc)) from exc


def load_cargo_metadata(manifest_path: Path, *, cargo: str = "cargo") -> CargoMetadata:
    """Run ``cargo metadata`` for ``manifest_path`` and decode the result.

    Parameters
    ----------
    manifest_path
        Path to a ``Cargo.toml`` file.
    cargo
        Cargo executable name or path.

    Returns
    -------
    CargoMetadata
        Packages of the resolved dependency graph and the workspace members.

    Raises
    ------
    SetupError
        If the manifest is missing, cargo cannot be run, cargo fails, or its
        output cannot be parsed.

    """
    if not manifest_path.is_file():
        raise SetupError.manifest_not_found(manifest_path)

    try:
        result = subprocess.run(  # noqa: S603 - fixed argv
            [
                cargo,
                "metadata",
                "--format-version",
                "1",
                "--manifest-path",
                str(manifest_path),
            ],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise SetupError.cargo_unavailable(cargo, str(exc)) from exc

    if result.returncode != 0:
        raise SetupError.metadata_failed(result.returncode, result.stderr)
    return parse_cargo_metadata(result.stdout)


def select_dependencies(
    metadata: CargoMetadata, *, top_level_only: bool = False
) -> list[CargoPackage]:
    """Return the packages to look up sponsorship information for.

    Workspace members are excluded by name. With ``top_level_only`` only
    packages named as a direct dependency of some workspace member remain.
    Input order is preserved.
    """
    roots = metadata.root_packages()
    root_names = {package.name for package in roots}
    direct_names: cabc.Set[str] = {
        dependency.name for package in roots for dependency in package.dependencies
    }

    return [
        package
        for package in metadata.packages
        if package.name not in root_names
        and (not top_level_only or package.name in direct_names)
    ]
