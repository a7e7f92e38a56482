"""Build the deduplicated list of repositories to query."""

from __future__ import annotations

import dataclasses
import typing as typ

from cargo_sponsor.github.resolver import repo_slug, resolve_github_repo

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class PackageLike(typ.Protocol):
    """Anything that names a package and its declared repository URL."""

    @property
    def name(self) -> str: ...

    @property
    def repository(self) -> str | None: ...


@dataclasses.dataclass(frozen=True, slots=True)
class FetchTarget:
    """One GitHub repository to query, attributed to the package that named it."""

    package_name: str
    repository_url: str
    owner: str
    repo_name: str

    @property
    def slug(self) -> str:
        """Return the ``owner/name`` repository slug."""
        return repo_slug(self.owner, self.repo_name)


def collect_fetch_targets(
    packages: cabc.Iterable[PackageLike],
) -> list[FetchTarget]:
    """Return one fetch target per distinct GitHub repository.

    Packages without a repository URL, or with one that does not resolve to a
    GitHub repository, are skipped. When several packages share a repository
    the first one wins attribution and the rest are dropped; their sponsor
    status is the repository's and is not reported separately.

    The result follows the first-seen order of ``packages``.
    """
    seen: set[tuple[str, str]] = set()
    targets: list[FetchTarget] = []

    for package in packages:
        repository_url = package.repository
        if not repository_url:
            continue
        resolved = resolve_github_repo(repository_url)
        if resolved is None or resolved in seen:
            continue

        seen.add(resolved)
        owner, repo_name = resolved
        targets.append(
            FetchTarget(
                package_name=package.name,
                repository_url=repository_url,
                owner=owner,
                repo_name=repo_name,
            )
        )

    return targets
