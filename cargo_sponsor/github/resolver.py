"""Resolve declared repository URLs to GitHub ``owner``/``name`` pairs.

Repository URLs come straight from crate manifests, so they are frequently
missing, hosted elsewhere, or malformed. The resolver never raises; anything
it cannot interpret yields ``None``.
"""

from __future__ import annotations

from urllib.parse import urlsplit

GITHUB_HOST = "github.com"
_GIT_SUFFIX = ".git"
_MIN_PATH_SEGMENTS = 2


def _strip_git_suffix(name: str) -> str:
    while name.endswith(_GIT_SUFFIX):
        name = name.removesuffix(_GIT_SUFFIX)
    return name


def resolve_github_repo(repository_url: str) -> tuple[str, str] | None:
    """Extract ``(owner, name)`` from a GitHub repository URL.

    Parameters
    ----------
    repository_url:
        Repository URL as declared by a package, for example
        ``https://github.com/serde-rs/serde.git``.

    Returns
    -------
    tuple[str, str] | None
        ``(owner, name)`` with any trailing ``.git`` removed from the name, or
        ``None`` when the URL does not parse, is not hosted on GitHub, or does
        not name both an owner and a repository.

    Examples
    --------
    >>> resolve_github_repo("https://github.com/serde-rs/serde.git")
    ('serde-rs', 'serde')
    >>> resolve_github_repo("https://gitlab.com/foo/bar") is None
    True

    """
    try:
        parts = urlsplit(repository_url)
        host = parts.hostname
    except ValueError:
        return None

    if not parts.scheme or host != GITHUB_HOST:
        return None

    segments = parts.path.removeprefix("/").split("/")
    if len(segments) < _MIN_PATH_SEGMENTS:
        return None

    owner, name = segments[0], _strip_git_suffix(segments[1])
    if not owner or not name:
        return None
    return owner, name


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug in ``owner/name`` format.

    >>> repo_slug("serde-rs", "serde")
    'serde-rs/serde'

    """
    return f"{owner}/{name}"
