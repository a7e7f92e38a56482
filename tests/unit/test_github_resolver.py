"""Unit tests for GitHub repository URL resolution."""

from __future__ import annotations

import pytest

from cargo_sponsor.github import repo_slug, resolve_github_repo


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/serde-rs/serde",
        "https://github.com/serde-rs/serde.git",
        "https://github.com/serde-rs/serde/",
        "https://github.com/serde-rs/serde/tree/master/serde",
        "http://github.com/serde-rs/serde",
        "git+https://github.com/serde-rs/serde.git",
        "https://GitHub.com/serde-rs/serde",
    ],
)
def test_resolves_github_urls(url: str) -> None:
    """GitHub URLs resolve to the same owner/name pair."""
    assert resolve_github_repo(url) == ("serde-rs", "serde")


@pytest.mark.parametrize(
    "url",
    [
        "",
        "not a url",
        "github.com/serde-rs/serde",
        "https://gitlab.com/serde-rs/serde",
        "https://notgithub.com/x/y",
        "https://www.github.com/serde-rs/serde",
        "https://github.com",
        "https://github.com/",
        "https://github.com/serde-rs",
        "https://github.com/serde-rs/",
        "https://github.com//serde",
        "https://github.com/serde-rs/.git",
        "https://[::1",
        "git@github.com:serde-rs/serde.git",
    ],
)
def test_rejects_non_github_or_malformed_urls(url: str) -> None:
    """Anything that is not a two-segment GitHub URL yields None."""
    assert resolve_github_repo(url) is None


def test_strips_repeated_git_suffix() -> None:
    """Every trailing ``.git`` is removed from the name."""
    assert resolve_github_repo("https://github.com/o/n.git.git") == ("o", "n")


def test_keeps_inner_git_text() -> None:
    """Only the suffix is stripped, not ``.git`` inside the name."""
    assert resolve_github_repo("https://github.com/o/n.github.io") == (
        "o",
        "n.github.io",
    )


def test_repo_slug_joins_owner_and_name() -> None:
    """Slugs use the ``owner/name`` form."""
    assert repo_slug("foo", "bar") == "foo/bar"
