"""Unit tests for GitHub token discovery."""

from __future__ import annotations

import subprocess
import typing as typ

import pytest

from cargo_sponsor.github import discover_github_token


class _FakeRun:
    """Replacement for ``subprocess.run`` returning a fixed result."""

    def __init__(
        self,
        *,
        returncode: int = 0,
        stdout: str = "",
        error: OSError | None = None,
    ) -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.error = error
        self.calls: list[list[str]] = []

    def __call__(
        self, args: list[str], **kwargs: typ.Any
    ) -> subprocess.CompletedProcess[str]:
        del kwargs
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(
            args=args, returncode=self.returncode, stdout=self.stdout, stderr=""
        )


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> _FakeRun:
    """Patch ``subprocess.run`` with a recorder that prints a token."""
    fake = _FakeRun(stdout="gho_from_cli\n")
    monkeypatch.setattr("subprocess.run", fake)
    return fake


def test_environment_token_wins(fake_run: _FakeRun) -> None:
    """GITHUB_TOKEN is used without consulting the GitHub CLI."""
    token = discover_github_token({"GITHUB_TOKEN": " ghp_env "})

    assert token == "ghp_env", "Expected trimmed environment token"
    assert fake_run.calls == [], "GitHub CLI should not be invoked"


@pytest.mark.parametrize("environ", [{}, {"GITHUB_TOKEN": ""}, {"GITHUB_TOKEN": " "}])
def test_falls_back_to_gh_cli(fake_run: _FakeRun, environ: dict[str, str]) -> None:
    """A missing or blank variable defers to ``gh auth token``."""
    token = discover_github_token(environ)

    assert token == "gho_from_cli", "Expected token printed by the GitHub CLI"
    assert fake_run.calls == [["gh", "auth", "token"]], "Expected gh auth token"


def test_custom_gh_executable(fake_run: _FakeRun) -> None:
    """The GitHub CLI path can be overridden."""
    discover_github_token({}, gh="/opt/bin/gh")

    assert fake_run.calls == [["/opt/bin/gh", "auth", "token"]]


@pytest.mark.parametrize(
    "fake",
    [
        pytest.param(_FakeRun(returncode=1, stdout=""), id="not_logged_in"),
        pytest.param(_FakeRun(stdout="   \n"), id="empty_output"),
        pytest.param(_FakeRun(error=FileNotFoundError("gh")), id="not_installed"),
    ],
)
def test_no_token_available(monkeypatch: pytest.MonkeyPatch, fake: _FakeRun) -> None:
    """Missing or failing GitHub CLI means running without a token."""
    monkeypatch.setattr("subprocess.run", fake)

    assert discover_github_token({}) is None, "Expected no token"
