"""Shared test fixtures for gitline tests."""

import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest
from rich.console import Console


@dataclass(frozen=True, slots=True)
class GitRepo:
    """A real git repository built in a temporary directory."""

    root: Path

    def git(self, *args: str, check: bool = True) -> str:
        """Run git in the repository and return its stripped stdout."""
        result = subprocess.run(
            ["git", *args],
            cwd=str(self.root),
            capture_output=True,
            text=True,
            check=check,
        )
        return result.stdout.strip()

    def write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(content)
        return path

    def commit_file(self, name: str, content: str, message: str | None = None) -> str:
        """Write, stage and commit a file; return the new commit id."""
        _ = self.write(name, content)
        _ = self.git("add", name)
        _ = self.git("commit", "-q", "-m", message or f"Update {name}")
        return self.git("rev-parse", "HEAD")


def init_git_repo(path: Path) -> GitRepo:
    """Initialize a git repository on branch main with a test identity."""
    path.mkdir(parents=True, exist_ok=True)
    repo = GitRepo(root=path)
    _ = repo.git("init", "-q")
    _ = repo.git("symbolic-ref", "HEAD", "refs/heads/main")
    _ = repo.git("config", "user.email", "test@example.com")
    _ = repo.git("config", "user.name", "Test User")
    _ = repo.git("config", "commit.gpgsign", "false")
    _ = repo.git("config", "core.editor", "true")
    return repo


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep tests away from the real user config, log directory and GITLINE_* variables."""
    import os

    for key in list(os.environ):
        if key.startswith("GITLINE_") or key == "NO_COLOR":
            monkeypatch.delenv(key)

    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / "state"))


@pytest.fixture
def console() -> Console:
    """Create a Rich console for testing."""
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def user_config_file() -> Path:
    """Return the (not yet existing) user config path inside the isolated home."""
    from gitline.utils import get_user_config_path

    path = get_user_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
