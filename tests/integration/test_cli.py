"""End-to-end runs of the gitline command against real repositories."""

import io
import json
import re
from pathlib import Path

import pytest
from cyclopts import App
from rich.console import Console

from gitline.cli import ExitCode, create_app

from tests.conftest import GitRepo

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def app(output: io.StringIO) -> App:
    console = Console(file=output, width=200, force_terminal=False)
    error_console = Console(file=io.StringIO(), width=200)
    return create_app(console, error_console, exit_on_error=False)


@pytest.fixture(autouse=True)
def in_repo(git_repo: GitRepo, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(git_repo.root)


def _run(app: App, *tokens: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        app(list(tokens))
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


@pytest.mark.parametrize("backend", ["porcelain", "dulwich"])
def test_status_line_for_working_directory(
    app: App, output: io.StringIO, git_repo: GitRepo, backend: str
) -> None:
    _ = git_repo.commit_file("README.md", "hello\n")
    _ = git_repo.write("notes.txt", "todo\n")

    code = _run(app, "--plain", "--backend", backend)

    assert code == ExitCode.SUCCESS
    assert output.getvalue() == "main[-] :: w[+1]\n"


def test_headless_repository(app: App, output: io.StringIO) -> None:
    assert _run(app, "--plain") == ExitCode.SUCCESS
    assert output.getvalue() == "[headless]\n"


def test_path_argument(app: App, output: io.StringIO, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()

    assert _run(app, "--plain", str(outside)) == ExitCode.SUCCESS
    assert output.getvalue() == "[no repo]\n"


def test_user_config_file(
    app: App, output: io.StringIO, git_repo: GitRepo, user_config_file: Path
) -> None:
    _ = user_config_file.write_text('[display]\ncolor = "never"\nsparse = true\n')
    tip = git_repo.commit_file("README.md", "hello\n")
    _ = git_repo.git("remote", "add", "origin", str(git_repo.root.parent / "origin.git"))
    _ = git_repo.git("update-ref", "refs/remotes/origin/main", tip)
    _ = git_repo.git("branch", "-q", "--set-upstream-to", "origin/main")

    assert _run(app) == ExitCode.SUCCESS
    assert output.getvalue() == "main[origin/~]\n"


def test_debug_log_written(
    app: App, git_repo: GitRepo, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    log_file = tmp_path / "logs" / "gitline.log"
    monkeypatch.setenv("GITLINE_LOGGING__LEVEL", "debug")
    monkeypatch.setenv("GITLINE_LOGGING__FILE", str(log_file))
    _ = git_repo.commit_file("README.md", "hello\n")

    assert _run(app, "--plain") == ExitCode.SUCCESS

    events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
    assert "status_source_opened" in events
    assert "repo_state_classified" in events


def test_broken_config_falls_back_to_defaults(
    app: App,
    output: io.StringIO,
    user_config_file: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _ = user_config_file.write_text("[display\n")

    assert _run(app, "--plain") == ExitCode.SUCCESS

    assert ANSI_RE.sub("", output.getvalue()) == "[headless]\n"
    assert capsys.readouterr().err.startswith("Warning:")
