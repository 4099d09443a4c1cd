"""Both status sources against real repositories built with git."""

from collections.abc import Callable
from pathlib import Path

import pytest

from gitline.exceptions import NotARepositoryError
from gitline.sources import Backend, get_repo_state, open_source
from gitline.status import (
    Branch,
    Clean,
    CommitRef,
    ConflictKind,
    Conflicted,
    Detached,
    Headless,
    RenderOptions,
    Tag,
    render,
)

from tests.conftest import GitRepo, init_git_repo


@pytest.fixture(params=list(Backend), ids=lambda backend: backend.value)
def backend(request: pytest.FixtureRequest) -> Backend:
    return request.param


def _line(repo: GitRepo, backend: Backend, options: RenderOptions | None = None) -> str:
    return render(get_repo_state(repo.root, backend=backend), options)


def _add_upstream(repo: GitRepo, tip: str, remote: str = "origin") -> None:
    _ = repo.git("remote", "add", remote, str(repo.root.parent / "upstream.git"))
    _ = repo.git("update-ref", f"refs/remotes/{remote}/main", tip)
    _ = repo.git("config", "branch.main.remote", remote)
    _ = repo.git("config", "branch.main.merge", "refs/heads/main")


class TestHeadless:
    def test_empty_repository(self, git_repo: GitRepo, backend: Backend) -> None:
        assert get_repo_state(git_repo.root, backend=backend) == Headless()
        assert _line(git_repo, backend) == "[headless]"

    def test_untracked_file(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.write("README.md", "hello\n")

        assert _line(git_repo, backend) == "[headless] :: w[+1]"


class TestBranch:
    def test_clean_without_upstream(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("README.md", "hello\n")

        assert get_repo_state(git_repo.root, backend=backend) == Clean(branch=Branch("main"))
        assert _line(git_repo, backend) == "main[-]"

    def test_working_changes(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("README.md", "hello\n")
        _ = git_repo.write("README.md", "changed\n")
        _ = git_repo.write("new.txt", "new\n")
        _ = git_repo.git("add", "new.txt")

        assert _line(git_repo, backend) == "main[-] :: w[~1] i[+1]"

    def test_deleted_file(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("a.txt", "a\n")
        (git_repo.root / "a.txt").unlink()

        assert _line(git_repo, backend) == "main[-] :: w[-1]"

    def test_staged_delete(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("a.txt", "a\n")
        _ = git_repo.git("rm", "-q", "a.txt")

        assert _line(git_repo, backend) == "main[-] :: i[-1]"

    def test_discovery_from_subdirectory(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("src/app.py", "print()\n")

        assert render(get_repo_state(git_repo.root / "src", backend=backend)) == "main[-]"

    def test_in_sync_with_upstream(self, git_repo: GitRepo, backend: Backend) -> None:
        tip = git_repo.commit_file("README.md", "hello\n")
        _add_upstream(git_repo, tip)

        assert _line(git_repo, backend) == "main[origin/main][]"
        assert _line(git_repo, backend, RenderOptions(sparse=True)) == "main[origin/~]"

    def test_diverged_from_upstream(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("base.txt", "base\n")
        _ = git_repo.git("checkout", "-q", "-b", "side")
        upstream_tip = git_repo.commit_file("remote.txt", "remote\n")
        _ = git_repo.git("checkout", "-q", "main")
        _ = git_repo.git("branch", "-q", "-D", "side")
        _ = git_repo.commit_file("one.txt", "1\n")
        _ = git_repo.commit_file("two.txt", "2\n")
        _add_upstream(git_repo, upstream_tip)

        assert _line(git_repo, backend) == "main[origin/main][21]"

    def test_remote_name_with_slash(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("base.txt", "base\n")
        tip = git_repo.commit_file("one.txt", "1\n")
        _add_upstream(git_repo, tip, remote="team/fork")
        _ = git_repo.commit_file("two.txt", "2\n")

        assert _line(git_repo, backend) == "main[team/fork/main][1]"

    def test_stash_count(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("README.md", "hello\n")
        _ = git_repo.write("README.md", "stashed\n")
        _ = git_repo.git("stash", "-q")

        state = get_repo_state(git_repo.root, backend=backend)

        assert state == Clean(branch=Branch("main"), stash=1)
        assert render(state, RenderOptions(show_stash=True)) == "main[-] :: s[1]"


class TestDetached:
    def test_at_commit(self, git_repo: GitRepo, backend: Backend) -> None:
        sha = git_repo.commit_file("README.md", "hello\n")
        _ = git_repo.git("checkout", "-q", "--detach", "HEAD")

        assert get_repo_state(git_repo.root, backend=backend) == Detached(head=CommitRef(sha))
        assert _line(git_repo, backend) == sha[:7]

    def test_at_annotated_tag(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("README.md", "hello\n")
        _ = git_repo.git("tag", "-a", "v2.0", "-m", "Release 2.0")
        _ = git_repo.git("tag", "v1.0")
        _ = git_repo.git("checkout", "-q", "--detach", "v2.0")

        assert get_repo_state(git_repo.root, backend=backend) == Detached(head=Tag("v1.0"))


class TestConflicts:
    def test_merge_conflict(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("a.txt", "base\n")
        _ = git_repo.commit_file("b.txt", "base\n")
        _ = git_repo.git("checkout", "-q", "-b", "feature")
        _ = git_repo.write("a.txt", "feature\n")
        _ = git_repo.git("add", "a.txt")
        _ = git_repo.commit_file("b.txt", "feature\n")
        _ = git_repo.git("checkout", "-q", "main")
        _ = git_repo.write("a.txt", "main\n")
        _ = git_repo.git("add", "a.txt")
        _ = git_repo.commit_file("b.txt", "main\n")
        _ = git_repo.git("merge", "-q", "feature", check=False)

        state = get_repo_state(git_repo.root, backend=backend)

        assert state == Conflicted(
            kind=ConflictKind.MERGE,
            source=Branch("main"),
            target=Branch("feature"),
            conflicts=2,
        )
        assert render(state) == "main <- feature :: [!2]"

    def test_rebase_conflict(self, git_repo: GitRepo, backend: Backend) -> None:
        _ = git_repo.commit_file("a.txt", "base\n")
        _ = git_repo.git("checkout", "-q", "-b", "topic")
        _ = git_repo.commit_file("a.txt", "topic\n")
        _ = git_repo.git("checkout", "-q", "main")
        _ = git_repo.commit_file("a.txt", "main\n")
        _ = git_repo.git("checkout", "-q", "topic")
        _ = git_repo.git("rebase", "main", check=False)

        state = get_repo_state(git_repo.root, backend=backend)

        assert state == Conflicted(
            kind=ConflictKind.REBASE,
            source=Branch("main"),
            target=Branch("topic"),
            conflicts=1,
        )
        assert render(state) == "topic -> main :: [!1]"


class TestDiscovery:
    def test_not_a_repository(self, tmp_path: Path, backend: Backend) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        with pytest.raises(NotARepositoryError):
            _ = get_repo_state(plain, backend=backend)

    def test_missing_directory(self, tmp_path: Path, backend: Backend) -> None:
        with pytest.raises(NotARepositoryError):
            _ = get_repo_state(tmp_path / "missing", backend=backend)

    def test_root_from_subdirectory(self, tmp_path: Path, backend: Backend) -> None:
        repo = init_git_repo(tmp_path / "nested" / "repo")
        (repo.root / "sub").mkdir()

        with open_source(repo.root / "sub", backend=backend) as source:
            assert source.root.resolve() == repo.root.resolve()


def _modify_and_add(repo: GitRepo) -> None:
    _ = repo.write("a.txt", "b\n")
    _ = repo.write("b.txt", "b\n")
    _ = repo.git("add", "b.txt")
    _ = repo.write("c.txt", "c\n")


def _rename(repo: GitRepo) -> None:
    _ = repo.git("mv", "a.txt", "renamed.txt")


def _replace_with_symlink(repo: GitRepo) -> None:
    path = repo.root / "a.txt"
    path.unlink()
    path.symlink_to("target.txt")


def _stage_symlink(repo: GitRepo) -> None:
    _replace_with_symlink(repo)
    _ = repo.git("add", "a.txt")


def _remove_and_recreate(repo: GitRepo) -> None:
    _ = repo.git("rm", "-q", "a.txt")
    _ = repo.write("a.txt", "a\n")


def _untracked_directory(repo: GitRepo) -> None:
    _ = repo.write("new/one.txt", "1\n")
    _ = repo.write("new/deeper/two.txt", "2\n")


class TestSourcesAgree:
    @pytest.mark.parametrize(
        ("change", "expected"),
        [
            pytest.param(_modify_and_add, "main[-] :: w[+1~1] i[+1]", id="modify-and-add"),
            pytest.param(_rename, "main[-] :: i[*1]", id="rename"),
            pytest.param(_replace_with_symlink, "main[-] :: w[?1]", id="type-change"),
            pytest.param(_stage_symlink, "main[-] :: i[?1]", id="staged-type-change"),
            pytest.param(_remove_and_recreate, "main[-] :: w[+1] i[-1]", id="remove-and-recreate"),
            pytest.param(_untracked_directory, "main[-] :: w[+1]", id="untracked-directory"),
        ],
    )
    def test_same_state(
        self, git_repo: GitRepo, change: Callable[[GitRepo], None], expected: str
    ) -> None:
        _ = git_repo.commit_file("a.txt", "a\n")
        change(git_repo)

        states = {backend: get_repo_state(git_repo.root, backend=backend) for backend in Backend}

        assert states[Backend.PORCELAIN] == states[Backend.DULWICH]
        assert render(states[Backend.DULWICH]) == expected
