import shutil
from pathlib import Path

import pytest

from tests.conftest import GitRepo, init_git_repo


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def require_git() -> None:
    if shutil.which("git") is None:
        pytest.skip("git executable not available")


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    """Create an empty repository (unborn HEAD on main)."""
    return init_git_repo(tmp_path / "repo")
