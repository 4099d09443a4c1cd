from pathlib import Path

import pytest

from gitline.sources import FakeSource
from gitline.status import CommitRef, Head

HEAD_SHA = "a" * 40


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def fake_source() -> FakeSource:
    """Create a FakeSource on branch main at a fixed commit."""
    return FakeSource(head_ref=Head(commit=CommitRef(HEAD_SHA), branch="main"))
