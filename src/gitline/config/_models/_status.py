"""Status acquisition configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from gitline.sources import Backend
from gitline.utils import DEFAULT_TIMEOUT_MS


class StatusConfig(BaseModel):
    """Status acquisition section.

    Attributes:
        backend: Which status source reads the repository.
        git: Git executable used by the porcelain backend.
        timeout_ms: Timeout for each git invocation.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    backend: Backend = Backend.PORCELAIN
    git: str = Field(default="git", min_length=1)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
