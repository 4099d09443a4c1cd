"""Display configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from gitline.config._models._common import ColorMode


class DisplayConfig(BaseModel):
    """Status line display section.

    Attributes:
        color: When to emit ANSI colors.
        sparse: Condense an upstream that shares the local branch name.
        show_stash: Append the stash count when non-zero.
        hash_length: Characters of a detached commit id to show.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    color: ColorMode = ColorMode.ALWAYS
    sparse: bool = False
    show_stash: bool = False
    hash_length: int = Field(default=7, ge=4, le=40)
