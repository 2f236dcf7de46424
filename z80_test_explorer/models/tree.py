"""Suite/test tree handed to the test explorer."""

from collections.abc import Sequence
from typing import Annotated, Literal, Union

from pydantic import Field

from z80_test_explorer.models.base import Model

ROOT_ID = ""
ROOT_LABEL = "z80-unit-tests"


class TestInfo(Model):
    """A single unit test case, always a leaf."""

    __test__ = False

    type: Literal["test"] = "test"
    id: str = Field(..., description="Full dotted label, e.g. 'ut_string.UTT_byte'")
    label: str = Field(..., description="Last segment of the dotted label")
    file: str | None = Field(default=None, description="Source file of the label")
    line: int | None = Field(default=None, ge=0, description="Line of the label")


TreeNode = Annotated[
    Union["TestSuiteInfo", TestInfo],
    Field(discriminator="type"),
]


class TestSuiteInfo(Model):
    """A group of suites and tests sharing a dotted prefix."""

    __test__ = False

    type: Literal["suite"] = "suite"
    id: str = Field(..., description="Dotted prefix shared by all children")
    label: str = Field(..., description="Last segment of the prefix")
    children: Sequence[TreeNode] = Field(..., min_length=1)


TestSuiteInfo.model_rebuild()
