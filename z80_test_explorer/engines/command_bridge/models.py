"""Pydantic models for command bridge responses."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from z80_test_explorer.models.unit_test import UnitTestCase


class ExtensionInfo(BaseModel):
    """State of the debugger extension behind the bridge."""

    id: str
    is_active: bool


class CommandResponse(BaseModel):
    """Response of a command without a meaningful result."""

    result: Any = None


class UnitTestsResponse(BaseModel):
    """Response of getAllUnitTests."""

    result: Sequence[UnitTestCase]


class TestCaseResultResponse(BaseModel):
    """Response of execUnitTestCase, sent once the test case has finished."""

    __test__ = False

    result: int
