"""Events sent to the test explorer while loading and running tests."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from z80_test_explorer.models.result import TestStatus
from z80_test_explorer.models.tree import TestSuiteInfo


@dataclass(frozen=True, kw_only=True)
class LoadStarted:
    """Loading of the test tree has started."""

    type: Literal["started"] = "started"


@dataclass(frozen=True, kw_only=True)
class LoadFinished:
    """Loading finished.

    A load without tests has neither a suite nor an error.
    """

    type: Literal["finished"] = "finished"
    suite: TestSuiteInfo | None = None
    error: str | None = None


@dataclass(frozen=True, kw_only=True)
class RunStarted:
    """A run over the given test ids has started."""

    type: Literal["started"] = "started"
    tests: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class TestState:
    """State change of a single test case."""

    __test__ = False

    type: Literal["test"] = "test"
    test: str
    state: TestStatus
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class RunFinished:
    """All test cases of a run have resolved."""

    type: Literal["finished"] = "finished"


type LoadEvent = LoadStarted | LoadFinished
type RunEvent = RunStarted | TestState | RunFinished
