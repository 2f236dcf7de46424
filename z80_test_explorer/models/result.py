"""Test case result codes and the outcomes reported for them."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

type TestStatus = Literal["running", "passed", "failed", "errored"]


class TestCaseResult(IntEnum):
    """Result code returned by the engine for one test case."""

    __test__ = False

    OK = 0
    FAILED = 1
    TIMEOUT = 2
    # Manually cancelled, or the connection to the target was lost
    CANCELLED = 3


@dataclass(frozen=True, kw_only=True)
class TestOutcome:
    """Final state of a test case as shown in the explorer."""

    __test__ = False

    state: Literal["passed", "failed", "errored"]
    message: str | None = None


RESULT_TO_OUTCOME: Mapping[TestCaseResult, TestOutcome] = {
    TestCaseResult.OK: TestOutcome(state="passed"),
    TestCaseResult.FAILED: TestOutcome(state="failed"),
    TestCaseResult.TIMEOUT: TestOutcome(state="failed", message="Timed out!"),
    TestCaseResult.CANCELLED: TestOutcome(state="errored", message="Cancelled"),
}


def outcome_for(code: int) -> TestOutcome:
    """Map an engine result code to the outcome reported for the test.

    Codes outside of TestCaseResult are reported as failures instead of
    aborting the run.
    """
    try:
        return RESULT_TO_OUTCOME[TestCaseResult(code)]
    except ValueError:
        return TestOutcome(
            state="failed", message=f"Unexpected test case result: {code}"
        )
