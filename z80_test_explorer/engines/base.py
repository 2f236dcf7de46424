"""Abstract base class for unit test engines."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from z80_test_explorer.models.unit_test import UnitTestCase


class EngineError(Exception):
    """Base class for failures reported by or about a test engine."""


class EngineUnavailableError(EngineError):
    """Raised when the engine (or the debugger behind it) is not installed."""


class EngineActivationError(EngineError):
    """Raised when the engine is installed but fails to start."""


class EngineCommandError(EngineError):
    """Raised when a command sent to the engine fails."""


class TestEngine(ABC):
    """Abstract base for engines executing Z80 unit tests.

    The engine runs one batch at a time: test cases are registered one by one
    with exec_unit_test_case and only execute once run_partial_unit_tests
    triggers the batch. Test cases registered after the trigger are not part
    of it. The awaitable returned for each test case resolves with its result
    code when that test case has finished.
    """

    __test__ = False

    @abstractmethod
    async def is_active(self) -> bool:
        """Check if the engine is ready to accept commands.

        Raises:
            EngineUnavailableError: If the engine is not installed

        """

    @abstractmethod
    async def activate(self) -> None:
        """Start the engine.

        Raises:
            EngineActivationError: If the engine could not be started

        """

    @abstractmethod
    async def get_all_unit_tests(self, root: Path) -> Sequence[UnitTestCase]:
        """Enumerate the unit test labels of the project.

        Args:
            root: Project root folder

        Returns:
            Labels in the order the engine found them

        """

    @abstractmethod
    async def init_unit_tests(self, root: Path) -> None:
        """Clear the test cases registered for the next batch."""

    @abstractmethod
    async def exec_unit_test_case(self, label: str) -> int:
        """Register a test case and wait for its result code.

        Args:
            label: Full dotted label of the test case

        Returns:
            A TestCaseResult value, resolved once the batch ran the test case

        """

    @abstractmethod
    async def run_partial_unit_tests(self, root: Path, *, debug: bool) -> None:
        """Execute all registered test cases, optionally under the debugger."""

    @abstractmethod
    async def cancel_unit_tests(self) -> None:
        """Abort the running batch."""

    async def ensure_active(self) -> None:
        """Activate the engine unless it already is.

        Raises:
            EngineUnavailableError: If the engine is not installed
            EngineActivationError: If the engine could not be started

        """
        if not await self.is_active():
            await self.activate()
