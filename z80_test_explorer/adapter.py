"""Test adapter connecting one project root to the test explorer."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from z80_test_explorer.engines.base import EngineError, TestEngine
from z80_test_explorer.events import EventEmitter
from z80_test_explorer.lookup import Resolution, resolve_test_cases
from z80_test_explorer.models.events import (
    LoadEvent,
    LoadFinished,
    LoadStarted,
    RunEvent,
)
from z80_test_explorer.models.run import RunRequest
from z80_test_explorer.models.tree import TestSuiteInfo
from z80_test_explorer.orchestrator import RunOrchestrator
from z80_test_explorer.tree_builder import build_test_suite

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class TestAdapter:
    """Loads and runs the Z80 unit tests of one project root.

    Adapters of several roots may share one orchestrator (and engine), their
    runs are then queued behind each other.
    """

    __test__ = False

    root: Path
    engine: TestEngine
    orchestrator: RunOrchestrator
    tests: EventEmitter[LoadEvent] = field(default_factory=EventEmitter, init=False)
    test_states: EventEmitter[RunEvent] = field(
        default_factory=EventEmitter, init=False
    )
    # No engine requests autorun yet, so nothing fires this
    autorun: EventEmitter[None] = field(default_factory=EventEmitter, init=False)
    _suite: TestSuiteInfo | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        log.info("Initializing Z80 unit test adapter for %s", self.root)

    @property
    def suite(self) -> TestSuiteInfo | None:
        """The test tree of the last load, None if it found no tests or failed."""
        return self._suite

    async def load(self) -> LoadFinished:
        """Retrieve the unit tests from the engine and rebuild the test tree.

        Returns:
            The LoadFinished event sent to the test explorer

        """
        log.info("Loading unit tests from %s", self.root)
        self.tests.fire(LoadStarted())

        try:
            await self.engine.ensure_active()
            unit_tests = await self.engine.get_all_unit_tests(self.root)
        except EngineError as exc:
            self._suite = None
            log.warning("Loading unit tests from %s failed: %s", self.root, exc)
            finished = LoadFinished(error=str(exc))
            self.tests.fire(finished)
            return finished

        self._suite = build_test_suite(unit_tests)
        if self._suite is None:
            log.info("No unit tests found in %s", self.root)
        else:
            log.info("Unit tests found in %s", self.root)

        finished = LoadFinished(suite=self._suite)
        self.tests.fire(finished)
        log.info("Loading finished")
        return finished

    async def run(self, tests: Sequence[str]) -> Resolution:
        """Run the given suites and tests."""
        return await self._submit(tests, debug=False)

    async def debug(self, tests: Sequence[str]) -> Resolution:
        """Run the given suites and tests in the debugger."""
        return await self._submit(tests, debug=True)

    async def cancel(self) -> None:
        """Cancel all runs, including those of other roots on the same engine."""
        await self.orchestrator.cancel_all()

    async def dispose(self) -> None:
        await self.cancel()
        self.tests.dispose()
        self.test_states.dispose()
        self.autorun.dispose()

    async def _submit(self, tests: Sequence[str], *, debug: bool) -> Resolution:
        resolution = resolve_test_cases(self._suite, tests)
        request = RunRequest(root=self.root, tests=tuple(tests), debug=debug)
        await self.orchestrator.run_or_enqueue(
            request, resolution.test_cases, self.test_states
        )
        return resolution
