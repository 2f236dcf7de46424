"""Run orchestrator serializing test runs on a single engine."""

import asyncio
import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field

from z80_test_explorer.engines.base import TestEngine
from z80_test_explorer.events import EventEmitter
from z80_test_explorer.models.events import (
    RunEvent,
    RunFinished,
    RunStarted,
    TestState,
)
from z80_test_explorer.models.result import outcome_for
from z80_test_explorer.models.run import RunRequest
from z80_test_explorer.models.tree import TestInfo

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class _Run:
    """A queued or active run and the test case tasks it started."""

    request: RunRequest
    test_cases: Sequence[TestInfo]
    emitter: EventEmitter[RunEvent]
    cancelled: bool = False
    tasks: list[asyncio.Task[None]] = field(default_factory=list)

    def emit(self, event: RunEvent) -> None:
        if not self.cancelled:
            self.emitter.fire(event)

    def cancel_tasks(self) -> None:
        for task in self.tasks:
            task.cancel()

    def cancel(self) -> None:
        """Stop waiting for the test cases and drop all further events."""
        self.cancelled = True
        self.cancel_tasks()


@dataclass(kw_only=True)
class RunOrchestrator:
    """Serializes run and debug requests on an engine running one batch at a time.

    Requests from all project roots share one FIFO queue. The head of the queue
    is the active run, the rest wait their turn. cancel_all drops the whole
    queue: the UI offers a single cancel control for all roots.
    """

    engine: TestEngine
    _queue: deque[_Run] = field(default_factory=deque, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)

    @property
    def is_running(self) -> bool:
        return bool(self._queue)

    async def run_or_enqueue(
        self,
        request: RunRequest,
        test_cases: Sequence[TestInfo],
        emitter: EventEmitter[RunEvent],
    ) -> None:
        """Run the test cases, or queue them behind the runs already pending.

        The call that finds the queue empty drains it, including requests
        queued while it is draining. Later calls return once queued.

        Args:
            request: The run request the test cases were resolved from
            test_cases: Test cases to run, in the order they are reported
            emitter: Receives the run and test state events of this request

        """
        self._queue.append(
            _Run(request=request, test_cases=test_cases, emitter=emitter)
        )
        if len(self._queue) > 1:
            log.info(
                "Run for %s queued behind %d pending run(s)",
                request.root,
                len(self._queue) - 1,
            )
            return

        generation = self._generation
        try:
            while self._queue and generation == self._generation:
                await self._execute(self._queue[0])
                if generation == self._generation:
                    self._queue.popleft()
        except BaseException:
            # Nobody is left to drain the queue once this call is interrupted
            if generation == self._generation and self._queue:
                log.warning(
                    "Run for %s interrupted, dropping %d queued run(s)",
                    self._queue[0].request.root,
                    len(self._queue) - 1,
                )
                self._drop_queue()
            raise

    async def cancel_all(self) -> bool:
        """Cancel the active run and drop all queued runs.

        Returns:
            True if runs were cancelled, False if nothing was running

        """
        if not self._queue:
            log.debug("Nothing to cancel")
            return False

        log.info("Cancelling active run and %d queued run(s)", len(self._queue) - 1)
        self._drop_queue()

        await self.engine.cancel_unit_tests()
        return True

    def _drop_queue(self) -> None:
        active = self._queue[0]
        self._queue.clear()
        self._generation += 1
        active.cancel()

    async def _execute(self, run: _Run) -> None:
        request = run.request
        run.emit(RunStarted(tests=[test_case.id for test_case in run.test_cases]))

        if not run.test_cases:
            log.info("No test cases to run for %s", request.root)
            run.emit(RunFinished())
            return

        log.info(
            "%s %d test case(s) in %s",
            "Debugging" if request.debug else "Running",
            len(run.test_cases),
            request.root,
        )

        try:
            await self.engine.init_unit_tests(request.root)
        except Exception as exc:
            log.error("Initializing unit tests failed: %s", exc, exc_info=exc)
            for test_case in run.test_cases:
                run.emit(
                    TestState(test=test_case.id, state="errored", message=str(exc))
                )
            run.emit(RunFinished())
            return

        if run.cancelled:
            return

        for test_case in run.test_cases:
            run.emit(TestState(test=test_case.id, state="running"))
            run.tasks.append(
                asyncio.create_task(self._execute_test_case(run, test_case))
            )

        # Let every test case command start before the batch is triggered
        await asyncio.sleep(0)
        if run.cancelled:
            return

        try:
            await self.engine.run_partial_unit_tests(
                request.root, debug=request.debug
            )
        except Exception as exc:
            log.error("Starting unit tests failed: %s", exc, exc_info=exc)
            run.cancel_tasks()
            await asyncio.gather(*run.tasks, return_exceptions=True)
            for test_case, task in zip(run.test_cases, run.tasks, strict=True):
                if task.cancelled():
                    run.emit(
                        TestState(test=test_case.id, state="errored", message=str(exc))
                    )
        else:
            await asyncio.gather(*run.tasks, return_exceptions=True)

        run.emit(RunFinished())

    async def _execute_test_case(self, run: _Run, test_case: TestInfo) -> None:
        try:
            code = await self.engine.exec_unit_test_case(test_case.id)
        except Exception as exc:
            log.error("Test case %s failed to execute: %s", test_case.id, exc)
            run.emit(TestState(test=test_case.id, state="errored", message=str(exc)))
            return

        outcome = outcome_for(code)
        log.debug("Test case %s: %s", test_case.id, outcome.state)
        run.emit(
            TestState(test=test_case.id, state=outcome.state, message=outcome.message)
        )
