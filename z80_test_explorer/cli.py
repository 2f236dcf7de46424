"""CLI entry point for loading and running Z80 unit tests."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from z80_test_explorer.adapter import TestAdapter
from z80_test_explorer.engines.loading import EngineNotFoundError, load_engine_manifest
from z80_test_explorer.models.events import RunEvent, TestState
from z80_test_explorer.orchestrator import RunOrchestrator

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "errored": "❗",
}


@dataclass(kw_only=True)
class RunRecorder:
    """Collects the final state of each test case in completion order."""

    results: list[TestState] = field(default_factory=list)

    def __call__(self, event: RunEvent) -> None:
        if isinstance(event, TestState) and event.state != "running":
            self.results.append(event)


def log_results_summary(log: logging.Logger, results: Sequence[TestState]) -> None:
    """Log a formatted summary of the test case results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.state, "?")
        log.info("%s %s: %s", symbol, result.test, result.state)
        if result.message:
            log.info("  Message: %s", result.message)


def format_output(
    results: Sequence[TestState], unknown_ids: Sequence[str] = ()
) -> dict[str, Any]:
    """Format test case results for JSON output."""
    return {
        "total": len(results),
        "passed": sum(1 for r in results if r.state == "passed"),
        "failed": sum(1 for r in results if r.state == "failed"),
        "errored": sum(1 for r in results if r.state == "errored"),
        "unknown": list(unknown_ids),
        "results": [
            {"test": r.test, "state": r.state, "message": r.message} for r in results
        ],
    }


async def run(
    engine_key: str,
    engine_config_json: str,
    root: Path,
    test_ids: Sequence[str] = (),
    debug: bool = False,
) -> int:
    """Load the unit tests, run the selected ones and return the exit code."""
    log = logging.getLogger("z80_test_explorer")

    log.info("Loading engine: %s", engine_key)
    try:
        manifest = load_engine_manifest(engine_key)
    except EngineNotFoundError as exc:
        log.error("%s", exc)
        print(json.dumps({"error": str(exc)}))
        return 2

    try:
        config = manifest.config_cls.model_validate_json(engine_config_json)
    except ValidationError as exc:
        log.error("Invalid engine configuration: %s", exc)
        print(json.dumps({"error": f"Invalid engine configuration: {exc}"}))
        return 2

    async with manifest.engine_factory(config) as engine:
        orchestrator = RunOrchestrator(engine=engine)
        adapter = TestAdapter(root=root, engine=engine, orchestrator=orchestrator)

        loaded = await adapter.load()
        if loaded.error is not None:
            print(json.dumps({"error": loaded.error}))
            return 2

        if not test_ids:
            suite = loaded.suite.model_dump(mode="json") if loaded.suite else None
            print(json.dumps({"suite": suite}, indent=2))
            return 0

        recorder = RunRecorder()
        adapter.test_states.subscribe(recorder)
        submit = adapter.debug if debug else adapter.run
        resolution = await submit(test_ids)

    log_results_summary(log, recorder.results)

    output = format_output(recorder.results, resolution.unknown_ids)
    print(json.dumps(output, indent=2))

    has_failures = any(
        result.state in {"failed", "errored"} for result in recorder.results
    )

    return 1 if has_failures else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Load and run Z80 unit tests through a debugger engine"
    )
    parser.add_argument(
        "--engine",
        default="command-bridge",
        help="Engine key (default: command-bridge)",
    )
    parser.add_argument(
        "--engine-config",
        default="{}",
        help="JSON configuration for the engine",
    )
    parser.add_argument(
        "--root",
        type=Path,
        required=True,
        help="Project root folder containing the unit tests",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run the selected tests in the debugger",
    )
    parser.add_argument(
        "tests",
        nargs="*",
        help="Suite or test ids to run; without ids the test tree is printed",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            engine_key=args.engine,
            engine_config_json=args.engine_config,
            root=args.root,
            test_ids=args.tests,
            debug=args.debug,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
