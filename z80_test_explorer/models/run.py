"""Run requests submitted by the test explorer."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class RunRequest:
    """Request to run (or debug) a selection of suites and tests."""

    root: Path
    tests: Sequence[str]
    debug: bool = False
