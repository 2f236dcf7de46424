"""Engine plugins registered under the z80_test_explorer.engines entry points."""

import logging
from importlib.metadata import entry_points
from typing import Any

from z80_test_explorer.engines.base import EngineUnavailableError
from z80_test_explorer.engines.manifest import EngineManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "z80_test_explorer.engines"


class EngineNotFoundError(EngineUnavailableError):
    """No installed distribution registers the requested engine key."""


def available_engines() -> list[str]:
    """Keys of all installed engines, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_engine_manifest(key: str) -> EngineManifest[Any]:
    """Import the engine registered as key and return its manifest.

    Raises:
        EngineNotFoundError: If no installed engine uses the key

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise EngineNotFoundError(
            f"Engine '{key}' not found. Available engines: {available_engines()}"
        )

    entry = next(iter(matches))
    log.debug("Loading engine %s from %s", key, entry.value)
    manifest: EngineManifest[Any] = entry.load()
    return manifest
