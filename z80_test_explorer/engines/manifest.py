"""What the CLI needs to know to start an engine selected by key."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from z80_test_explorer.engines.base import TestEngine

type EngineFactory[ConfigT: BaseModel] = Callable[
    [ConfigT], AbstractAsyncContextManager[TestEngine]
]


@dataclass(frozen=True, kw_only=True)
class EngineManifest[ConfigT: BaseModel]:
    """Entry point object of an engine plugin.

    The CLI validates the user supplied JSON with config_cls, then keeps the
    engine opened by engine_factory for the whole load and run.
    """

    config_cls: type[ConfigT]
    engine_factory: EngineFactory[ConfigT]
