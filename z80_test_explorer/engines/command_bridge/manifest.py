"""Command bridge engine manifest."""

from z80_test_explorer.engines.command_bridge.config import CommandBridgeConfig
from z80_test_explorer.engines.command_bridge.engine import CommandBridgeEngine
from z80_test_explorer.engines.manifest import EngineManifest

command_bridge_manifest = EngineManifest(
    config_cls=CommandBridgeConfig,
    engine_factory=CommandBridgeEngine.from_config,
)
