"""Command bridge engine module."""

from z80_test_explorer.engines.command_bridge.config import CommandBridgeConfig
from z80_test_explorer.engines.command_bridge.engine import CommandBridgeEngine
from z80_test_explorer.engines.command_bridge.manifest import command_bridge_manifest

__all__ = ["CommandBridgeConfig", "CommandBridgeEngine", "command_bridge_manifest"]
