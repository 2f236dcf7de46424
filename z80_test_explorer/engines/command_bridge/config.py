"""Configuration for the command bridge engine."""

from pydantic import BaseModel, SecretStr


class CommandBridgeConfig(BaseModel):
    """Configuration for the command bridge engine.

    The bridge forwards commands to the debugger extension that executes the
    unit tests (z80-debug by default).
    """

    api_base_url: str = "http://localhost:11000"
    token: SecretStr | None = None
    extension_id: str = "maziac.z80-debug"
    command_prefix: str = "z80-debug"
    connect_timeout: float = 10
