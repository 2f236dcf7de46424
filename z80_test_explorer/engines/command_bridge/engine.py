"""Command bridge engine implementation."""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import BaseModel, ValidationError

from z80_test_explorer.engines.base import (
    EngineActivationError,
    EngineCommandError,
    EngineUnavailableError,
    TestEngine,
)
from z80_test_explorer.engines.command_bridge.config import CommandBridgeConfig
from z80_test_explorer.engines.command_bridge.models import (
    CommandResponse,
    ExtensionInfo,
    TestCaseResultResponse,
    UnitTestsResponse,
)
from z80_test_explorer.models.unit_test import UnitTestCase

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CommandBridgeEngine(TestEngine):
    """Engine forwarding unit test commands to the debugger over HTTP.

    Every command is a POST to /commands/<prefix>.<command> with the
    arguments as JSON. execUnitTestCase only answers once the test case has
    run, so the session has no total timeout.
    """

    config: CommandBridgeConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: CommandBridgeConfig
    ) -> AsyncGenerator["CommandBridgeEngine", None]:
        """Create engine with managed session lifecycle."""
        headers = {"Accept": "application/json"}
        if config.token is not None:
            headers["Authorization"] = f"Bearer {config.token.get_secret_value()}"
        timeout = aiohttp.ClientTimeout(total=None, connect=config.connect_timeout)
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
            timeout=timeout,
        ) as session:
            yield cls(config=config, session=session)

    async def is_active(self) -> bool:
        """Check whether the debugger extension is installed and active."""
        url = f"/extensions/{self.config.extension_id}"
        try:
            async with self.session.get(url) as response:
                if response.status == 404:
                    raise EngineUnavailableError(
                        f"'{self.config.extension_id}' extension not found. "
                        "Please install!"
                    )
                if response.status != 200:
                    text = await response.text()
                    raise EngineCommandError(
                        f"Failed to query extension: {response.status} {text}"
                    )
                data = await response.json()
        except aiohttp.ClientError as exc:
            raise EngineUnavailableError(
                f"Command bridge at {self.config.api_base_url} not reachable: {exc}"
            ) from exc

        return self._validate(ExtensionInfo, data, "extension query").is_active

    async def activate(self) -> None:
        """Activate the debugger extension."""
        url = f"/extensions/{self.config.extension_id}/activate"
        log.info("Activating extension %s", self.config.extension_id)
        try:
            async with self.session.post(url) as response:
                if response.status != 204:
                    text = await response.text()
                    log.warning(
                        "Activation of %s failed: %s %s",
                        self.config.extension_id,
                        response.status,
                        text,
                    )
                    raise EngineActivationError(
                        f"'{self.config.extension_id}' activation failed."
                    )
        except aiohttp.ClientError as exc:
            raise EngineActivationError(
                f"'{self.config.extension_id}' activation failed."
            ) from exc

    async def get_all_unit_tests(self, root: Path) -> Sequence[UnitTestCase]:
        """Retrieve the unit test labels of the project."""
        data = await self._command("getAllUnitTests", str(root))
        return self._validate(UnitTestsResponse, data, "getAllUnitTests").result

    async def init_unit_tests(self, root: Path) -> None:
        """Clear the test cases registered with the debugger."""
        await self._command("initUnitTests", str(root))

    async def exec_unit_test_case(self, label: str) -> int:
        """Register a test case and wait until the debugger reports its result."""
        data = await self._command("execUnitTestCase", label)
        return self._validate(TestCaseResultResponse, data, "execUnitTestCase").result

    async def run_partial_unit_tests(self, root: Path, *, debug: bool) -> None:
        """Start the registered test cases, in the debugger if requested."""
        command = "debugPartialUnitTests" if debug else "runPartialUnitTests"
        await self._command(command, str(root))

    async def cancel_unit_tests(self) -> None:
        """Cancel the running test cases."""
        await self._command("cancelUnitTests")

    async def _command(self, command: str, *args: Any) -> Any:
        """Send a command to the debugger and return the decoded response."""
        url = f"/commands/{self.config.command_prefix}.{command}"
        log.debug("Sending command %s%r", command, args)
        try:
            async with self.session.post(url, json={"args": list(args)}) as response:
                if response.status != 200:
                    text = await response.text()
                    raise EngineCommandError(
                        f"Command {command} failed: {response.status} {text}"
                    )
                data = await response.json()
        except aiohttp.ClientError as exc:
            raise EngineCommandError(f"Command {command} failed: {exc}") from exc

        self._validate(CommandResponse, data, command)
        return data

    @staticmethod
    def _validate[ModelT: BaseModel](
        model: type[ModelT], data: Any, context: str
    ) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise EngineCommandError(f"Invalid {context} response: {exc}") from exc
