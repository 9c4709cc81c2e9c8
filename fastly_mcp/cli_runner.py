"""Fastly CLI executor."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog

from fastly_mcp.config import Settings
from fastly_mcp.errors import CliError
from fastly_mcp.schemas import CliResult

logger = structlog.get_logger()

MAX_ERROR_OUTPUT = 3000  # chars of stderr carried into a CliError


@dataclass
class ProcessOutput:
    """Raw result of one interpreter run."""

    stdout: str
    stderr: str
    exit_code: int


ShellRunner = Callable[[str, "str | None"], Awaitable[ProcessOutput]]


async def run_shell(command: str, cwd: str | None = None) -> ProcessOutput:
    """Run ``command`` through the platform shell and wait for it to exit."""
    proc = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    stdout, stderr = await proc.communicate()
    return ProcessOutput(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=proc.returncode if proc.returncode is not None else -1,
    )


class FastlyCliRunner:
    """Runs ``fastly <command> --token <key>`` on behalf of the client.

    ``command`` is passed to the shell verbatim. The client is trusted not to
    be adversarial; it only never learns the key.
    """

    def __init__(self, settings: Settings, runner: ShellRunner | None = None):
        self._credential = settings.credential
        self.binary = settings.fastly_cli_binary
        self.token_flag = settings.fastly_cli_token_flag
        self._runner = runner or run_shell

    def build_command(self, command: str) -> str:
        return f"{self.binary} {command} {self.token_flag} {self._credential.reveal()}"

    async def execute(self, command: str, working_directory: str | None = None) -> CliResult:
        """Run one CLI command; raise ``CliError`` unless it exits with status 0."""
        logger.info("fastly_cli_command", command=command, cwd=working_directory)

        try:
            output = await self._runner(self.build_command(command), working_directory)
        except OSError as e:
            message = self._credential.redact(str(e))
            logger.error("fastly_cli_start_failed", command=command, error=message)
            raise CliError(message) from e

        if output.exit_code != 0:
            stderr = self._credential.redact(output.stderr.strip())[:MAX_ERROR_OUTPUT]
            message = f"Command `{self.binary} {command}` exited with status {output.exit_code}"
            if stderr:
                message += f": {stderr}"
            logger.error("fastly_cli_failed", command=command, exit_code=output.exit_code, stderr=stderr)
            raise CliError(message, exit_code=output.exit_code)

        logger.info("fastly_cli_completed", command=command)
        return CliResult(
            stdout=self._credential.redact(output.stdout.strip()),
            stderr=self._credential.redact(output.stderr.strip()),
            success=True,
        )
