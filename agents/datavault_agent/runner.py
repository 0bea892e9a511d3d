"""
dbt operation runner.

Executes dbt macros via ``dbt run-operation <macro> --args <json>`` inside
the project's virtualenv and classifies the outcome as an OperationResult.

Each call spawns exactly one child process. There are no retries; a
configurable timeout kills operations that never finish.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Mapping, Protocol

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.models import FailureKind, OperationResult
from agents.datavault_agent.output import extract_payload

logger = logging.getLogger(__name__)


class OperationRunner(Protocol):
    """Executes a named delegated operation with a JSON argument bag."""

    async def run(self, operation: str, args: Mapping[str, Any]) -> OperationResult:
        ...


class DbtOperationRunner:
    """Runs dbt macros as subprocesses of the configured dbt project."""

    def __init__(self, settings: AgentSettings):
        self._settings = settings

    def build_command(self, operation: str, args: Mapping[str, Any]) -> list[str]:
        return [
            self._settings.resolved_dbt_executable,
            "run-operation",
            operation,
            "--args",
            json.dumps(dict(args)),
        ]

    def build_env(self) -> dict[str, str]:
        """Current environment with the project virtualenv first on PATH."""
        env = dict(os.environ)
        venv_bin = str(self._settings.venv_bin)
        current = env.get("PATH", "")
        env["PATH"] = f"{venv_bin}{os.pathsep}{current}" if current else venv_bin
        return env

    async def run(self, operation: str, args: Mapping[str, Any]) -> OperationResult:
        cmd = self.build_command(operation, args)
        timeout = self._settings.operation_timeout
        logger.info("Running dbt operation '%s' with args %s", operation, cmd[-1])

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self._settings.project_root),
                env=self.build_env(),
            )
        except OSError as exc:
            logger.error("Could not start dbt (%s): %s", cmd[0], exc)
            return OperationResult.failure(FailureKind.SPAWN_ERROR, str(exc))

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=timeout,
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning(
                "dbt operation '%s' killed after %gs without finishing",
                operation, timeout,
            )
            return OperationResult.failure(
                FailureKind.TIMEOUT,
                f"dbt run-operation {operation} did not finish within {timeout:g}s",
            )

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            logger.warning(
                "dbt operation '%s' failed with exit code %d", operation, proc.returncode,
            )
            return OperationResult.failure(
                FailureKind.NON_ZERO_EXIT,
                stderr or stdout,
                exit_code=proc.returncode,
            )

        logger.info("dbt operation '%s' completed", operation)
        return OperationResult.success(extract_payload(stdout))
