"""
Runtime configuration for the Data Vault Explorer Agent.

Settings are read once from the environment at startup and passed
explicitly to every component that needs them.

Environment variables:
    PROJECT_ROOT: Root of the dbt Data Vault project (default: current directory)
    DV_DEFAULT_CONCEPT: Default source system for raw vault models (default: werkportal)
    DBT_EXECUTABLE: dbt binary to invoke (default: <PROJECT_ROOT>/.venv/bin/dbt)
    DBT_OPERATION_TIMEOUT: Seconds before a dbt operation is killed
        (default: 300, "0" or "none" disables the timeout)
    DV_AGENT_MODEL_ID: Bedrock model id for the Strands agent
"""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONCEPT = "werkportal"
DEFAULT_OPERATION_TIMEOUT = 300.0
DEFAULT_MODEL_ID = "us.anthropic.claude-3-5-sonnet-20241022-v2:0"


class AgentSettings(BaseModel):
    """Process-wide configuration, constructed once and passed by reference."""

    model_config = ConfigDict(frozen=True)

    project_root: Path = Field(
        ...,
        description="Root directory of the dbt project (dbt_project.yml lives here)",
    )
    default_concept: str = Field(
        default=DEFAULT_CONCEPT,
        min_length=1,
        description="Source system used when a caller omits the concept",
    )
    dbt_executable: str | None = Field(
        default=None,
        description="Explicit dbt binary; defaults to the project virtualenv's dbt",
    )
    operation_timeout: float | None = Field(
        default=DEFAULT_OPERATION_TIMEOUT,
        description="Seconds before a dbt run-operation is killed (None = wait forever)",
    )
    model_id: str = Field(
        default=DEFAULT_MODEL_ID,
        description="Bedrock model id used by the Strands orchestration agent",
    )

    @field_validator("operation_timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and (not math.isfinite(v) or v <= 0):
            raise ValueError("operation_timeout must be a positive finite number (use None to disable)")
        return v

    @property
    def venv_bin(self) -> Path:
        """Binary directory of the project's virtualenv, prepended to PATH for dbt."""
        return self.project_root / ".venv" / "bin"

    @property
    def resolved_dbt_executable(self) -> str:
        return self.dbt_executable or str(self.venv_bin / "dbt")

    def concept_or_default(self, concept: str | None) -> str:
        return concept or self.default_concept

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AgentSettings":
        """Build settings from environment variables, with fixed fallbacks."""
        env = os.environ if environ is None else environ

        root = env.get("PROJECT_ROOT") or os.getcwd()
        return cls(
            project_root=Path(root).expanduser().resolve(),
            default_concept=env.get("DV_DEFAULT_CONCEPT") or DEFAULT_CONCEPT,
            dbt_executable=env.get("DBT_EXECUTABLE") or None,
            operation_timeout=_parse_timeout(env.get("DBT_OPERATION_TIMEOUT")),
            model_id=env.get("DV_AGENT_MODEL_ID") or DEFAULT_MODEL_ID,
        )


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return DEFAULT_OPERATION_TIMEOUT
    value = raw.strip().lower()
    if value in ("0", "none", "off"):
        return None
    try:
        seconds = float(value)
    except ValueError as exc:
        raise ValueError(
            f"DBT_OPERATION_TIMEOUT must be a number of seconds, got {raw!r}"
        ) from exc
    if not math.isfinite(seconds):
        raise ValueError(
            f"DBT_OPERATION_TIMEOUT must be a finite number of seconds, got {raw!r}"
        )
    return seconds
