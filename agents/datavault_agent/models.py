"""
Data models for the Data Vault Explorer Agent.

Defines the delegated operation request, the tagged result returned by the
subprocess runner and tool facade, and the input contracts published for
each Parquet exploration tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator

DEFAULT_PREVIEW_LIMIT = 5
MAX_PREVIEW_LIMIT = 100

Scalar = Union[str, int, float, bool, None]


class FailureKind(str, Enum):
    """Why an operation produced no payload."""

    VALIDATION = "validation"
    NON_ZERO_EXIT = "non_zero_exit"
    SPAWN_ERROR = "spawn_error"
    TIMEOUT = "timeout"


class OperationRequest(BaseModel):
    """
    A named dbt macro plus the JSON argument bag passed via --args.

    Only built from a validated tool input (``from_input``), so the bag
    always carries the tool's required keys and defaults.
    """

    operation: str = Field(
        ...,
        min_length=1,
        description="dbt macro name (e.g., list_parquet_files)",
    )
    args: dict[str, Scalar] = Field(
        default_factory=dict,
        description="Arguments serialized to JSON for `dbt run-operation --args`",
    )

    @classmethod
    def from_input(cls, operation: str, params: BaseModel) -> "OperationRequest":
        return cls(operation=operation, args=params.model_dump())


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a delegated operation: a payload or a classified failure."""

    payload: str = ""
    kind: FailureKind | None = None
    detail: str = ""
    exit_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @classmethod
    def success(cls, payload: str) -> "OperationResult":
        return cls(payload=payload)

    @classmethod
    def failure(
        cls,
        kind: FailureKind,
        detail: str,
        exit_code: int | None = None,
    ) -> "OperationResult":
        return cls(kind=kind, detail=detail, exit_code=exit_code)


# ---------------------------------------------------------------------------
# Tool inputs
# ---------------------------------------------------------------------------


class ListParquetFilesInput(BaseModel):
    """Input for list_parquet_files."""

    folder_path: str = Field(
        ...,
        min_length=1,
        description='Folder path in ADLS (e.g., "jira/sql")',
    )


class GetParquetSchemaInput(BaseModel):
    """Input for get_parquet_schema."""

    folder_path: str = Field(
        ...,
        min_length=1,
        description='Folder path in ADLS (e.g., "jira/sql")',
    )
    file_name: str = Field(
        ...,
        min_length=1,
        description='Parquet file name (e.g., "Platform.Api_Project.parquet")',
    )


class GetParquetDataInput(GetParquetSchemaInput):
    """Input for get_parquet_data."""

    limit: int = Field(
        default=DEFAULT_PREVIEW_LIMIT,
        description=(
            f"Number of rows (default: {DEFAULT_PREVIEW_LIMIT}, "
            f"max: {MAX_PREVIEW_LIMIT})"
        ),
    )

    @field_validator("limit", mode="before")
    @classmethod
    def default_missing_limit(cls, v: Any) -> Any:
        return DEFAULT_PREVIEW_LIMIT if v is None else v

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return max(1, min(v, MAX_PREVIEW_LIMIT))
