"""
Parquet exploration tools.

Explores Parquet files in ADLS Gen2 through dbt macros that query the
``StageFileSystem`` external data source via OPENROWSET:

- list_parquet_files: list the files in a folder
- get_parquet_schema: describe one file as a sources.yml table definition
- get_parquet_data: preview the first rows of one file

Every tool validates its input before anything is executed and delegates
valid calls to an OperationRunner. Results stay structured
(OperationResult) until ``format_result`` turns them into the single text
value an LLM tool call returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from agents.datavault_agent.models import (
    FailureKind,
    GetParquetDataInput,
    GetParquetSchemaInput,
    ListParquetFilesInput,
    OperationRequest,
    OperationResult,
)
from agents.datavault_agent.runner import OperationRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    """A published tool: schema for the LLM plus the dbt macro behind it."""

    name: str
    description: str
    operation: str
    input_model: type[BaseModel]

    def input_schema(self) -> dict:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        schema.pop("description", None)
        return schema

    def schema(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema(),
        }


LIST_PARQUET_FILES = ToolDefinition(
    name="list_parquet_files",
    description=(
        "Lists all Parquet files in an ADLS folder.\n"
        'Uses the external data source "StageFileSystem" via OPENROWSET.\n\n'
        "Example folders:\n"
        '- "jira/sql" - Jira data\n'
        '- "werkportal/postgres" - Werkportal PostgreSQL export\n\n'
        "Returns file names that can be passed to get_parquet_schema."
    ),
    operation="list_parquet_files",
    input_model=ListParquetFilesInput,
)

GET_PARQUET_SCHEMA = ToolDefinition(
    name="get_parquet_schema",
    description=(
        "Reads the schema of a Parquet file and returns it as YAML for sources.yml.\n"
        "The output can be pasted into sources.yml as is.\n\n"
        "SQL Server data types are detected automatically:\n"
        "- VARCHAR -> NVARCHAR(4000)\n"
        "- DECIMAL/NUMERIC -> DECIMAL(38,10)\n"
        "- BIT, BIGINT, INT, DATE, DATETIME2, etc.\n\n"
        "Usage:\n"
        "1. Call list_parquet_files first to find the file names\n"
        "2. Then call get_parquet_schema for the file you need"
    ),
    operation="get_parquet_schema",
    input_model=GetParquetSchemaInput,
)

GET_PARQUET_DATA = ToolDefinition(
    name="get_parquet_data",
    description=(
        "Reads sample rows from a Parquet file.\n"
        "Shows the first N rows with all columns and values.\n\n"
        "Useful to:\n"
        "- check data quality\n"
        "- identify business keys\n"
        "- spot relationships to other tables"
    ),
    operation="get_parquet_data",
    input_model=GetParquetDataInput,
)

TOOLS: dict[str, ToolDefinition] = {
    tool.name: tool for tool in (LIST_PARQUET_FILES, GET_PARQUET_SCHEMA, GET_PARQUET_DATA)
}


def tool_schemas() -> list[dict]:
    return [tool.schema() for tool in TOOLS.values()]


def describe_validation_error(tool_name: str, exc: ValidationError) -> str:
    """Turn a pydantic ValidationError into a one-line message for the agent."""
    required: list[str] = []
    problems: list[str] = []

    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "input"
        if error["type"] in ("missing", "string_too_short") or error.get("input") is None:
            required.append(field)
        else:
            problems.append(f"{field}: {error['msg']}")

    parts = []
    if required:
        verb = "is" if len(required) == 1 else "are"
        parts.append(f"{' and '.join(required)} {verb} required")
    parts.extend(problems)
    return f"Invalid input for {tool_name}: " + "; ".join(parts)


def format_result(result: OperationResult) -> str:
    """Render an OperationResult as the text returned to the caller."""
    if result.ok:
        return result.payload
    if result.kind is FailureKind.VALIDATION:
        return f"Error: {result.detail}"
    if result.kind is FailureKind.NON_ZERO_EXIT:
        return f"dbt error (exit code {result.exit_code}):\n{result.detail}"
    if result.kind is FailureKind.TIMEOUT:
        return f"dbt timed out: {result.detail}"
    return f"Error running dbt: {result.detail}"


class ParquetExplorer:
    """Validates tool calls and delegates them to an OperationRunner."""

    def __init__(self, runner: OperationRunner):
        self._runner = runner

    async def call(
        self,
        tool_name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> OperationResult:
        tool = TOOLS.get(tool_name)
        if tool is None:
            known = ", ".join(TOOLS)
            return OperationResult.failure(
                FailureKind.VALIDATION,
                f"Unknown tool '{tool_name}' (available: {known})",
            )

        try:
            params = tool.input_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            message = describe_validation_error(tool_name, exc)
            logger.info("Rejected %s call: %s", tool_name, message)
            return OperationResult.failure(FailureKind.VALIDATION, message)

        request = OperationRequest.from_input(tool.operation, params)
        return await self._runner.run(request.operation, request.args)

    async def call_text(
        self,
        tool_name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> str:
        return format_result(await self.call(tool_name, arguments))

    async def list_parquet_files(self, folder_path: str) -> str:
        return await self.call_text(
            LIST_PARQUET_FILES.name, {"folder_path": folder_path},
        )

    async def get_parquet_schema(self, folder_path: str, file_name: str) -> str:
        return await self.call_text(
            GET_PARQUET_SCHEMA.name,
            {"folder_path": folder_path, "file_name": file_name},
        )

    async def get_parquet_data(
        self,
        folder_path: str,
        file_name: str,
        limit: int | None = None,
    ) -> str:
        return await self.call_text(
            GET_PARQUET_DATA.name,
            {"folder_path": folder_path, "file_name": file_name, "limit": limit},
        )
