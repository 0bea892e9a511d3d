"""
Strands-based Data Vault Explorer Agent.

Wraps the Parquet exploration tools as Strands tools so a BedrockModel
can browse the data lake before proposing staging views, hubs,
satellites and links for the dbt project.
"""

from __future__ import annotations

import logging

from strands import Agent, tool
from strands.models import BedrockModel

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.files import list_concepts
from agents.datavault_agent.runner import DbtOperationRunner
from agents.datavault_agent.tools import (
    GET_PARQUET_DATA,
    GET_PARQUET_SCHEMA,
    LIST_PARQUET_FILES,
    ParquetExplorer,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a Data Vault modeling assistant for a dbt project on SQL Server. \
Source data lives as Parquet files in ADLS Gen2 and is exposed to dbt as \
external tables.

Workflow:
1. Call list_parquet_files to find the files in a source folder.
2. Call get_parquet_schema to obtain the sources.yml table definition.
3. Call get_parquet_data to inspect sample rows and identify business keys.

Rules:
- Only reference files, columns and types returned by the tools.
- If a tool returns an error, report it verbatim and do not guess the data.
- Known concepts (source systems): {concepts}. Default concept: {default_concept}.
"""


def build_tools(explorer: ParquetExplorer) -> list:
    """Strands tools bound to ``explorer``, publishing the explorer's own schemas."""

    @tool(
        name=LIST_PARQUET_FILES.name,
        description=LIST_PARQUET_FILES.description,
        inputSchema=LIST_PARQUET_FILES.input_schema(),
    )
    async def list_parquet_files(folder_path: str = "") -> str:
        return await explorer.list_parquet_files(folder_path)

    @tool(
        name=GET_PARQUET_SCHEMA.name,
        description=GET_PARQUET_SCHEMA.description,
        inputSchema=GET_PARQUET_SCHEMA.input_schema(),
    )
    async def get_parquet_schema(folder_path: str = "", file_name: str = "") -> str:
        return await explorer.get_parquet_schema(folder_path, file_name)

    @tool(
        name=GET_PARQUET_DATA.name,
        description=GET_PARQUET_DATA.description,
        inputSchema=GET_PARQUET_DATA.input_schema(),
    )
    async def get_parquet_data(
        folder_path: str = "",
        file_name: str = "",
        limit: int | None = None,
    ) -> str:
        return await explorer.get_parquet_data(folder_path, file_name, limit)

    return [list_parquet_files, get_parquet_schema, get_parquet_data]


def create_explorer_agent(
    settings: AgentSettings,
    explorer: ParquetExplorer | None = None,
) -> Agent:
    """Create the Strands agent with the Parquet tools attached."""
    if explorer is None:
        explorer = ParquetExplorer(DbtOperationRunner(settings))

    bedrock_model = BedrockModel(
        model_id=settings.model_id,
        streaming=True,
    )

    system_prompt = SYSTEM_PROMPT.format(
        concepts=", ".join(list_concepts(settings)),
        default_concept=settings.default_concept,
    )

    return Agent(
        model=bedrock_model,
        tools=build_tools(explorer),
        system_prompt=system_prompt,
    )


def ask(settings: AgentSettings, prompt: str) -> str:
    """Run a single prompt through the explorer agent and return its answer."""
    agent = create_explorer_agent(settings)
    logger.info("Sending prompt to %s", settings.model_id)
    result = agent(prompt)
    return str(result)
