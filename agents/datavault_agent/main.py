"""
CLI entry point for the Data Vault Explorer Agent.

Usage:
    # Published tool schemas (JSON)
    python -m agents.datavault_agent.main tools

    # Explore the data lake through dbt macros
    python -m agents.datavault_agent.main list-files --folder jira/sql
    python -m agents.datavault_agent.main schema --folder jira/sql \
        --file Platform.Api_Project.parquet
    python -m agents.datavault_agent.main preview --folder jira/sql \
        --file Platform.Api_Project.parquet --limit 10

    # Project layout
    python -m agents.datavault_agent.main concepts
    python -m agents.datavault_agent.main path --kind hub --name customer --concept jira

    # Ask the Strands agent
    python -m agents.datavault_agent.main ask "Which business keys does jira/sql have?"

Configuration comes from the environment (PROJECT_ROOT, DV_DEFAULT_CONCEPT,
DBT_EXECUTABLE, DBT_OPERATION_TIMEOUT, DV_AGENT_MODEL_ID).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.files import list_concepts
from agents.datavault_agent.models import OperationResult
from agents.datavault_agent.paths import EntityKind, resolve_path
from agents.datavault_agent.runner import DbtOperationRunner
from agents.datavault_agent.tools import ParquetExplorer, format_result, tool_schemas

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Data Vault Explorer Agent: explore ADLS Parquet files via dbt "
        "and locate Data Vault artifacts in the dbt project",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Enable verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tools", help="Print the published tool schemas as JSON")

    list_files = sub.add_parser("list-files", help="List Parquet files in an ADLS folder")
    list_files.add_argument("--folder", required=True, help='ADLS folder (e.g., "jira/sql")')

    schema = sub.add_parser("schema", help="Print a Parquet file's schema as sources.yml YAML")
    schema.add_argument("--folder", required=True, help='ADLS folder (e.g., "jira/sql")')
    schema.add_argument("--file", required=True, help="Parquet file name")

    preview = sub.add_parser("preview", help="Print sample rows of a Parquet file")
    preview.add_argument("--folder", required=True, help='ADLS folder (e.g., "jira/sql")')
    preview.add_argument("--file", required=True, help="Parquet file name")
    preview.add_argument("--limit", type=int, default=None, help="Number of rows (max 100)")

    sub.add_parser("concepts", help="List concepts under models/raw_vault")

    path = sub.add_parser("path", help="Print the canonical path of an artifact")
    path.add_argument(
        "--kind",
        required=True,
        choices=[kind.value for kind in EntityKind],
        help="Artifact kind",
    )
    path.add_argument("--name", required=True, help="Entity, link or view name")
    path.add_argument("--concept", default=None, help="Concept (defaults to DV_DEFAULT_CONCEPT)")
    path.add_argument("--subdir", default=None, help="Mart subdirectory")

    ask = sub.add_parser("ask", help="Send a prompt to the Strands explorer agent")
    ask.add_argument("prompt", help="Question or instruction for the agent")

    return parser.parse_args(argv)


async def _run_tool(settings: AgentSettings, args: argparse.Namespace) -> OperationResult:
    explorer = ParquetExplorer(DbtOperationRunner(settings))

    if args.command == "list-files":
        return await explorer.call("list_parquet_files", {"folder_path": args.folder})
    if args.command == "schema":
        return await explorer.call(
            "get_parquet_schema", {"folder_path": args.folder, "file_name": args.file},
        )
    return await explorer.call(
        "get_parquet_data",
        {"folder_path": args.folder, "file_name": args.file, "limit": args.limit},
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = AgentSettings.from_env()
    logger.debug("Project root: %s, default concept: %s", settings.project_root, settings.default_concept)

    if args.command == "tools":
        json.dump(tool_schemas(), sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
        return 0

    if args.command == "concepts":
        for concept in list_concepts(settings):
            print(concept)
        return 0

    if args.command == "path":
        concept = settings.concept_or_default(args.concept)
        print(resolve_path(args.kind, args.name, concept, args.subdir).as_posix())
        return 0

    if args.command == "ask":
        from agents.datavault_agent.agent import ask

        print(ask(settings, args.prompt))
        return 0

    result = asyncio.run(_run_tool(settings, args))
    print(format_result(result))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
