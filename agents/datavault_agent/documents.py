"""
YAML document helpers for the dbt project catalogs.

- models/staging/sources.yml: external Parquet tables, grouped by source
- models/schema.yml: model definitions and their tests

Each update is a single read-modify-write cycle without locking; two
concurrent writers to the same file race and the later write wins.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.files import absolute_path, write_file
from agents.datavault_agent.paths import SCHEMA_YML, SOURCES_YML

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    """A catalog document does not have the expected structure."""


class _IndentedDumper(yaml.SafeDumper):
    """Indent sequences under their parent key, as dbt's own YAML files do."""

    def increase_indent(self, flow: bool = False, indentless: bool = False):
        return super().increase_indent(flow, False)


def read_yaml(file_path: Path) -> Any:
    with open(file_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def dump_yaml(data: Any) -> str:
    return yaml.dump(
        data,
        Dumper=_IndentedDumper,
        indent=2,
        width=float("inf"),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def write_yaml(file_path: Path, data: Any) -> None:
    write_file(file_path, dump_yaml(data))


def _append_table(path: Path, table: dict, source_name: str | None) -> str:
    document = read_yaml(path)
    sources = document.get("sources") if isinstance(document, dict) else None
    if not isinstance(sources, list):
        raise DocumentError(f"{path} has no 'sources' list")

    for source in sources:
        if not isinstance(source, dict) or not isinstance(source.get("tables"), list):
            continue
        if source_name is None or source.get("name") == source_name:
            source["tables"].append(table)
            write_yaml(path, document)
            return source.get("name", "")

    target = f"source '{source_name}'" if source_name else "any source with a 'tables' list"
    raise DocumentError(f"{path}: could not find {target}")


def _append_model(path: Path, model: dict) -> None:
    document = read_yaml(path)
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise DocumentError(f"{path} is not a mapping")

    if not isinstance(document.get("models"), list):
        document["models"] = []
    document["models"].append(model)
    write_yaml(path, document)


async def append_to_sources_yaml(
    settings: AgentSettings,
    table: dict,
    source_name: str | None = None,
) -> str:
    """
    Append an external table definition to sources.yml.

    The table is added to ``source_name`` if given, otherwise to the first
    source that carries a ``tables`` list. Returns the name of the source
    that received the table.
    """
    path = absolute_path(settings, SOURCES_YML)
    name = await asyncio.to_thread(_append_table, path, table, source_name)
    logger.info("Added table '%s' to source '%s' in %s", table.get("name"), name, SOURCES_YML)
    return name


async def add_model_to_schema_yaml(settings: AgentSettings, model: dict) -> None:
    """Append a model definition (with its tests) to schema.yml."""
    path = absolute_path(settings, SCHEMA_YML)
    await asyncio.to_thread(_append_model, path, model)
    logger.info("Added model '%s' to %s", model.get("name"), SCHEMA_YML)
