"""
Data Vault Explorer Agent.

Explores Parquet files in the data lake through dbt macros and places
generated Data Vault artifacts at their canonical locations in the dbt
project.
"""

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.models import FailureKind, OperationRequest, OperationResult
from agents.datavault_agent.paths import EntityKind, resolve_path
from agents.datavault_agent.runner import DbtOperationRunner
from agents.datavault_agent.tools import ParquetExplorer, format_result, tool_schemas

__all__ = [
    "AgentSettings",
    "DbtOperationRunner",
    "EntityKind",
    "FailureKind",
    "OperationRequest",
    "OperationResult",
    "ParquetExplorer",
    "format_result",
    "resolve_path",
    "tool_schemas",
    "create_explorer_agent",
]


def create_explorer_agent(*args, **kwargs):
    """Lazy import to avoid requiring strands at module load."""
    from agents.datavault_agent.agent import create_explorer_agent as _create

    return _create(*args, **kwargs)
