"""
Disk operations for the dbt project, layered on top of the path resolver.

All paths accepted here are either absolute or relative to
``settings.project_root``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.paths import RAW_VAULT_DIR, EntityKind, resolve_path

logger = logging.getLogger(__name__)


def absolute_path(settings: AgentSettings, path: PurePath | str) -> Path:
    """Anchor a project-relative path at the project root."""
    return settings.project_root / Path(path)


def relative_path(settings: AgentSettings, path: PurePath | str) -> str:
    """Path relative to the project root, with forward slashes."""
    return Path(os.path.relpath(Path(path), settings.project_root)).as_posix()


def list_concepts(settings: AgentSettings) -> list[str]:
    """
    List available concepts (source systems) under models/raw_vault.

    Falls back to the configured default concept if the raw vault
    directory does not exist yet.
    """
    raw_vault = absolute_path(settings, RAW_VAULT_DIR)
    if not raw_vault.is_dir():
        logger.debug("No raw vault directory at %s, using default concept", raw_vault)
        return [settings.default_concept]
    return sorted(entry.name for entry in raw_vault.iterdir() if entry.is_dir())


def ensure_dir(dir_path: Path) -> None:
    dir_path.mkdir(parents=True, exist_ok=True)


def read_file(file_path: Path) -> str:
    return file_path.read_text(encoding="utf-8")


def write_file(file_path: Path, content: str) -> None:
    """Write content to a file, creating parent directories if needed."""
    ensure_dir(file_path.parent)
    file_path.write_text(content, encoding="utf-8")


def file_exists(file_path: Path) -> bool:
    return file_path.exists()


def list_files(dir_path: Path) -> list[str]:
    """Names of the regular files in a directory ([] if it does not exist)."""
    if not dir_path.is_dir():
        return []
    return sorted(entry.name for entry in dir_path.iterdir() if entry.is_file())


def write_artifact(
    settings: AgentSettings,
    kind: EntityKind | str,
    name: str,
    content: str,
    concept: str | None = None,
    subdir: str | None = None,
    overwrite: bool = False,
) -> str:
    """
    Write a generated model to its canonical location.

    Returns the project-relative path of the written file. Raises
    FileExistsError if the file already exists and ``overwrite`` is False.
    """
    rel = resolve_path(kind, name, settings.concept_or_default(concept), subdir)
    target = absolute_path(settings, rel)

    if target.exists() and not overwrite:
        raise FileExistsError(f"{rel} already exists (pass overwrite=True to replace it)")

    write_file(target, content)
    logger.info("Wrote %s (%d bytes)", rel, len(content.encode("utf-8")))
    return rel.as_posix()
