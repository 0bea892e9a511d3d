"""
Convention-based file locations for the Data Vault dbt project.

Every generated artifact has exactly one canonical location, derived from
its kind, its entity name and (for raw vault kinds) its concept. Paths are
relative to the project root and computed without touching the disk.

Layout:
    models/staging/stg_<name>.sql
    models/raw_vault/<concept>/hubs/hub_<name>.sql
    models/raw_vault/<concept>/satellites/sat_<name>.sql
    models/raw_vault/<concept>/satellites/eff_sat_<name>.sql
    models/raw_vault/<concept>/links/link_<name>.sql
    models/business_vault/pit_<name>.sql
    models/mart/[<subdir>/]<name>.sql
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

MODEL_EXTENSION = ".sql"

MODELS_DIR = PurePosixPath("models")
STAGING_DIR = MODELS_DIR / "staging"
RAW_VAULT_DIR = MODELS_DIR / "raw_vault"
BUSINESS_VAULT_DIR = MODELS_DIR / "business_vault"
MART_DIR = MODELS_DIR / "mart"
SEEDS_DIR = PurePosixPath("seeds")
DESIGN_DIR = PurePosixPath("design")
DOCS_DIR = PurePosixPath("docs")

SOURCES_YML = STAGING_DIR / "sources.yml"
SCHEMA_YML = MODELS_DIR / "schema.yml"


class EntityKind(str, Enum):
    STAGING = "staging"
    HUB = "hub"
    SATELLITE = "satellite"
    EFFECTIVITY_SATELLITE = "effectivity_satellite"
    LINK = "link"
    PIT = "pit"
    MART = "mart"


@dataclass(frozen=True)
class ConceptPaths:
    """Raw vault directories of a single concept (source system)."""

    root: PurePosixPath
    hubs: PurePosixPath
    satellites: PurePosixPath
    links: PurePosixPath


def concept_paths(concept: str) -> ConceptPaths:
    if not concept:
        raise ValueError("a concept is required for raw vault paths")
    root = RAW_VAULT_DIR / concept
    return ConceptPaths(
        root=root,
        hubs=root / "hubs",
        satellites=root / "satellites",
        links=root / "links",
    )


def hub_path(entity_name: str, concept: str) -> PurePosixPath:
    return concept_paths(concept).hubs / f"hub_{entity_name}{MODEL_EXTENSION}"


def satellite_path(
    entity_name: str,
    concept: str,
    effectivity: bool = False,
) -> PurePosixPath:
    prefix = "eff_sat_" if effectivity else "sat_"
    return concept_paths(concept).satellites / f"{prefix}{entity_name}{MODEL_EXTENSION}"


def link_path(link_name: str, concept: str) -> PurePosixPath:
    return concept_paths(concept).links / f"link_{link_name}{MODEL_EXTENSION}"


def staging_path(entity_name: str) -> PurePosixPath:
    return STAGING_DIR / f"stg_{entity_name}{MODEL_EXTENSION}"


def pit_path(entity_name: str) -> PurePosixPath:
    return BUSINESS_VAULT_DIR / f"pit_{entity_name}{MODEL_EXTENSION}"


def mart_path(view_name: str, subdir: str | None = None) -> PurePosixPath:
    base = MART_DIR / subdir if subdir else MART_DIR
    return base / f"{view_name}{MODEL_EXTENSION}"


def resolve_path(
    kind: EntityKind | str,
    name: str,
    concept: str,
    subdir: str | None = None,
) -> PurePosixPath:
    """
    Map (kind, name, concept) to the artifact's canonical relative path.

    ``concept`` only affects hubs, satellites and links; staging views,
    PIT tables and marts live in layer directories shared by all concepts.
    ``subdir`` only applies to marts and is ignored for every other kind.

    Callers pass ``settings.concept_or_default(concept)`` so an omitted
    concept falls back to the configured default.

    Raises ValueError for an unknown kind, or for a raw vault kind without
    a concept.
    """
    kind = EntityKind(kind)

    if kind is EntityKind.STAGING:
        return staging_path(name)
    if kind is EntityKind.HUB:
        return hub_path(name, concept)
    if kind is EntityKind.SATELLITE:
        return satellite_path(name, concept)
    if kind is EntityKind.EFFECTIVITY_SATELLITE:
        return satellite_path(name, concept, effectivity=True)
    if kind is EntityKind.LINK:
        return link_path(name, concept)
    if kind is EntityKind.PIT:
        return pit_path(name)
    return mart_path(name, subdir)
