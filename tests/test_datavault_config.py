"""
Tests for AgentSettings.

Tests cover:
- Fallbacks when environment variables are unset
- Environment overrides (project root, concept, executable, timeout, model)
- Timeout parsing and validation
- Derived values (venv bin, dbt executable, concept default)
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from agents.datavault_agent.config import (
    DEFAULT_CONCEPT,
    DEFAULT_MODEL_ID,
    DEFAULT_OPERATION_TIMEOUT,
    AgentSettings,
)


class TestFromEnv:

    def test_fallbacks(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = AgentSettings.from_env({})
        assert settings.project_root == tmp_path.resolve()
        assert settings.default_concept == DEFAULT_CONCEPT
        assert settings.dbt_executable is None
        assert settings.operation_timeout == DEFAULT_OPERATION_TIMEOUT
        assert settings.model_id == DEFAULT_MODEL_ID

    def test_overrides(self, tmp_path):
        settings = AgentSettings.from_env({
            "PROJECT_ROOT": str(tmp_path),
            "DV_DEFAULT_CONCEPT": "jira",
            "DBT_EXECUTABLE": "/opt/dbt/bin/dbt",
            "DBT_OPERATION_TIMEOUT": "45",
            "DV_AGENT_MODEL_ID": "some-model",
        })
        assert settings.project_root == tmp_path.resolve()
        assert settings.default_concept == "jira"
        assert settings.resolved_dbt_executable == "/opt/dbt/bin/dbt"
        assert settings.operation_timeout == 45.0
        assert settings.model_id == "some-model"

    def test_empty_values_use_fallbacks(self, tmp_path):
        settings = AgentSettings.from_env({
            "PROJECT_ROOT": str(tmp_path),
            "DV_DEFAULT_CONCEPT": "",
            "DBT_OPERATION_TIMEOUT": " ",
        })
        assert settings.default_concept == DEFAULT_CONCEPT
        assert settings.operation_timeout == DEFAULT_OPERATION_TIMEOUT

    @pytest.mark.parametrize("raw", ["0", "none", "OFF"])
    def test_timeout_can_be_disabled(self, tmp_path, raw):
        settings = AgentSettings.from_env({"PROJECT_ROOT": str(tmp_path), "DBT_OPERATION_TIMEOUT": raw})
        assert settings.operation_timeout is None

    def test_invalid_timeout(self, tmp_path):
        with pytest.raises(ValueError, match="DBT_OPERATION_TIMEOUT"):
            AgentSettings.from_env({"PROJECT_ROOT": str(tmp_path), "DBT_OPERATION_TIMEOUT": "soon"})

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "Infinity"])
    def test_non_finite_timeout(self, tmp_path, raw):
        with pytest.raises(ValueError, match="finite"):
            AgentSettings.from_env({"PROJECT_ROOT": str(tmp_path), "DBT_OPERATION_TIMEOUT": raw})

    def test_fractional_timeout(self, tmp_path):
        settings = AgentSettings.from_env({"PROJECT_ROOT": str(tmp_path), "DBT_OPERATION_TIMEOUT": "0.5"})
        assert settings.operation_timeout == 0.5

    def test_reads_process_environment_by_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PROJECT_ROOT", str(tmp_path))
        monkeypatch.setenv("DV_DEFAULT_CONCEPT", "adventureworks")
        assert AgentSettings.from_env().default_concept == "adventureworks"


class TestAgentSettings:

    def test_venv_defaults(self, tmp_path):
        settings = AgentSettings(project_root=tmp_path)
        assert settings.venv_bin == tmp_path / ".venv" / "bin"
        assert settings.resolved_dbt_executable == str(tmp_path / ".venv" / "bin" / "dbt")

    def test_concept_or_default(self, tmp_path):
        settings = AgentSettings(project_root=tmp_path, default_concept="werkportal")
        assert settings.concept_or_default(None) == "werkportal"
        assert settings.concept_or_default("jira") == "jira"

    def test_negative_timeout_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            AgentSettings(project_root=tmp_path, operation_timeout=-1)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_timeout_rejected(self, tmp_path, value):
        with pytest.raises(ValidationError, match="finite"):
            AgentSettings(project_root=tmp_path, operation_timeout=value)

    def test_frozen(self, tmp_path):
        settings = AgentSettings(project_root=Path(tmp_path))
        with pytest.raises(ValidationError):
            settings.default_concept = "other"
