"""
Tests for the dbt operation runner.

Runs fake ``dbt`` shell scripts as real subprocesses to cover:
- Command shape (run-operation <macro> --args <json>) and environment
- Success path through output extraction (stdout only)
- Non-zero exit (stderr detail, stdout fallback)
- Spawn errors (missing executable)
- Timeout (child killed)
"""

import json
import os
import stat
import sys

import pytest

from agents.datavault_agent.config import AgentSettings
from agents.datavault_agent.models import FailureKind
from agents.datavault_agent.runner import DbtOperationRunner

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts")


def _fake_dbt(tmp_path, body: str) -> str:
    """Write an executable shell script standing in for dbt."""
    script = tmp_path / "fake_dbt.sh"
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


def _runner(tmp_path, body: str, timeout: float | None = 30.0) -> DbtOperationRunner:
    settings = AgentSettings(
        project_root=tmp_path,
        dbt_executable=_fake_dbt(tmp_path, body),
        operation_timeout=timeout,
    )
    return DbtOperationRunner(settings)


# =============================================================================
# Command and environment
# =============================================================================

class TestBuildCommand:

    def test_command_shape(self, tmp_path):
        runner = DbtOperationRunner(AgentSettings(project_root=tmp_path))
        cmd = runner.build_command("list_parquet_files", {"folder_path": "jira/sql"})
        assert cmd == [
            str(tmp_path / ".venv" / "bin" / "dbt"),
            "run-operation",
            "list_parquet_files",
            "--args",
            '{"folder_path": "jira/sql"}',
        ]

    def test_explicit_executable(self, tmp_path):
        runner = DbtOperationRunner(AgentSettings(project_root=tmp_path, dbt_executable="dbt"))
        assert runner.build_command("m", {})[0] == "dbt"

    def test_args_are_single_json_argument(self, tmp_path):
        runner = DbtOperationRunner(AgentSettings(project_root=tmp_path))
        args = {"folder_path": "a b", "file_name": "x.parquet", "limit": 5}
        cmd = runner.build_command("get_parquet_data", args)
        assert json.loads(cmd[-1]) == args

    def test_env_prepends_venv_bin(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        monkeypatch.setenv("SOME_SETTING", "kept")
        env = DbtOperationRunner(AgentSettings(project_root=tmp_path)).build_env()
        assert env["PATH"] == f"{tmp_path / '.venv' / 'bin'}{os.pathsep}/usr/bin"
        assert env["SOME_SETTING"] == "kept"


# =============================================================================
# Execution
# =============================================================================

class TestRun:

    @pytest.mark.asyncio
    async def test_success_extracts_payload(self, tmp_path):
        runner = _runner(
            tmp_path,
            "echo '12:00:00  Running with dbt=1.7.4'\n"
            "echo '12:00:00  Registered adapter: sqlserver=1.7.2'\n"
            "echo '12:00:01  File1.parquet, File2.parquet'\n",
        )
        result = await runner.run("list_parquet_files", {"folder_path": "jira/sql"})
        assert result.ok
        assert result.payload == "File1.parquet, File2.parquet"

    @pytest.mark.asyncio
    async def test_passes_command_line_and_cwd(self, tmp_path):
        runner = _runner(
            tmp_path,
            'echo "12:00:00  $1|$2|$3|$4"\n'
            'echo "12:00:00  cwd=$(pwd -P)"\n',
        )
        result = await runner.run("list_parquet_files", {"folder_path": "jira/sql"})
        lines = result.payload.splitlines()
        assert lines[0] == 'run-operation|list_parquet_files|--args|{"folder_path": "jira/sql"}'
        assert lines[1] == f"cwd={tmp_path.resolve()}"

    @pytest.mark.asyncio
    async def test_stderr_is_not_payload(self, tmp_path):
        runner = _runner(
            tmp_path,
            "echo '12:00:00  from stderr' >&2\n"
            "echo '12:00:01  from stdout'\n",
        )
        result = await runner.run("m", {})
        assert result.payload == "from stdout"

    @pytest.mark.asyncio
    async def test_non_zero_exit_uses_stderr(self, tmp_path):
        runner = _runner(
            tmp_path,
            "echo '12:00:00  Running with dbt=1.7.4'\n"
            "echo 'Error: connection refused' >&2\n"
            "exit 1\n",
        )
        result = await runner.run("list_parquet_files", {"folder_path": "jira/sql"})
        assert not result.ok
        assert result.kind is FailureKind.NON_ZERO_EXIT
        assert result.exit_code == 1
        assert result.detail.strip() == "Error: connection refused"

    @pytest.mark.asyncio
    async def test_non_zero_exit_falls_back_to_stdout(self, tmp_path):
        runner = _runner(tmp_path, "echo 'Compilation Error in macro'\nexit 2\n")
        result = await runner.run("m", {})
        assert result.kind is FailureKind.NON_ZERO_EXIT
        assert result.exit_code == 2
        assert "Compilation Error in macro" in result.detail

    @pytest.mark.asyncio
    async def test_missing_executable_is_spawn_error(self, tmp_path):
        settings = AgentSettings(
            project_root=tmp_path,
            dbt_executable=str(tmp_path / "does-not-exist" / "dbt"),
        )
        result = await DbtOperationRunner(settings).run("m", {})
        assert result.kind is FailureKind.SPAWN_ERROR
        assert result.detail

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, tmp_path):
        runner = _runner(tmp_path, "exec sleep 30\n", timeout=0.5)
        result = await runner.run("get_parquet_data", {})
        assert result.kind is FailureKind.TIMEOUT
        assert "get_parquet_data" in result.detail
        assert "within 0.5s" in result.detail

    @pytest.mark.asyncio
    async def test_calls_are_independent(self, tmp_path):
        runner = _runner(
            tmp_path,
            'if [ "$2" = "bad" ]; then echo boom >&2; exit 3; fi\n'
            'echo "12:00:00  ok $2"\n',
        )
        failed = await runner.run("bad", {})
        succeeded = await runner.run("good", {})
        assert failed.exit_code == 3
        assert succeeded.ok
        assert succeeded.payload == "ok good"
