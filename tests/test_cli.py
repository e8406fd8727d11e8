"""
Tests for the bcoder-tools CLI.
"""

import json
import tempfile
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from bcoder_tools.cli.main import cli


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def workspace(temp_dir):
    """Create the sandbox root."""
    ws = temp_dir / "ws"
    ws.mkdir()
    (ws / "hello.txt").write_text("hello")
    return ws


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


def leading_json(output: str):
    """Parse the JSON document at the start of the output."""
    data, _ = json.JSONDecoder().raw_decode(output.lstrip())
    return data


class TestToolsCommand:
    """Test `bcoder-tools tools`."""

    def test_tools_json(self, runner, workspace):
        """Test listing function schemas."""
        result = runner.invoke(cli, ["tools", "--json", "--root", str(workspace)])
        assert result.exit_code == 0
        schemas = leading_json(result.output)
        assert len(schemas) == 10
        assert schemas[0]["name"] == "read_file"
        assert schemas[0]["parameters"]["required"] == ["path"]

    def test_tools_table(self, runner, workspace):
        """Test the human-readable table."""
        result = runner.invoke(cli, ["tools", "--root", str(workspace)])
        assert result.exit_code == 0
        assert "search_in_files" in result.output


class TestRunCommand:
    """Test `bcoder-tools run`."""

    def test_run_success(self, runner, workspace):
        """Test a successful call."""
        result = runner.invoke(
            cli,
            ["run", "read_file", "--args", '{"path": "hello.txt"}', "--root", str(workspace)],
        )
        assert result.exit_code == 0
        data = leading_json(result.output)
        assert data["success"] is True
        assert data["data"]["content"] == "hello"

    def test_run_failure_exit_code(self, runner, workspace):
        """Test that a failed call exits with status 1."""
        result = runner.invoke(
            cli,
            ["run", "read_file", "--args", '{"path": "/etc/passwd"}', "--root", str(workspace)],
        )
        assert result.exit_code == 1
        data = leading_json(result.output)
        assert data["success"] is False
        assert data["error_type"] == "PermissionDenied"

    def test_run_invalid_json(self, runner, workspace):
        """Test that malformed --args is a usage error."""
        result = runner.invoke(
            cli, ["run", "read_file", "--args", "{nope", "--root", str(workspace)]
        )
        assert result.exit_code == 2

    def test_run_with_config(self, runner, temp_dir, workspace):
        """Test loading settings from a file."""
        config_file = temp_dir / "tools.yaml"
        config_file.write_text(yaml.dump({"workspace_root": str(workspace)}))

        result = runner.invoke(
            cli,
            ["run", "list_files", "--args", '{"path": "."}', "--config", str(config_file)],
        )
        assert result.exit_code == 0
        data = leading_json(result.output)
        assert data["data"]["count"] == 1

    def test_run_missing_root(self, runner, temp_dir):
        """Test that a missing workspace root is reported."""
        result = runner.invoke(
            cli, ["run", "list_files", "--args", '{"path": "."}', "--root", str(temp_dir / "x")]
        )
        assert result.exit_code == 1


class TestBatchCommand:
    """Test `bcoder-tools batch`."""

    def test_batch_success(self, runner, temp_dir, workspace):
        """Test a batch where every call succeeds."""
        batch_file = temp_dir / "calls.yaml"
        batch_file.write_text(
            yaml.dump(
                [
                    {"name": "write_file", "arguments": {"path": "out.txt", "content": "x"}},
                    {"name": "read_file", "arguments": {"path": "out.txt"}},
                ]
            )
        )

        result = runner.invoke(cli, ["batch", str(batch_file), "--root", str(workspace)])
        assert result.exit_code == 0
        results = leading_json(result.output)
        assert [r["success"] for r in results] == [True, True]
        assert results[1]["data"]["content"] == "x"

    def test_batch_partial_failure(self, runner, temp_dir, workspace):
        """Test that one failure does not stop the batch but sets the exit code."""
        batch_file = temp_dir / "calls.json"
        batch_file.write_text(
            json.dumps(
                [
                    {"name": "read_file", "arguments": {"path": "hello.txt"}},
                    {"name": "no_such_tool", "arguments": {}},
                    {"name": "get_file_info", "arguments": {"path": "hello.txt"}},
                ]
            )
        )

        result = runner.invoke(cli, ["batch", str(batch_file), "--root", str(workspace)])
        assert result.exit_code == 1
        results = leading_json(result.output)
        assert [r["success"] for r in results] == [True, False, True]

    def test_batch_not_a_list(self, runner, temp_dir, workspace):
        """Test that the batch file must hold a list."""
        batch_file = temp_dir / "calls.yaml"
        batch_file.write_text("name: read_file\n")

        result = runner.invoke(cli, ["batch", str(batch_file), "--root", str(workspace)])
        assert result.exit_code == 1
