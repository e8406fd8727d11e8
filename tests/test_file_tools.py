"""
Tests for the file-content tools.
"""

import tempfile
from pathlib import Path

import pytest

from bcoder_tools.security import SecurityContext
from bcoder_tools.tools import ToolSystem


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
    return ws


@pytest.fixture
def system(workspace):
    """Create a ToolSystem with a small read ceiling."""
    return ToolSystem(SecurityContext.for_workspace(workspace, max_file_size=1000))


class TestReadFile:
    """Test read_file."""

    @pytest.mark.asyncio
    async def test_read_file(self, workspace, system):
        """Test reading a file."""
        (workspace / "hello.txt").write_text("hello world")

        result = await system.execute_tool("read_file", {"path": "hello.txt"})
        assert result.success is True
        assert result.data == {
            "path": str(workspace / "hello.txt"),
            "content": "hello world",
            "size": 11,
        }
        assert result.message == "Successfully read file: hello.txt"

    @pytest.mark.asyncio
    async def test_size_is_bytes(self, workspace, system):
        """Test that size counts encoded bytes."""
        (workspace / "umlaut.txt").write_text("äö", encoding="utf-8")

        result = await system.execute_tool("read_file", {"path": "umlaut.txt"})
        assert result.data["content"] == "äö"
        assert result.data["size"] == 4

    @pytest.mark.asyncio
    async def test_read_not_found(self, system):
        """Test reading a missing file."""
        result = await system.execute_tool("read_file", {"path": "missing.txt"})
        assert result.success is False
        assert result.error_type == "NotFound"

    @pytest.mark.asyncio
    async def test_read_outside_denied(self, temp_dir, system):
        """Test that reading outside the root is denied."""
        (temp_dir / "outside.txt").write_text("secret")

        result = await system.execute_tool("read_file", {"path": "../outside.txt"})
        assert result.success is False
        assert result.error_type == "PermissionDenied"
        assert "outside workspace" in result.error

    @pytest.mark.asyncio
    async def test_read_etc_denied(self, system):
        """Test that system files are denied."""
        result = await system.execute_tool("read_file", {"path": "/etc/passwd"})
        assert result.success is False
        assert result.error_type == "PermissionDenied"

    @pytest.mark.asyncio
    async def test_read_too_large(self, workspace, system):
        """Test the read size ceiling."""
        (workspace / "big.txt").write_text("x" * 2000)

        result = await system.execute_tool("read_file", {"path": "big.txt"})
        assert result.success is False
        assert result.error_type == "PermissionDenied"
        assert "File too large" in result.error

    @pytest.mark.asyncio
    async def test_read_directory(self, workspace, system):
        """Test that reading a directory fails."""
        (workspace / "sub").mkdir()

        result = await system.execute_tool("read_file", {"path": "sub"})
        assert result.success is False
        assert result.error_type == "IOError"

    @pytest.mark.asyncio
    async def test_read_binary(self, workspace, system):
        """Test that undecodable content is reported, not garbled."""
        (workspace / "blob.bin").write_bytes(b"\xff\xfe\x00\x81")

        result = await system.execute_tool("read_file", {"path": "blob.bin"})
        assert result.success is False
        assert result.error_type == "IOError"

    @pytest.mark.asyncio
    async def test_read_wrong_type(self, system):
        """Test a non-string path."""
        result = await system.execute_tool("read_file", {"path": 42})
        assert result.success is False
        assert result.error_type == "ValidationError"


class TestWriteFile:
    """Test write_file."""

    @pytest.mark.asyncio
    async def test_write_then_read(self, workspace, system):
        """Test that written content reads back unchanged."""
        content = "line 1\nline 2\n"
        result = await system.execute_tool(
            "write_file", {"path": "notes.txt", "content": content}
        )
        assert result.success is True
        assert result.data == {"path": str(workspace / "notes.txt"), "size": len(content)}

        result = await system.execute_tool("read_file", {"path": "notes.txt"})
        assert result.data["content"] == content

    @pytest.mark.asyncio
    async def test_write_creates_parents(self, workspace, system):
        """Test that missing parent directories are created."""
        result = await system.execute_tool(
            "write_file", {"path": "a/b/c.txt", "content": "deep"}
        )
        assert result.success is True
        assert (workspace / "a" / "b" / "c.txt").read_text() == "deep"

    @pytest.mark.asyncio
    async def test_write_overwrites(self, workspace, system):
        """Test that an existing file is replaced."""
        (workspace / "f.txt").write_text("old content")

        result = await system.execute_tool("write_file", {"path": "f.txt", "content": "new"})
        assert result.success is True
        assert (workspace / "f.txt").read_text() == "new"

    @pytest.mark.asyncio
    async def test_write_empty_content(self, workspace, system):
        """Test writing an empty file."""
        result = await system.execute_tool("write_file", {"path": "empty.txt", "content": ""})
        assert result.success is True
        assert result.data["size"] == 0
        assert (workspace / "empty.txt").read_text() == ""

    @pytest.mark.asyncio
    async def test_write_denied_list(self, workspace, system):
        """Test that deny-listed locations cannot be written."""
        result = await system.execute_tool(
            "write_file", {"path": ".git/hooks/pre-commit", "content": "x"}
        )
        assert result.success is False
        assert result.error_type == "PermissionDenied"
        assert not (workspace / ".git").exists()

    @pytest.mark.asyncio
    async def test_write_missing_content(self, system):
        """Test that content is required."""
        result = await system.execute_tool("write_file", {"path": "x.txt"})
        assert result.success is False
        assert result.error == "Missing required parameter: content"


class TestEditFile:
    """Test edit_file."""

    @pytest.mark.asyncio
    async def test_replaces_first_occurrence(self, workspace, system):
        """Test that only the first occurrence is replaced."""
        (workspace / "f.txt").write_text("a-a")

        result = await system.execute_tool(
            "edit_file", {"path": "f.txt", "old_text": "a", "new_text": "b"}
        )
        assert result.success is True
        assert result.data["replacements"] == 1
        assert result.data["original_size"] == 3
        assert result.data["new_size"] == 3
        assert (workspace / "f.txt").read_text() == "b-a"

    @pytest.mark.asyncio
    async def test_literal_match(self, workspace, system):
        """Test that the search text is not a regex."""
        (workspace / "f.py").write_text("x = a.b(1)\n")

        result = await system.execute_tool(
            "edit_file", {"path": "f.py", "old_text": "a.b(1)", "new_text": "c()"}
        )
        assert result.success is True
        assert (workspace / "f.py").read_text() == "x = c()\n"

    @pytest.mark.asyncio
    async def test_text_not_found(self, workspace, system):
        """Test editing with absent text leaves the file untouched."""
        (workspace / "f.txt").write_text("hello")

        result = await system.execute_tool(
            "edit_file", {"path": "f.txt", "old_text": "bye", "new_text": "x"}
        )
        assert result.success is False
        assert result.error_type == "TextNotFound"
        assert (workspace / "f.txt").read_text() == "hello"

    @pytest.mark.asyncio
    async def test_edit_missing_file(self, system):
        """Test editing a missing file."""
        result = await system.execute_tool(
            "edit_file", {"path": "nope.txt", "old_text": "a", "new_text": "b"}
        )
        assert result.success is False
        assert result.error_type == "NotFound"

    @pytest.mark.asyncio
    async def test_empty_old_text_rejected(self, workspace, system):
        """Test that an empty search text is invalid."""
        (workspace / "f.txt").write_text("hello")

        result = await system.execute_tool(
            "edit_file", {"path": "f.txt", "old_text": "", "new_text": "x"}
        )
        assert result.success is False
        assert result.error_type == "ValidationError"
        assert (workspace / "f.txt").read_text() == "hello"


class TestGetFileInfo:
    """Test get_file_info."""

    @pytest.mark.asyncio
    async def test_file_info(self, workspace, system):
        """Test metadata of a file."""
        (workspace / "main.py").write_text("print(1)")

        result = await system.execute_tool("get_file_info", {"path": "main.py"})
        assert result.success is True
        info = result.data
        assert info["path"] == str(workspace / "main.py")
        assert info["name"] == "main.py"
        assert info["size"] == 8
        assert info["is_directory"] is False
        assert info["extension"] == ".py"
        assert isinstance(info["last_modified"], str)

    @pytest.mark.asyncio
    async def test_directory_info(self, workspace, system):
        """Test metadata of a directory."""
        (workspace / "pkg.d").mkdir()

        result = await system.execute_tool("get_file_info", {"path": "pkg.d"})
        assert result.success is True
        assert result.data["is_directory"] is True
        assert result.data["extension"] is None

    @pytest.mark.asyncio
    async def test_file_without_extension(self, workspace, system):
        """Test that a file without suffix has no extension."""
        (workspace / "Makefile").write_text("all:")

        result = await system.execute_tool("get_file_info", {"path": "Makefile"})
        assert result.data["extension"] is None

    @pytest.mark.asyncio
    async def test_info_not_found(self, system):
        """Test metadata of a missing path."""
        result = await system.execute_tool("get_file_info", {"path": "ghost"})
        assert result.success is False
        assert result.error_type == "NotFound"

    @pytest.mark.asyncio
    async def test_info_of_oversized_file(self, workspace, system):
        """Test that the read ceiling does not apply to metadata."""
        (workspace / "big.txt").write_text("x" * 2000)

        result = await system.execute_tool("get_file_info", {"path": "big.txt"})
        assert result.success is True
        assert result.data["size"] == 2000
