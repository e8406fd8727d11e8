"""
File-content tools: read, write, edit and inspect single files.
"""

import logging

from pydantic import Field

from bcoder_tools.security import OperationKind
from bcoder_tools.tools import fs
from bcoder_tools.tools.base import BaseTool, ToolArguments
from bcoder_tools.tools.exceptions import PathNotFoundError, TextNotFoundError, ToolIOError
from bcoder_tools.tools.models import FileInfo, ToolResult

logger = logging.getLogger(__name__)


class ReadFileArgs(ToolArguments):
    path: str = Field(description="Path to the file to read")


class WriteFileArgs(ToolArguments):
    path: str = Field(description="Path to the file to write")
    content: str = Field(description="Content to write to the file")


class EditFileArgs(ToolArguments):
    path: str = Field(description="Path to the file to edit")
    old_text: str = Field(min_length=1, description="Text to find and replace")
    new_text: str = Field(description="New text to replace with")


class GetFileInfoArgs(ToolArguments):
    path: str = Field(description="Path to the file or directory")


class ReadFileTool(BaseTool):
    """Read a whole text file."""

    name = "read_file"
    description = "Read the contents of a file"
    args_model = ReadFileArgs

    def run(self, args: ReadFileArgs) -> ToolResult:
        path = self.authorize(args.path, OperationKind.READ)

        if not fs.exists(path):
            raise PathNotFoundError(str(path), "File")
        if path.is_dir():
            raise ToolIOError(f"Path is a directory, not a file: {path}", path=str(path))

        content, size = fs.read_text(path)
        logger.info(f"File read successfully: {path} ({size} bytes)")

        return ToolResult.ok(
            data={"path": str(path), "content": content, "size": size},
            message=f"Successfully read file: {args.path}",
        )


class WriteFileTool(BaseTool):
    """
    Create a file or replace its content.

    Missing parent directories are created. An existing file is
    overwritten without merging.
    """

    name = "write_file"
    description = "Write content to a file (creates new file or overwrites existing)"
    args_model = WriteFileArgs

    def run(self, args: WriteFileArgs) -> ToolResult:
        path = self.authorize(args.path, OperationKind.WRITE)

        if not fs.exists(path.parent):
            fs.make_directory(path.parent, parents=True)
            logger.debug(f"Created parent directories for {path}")

        size = fs.write_text(path, args.content)
        logger.info(f"File written successfully: {path} ({size} bytes)")

        return ToolResult.ok(
            data={"path": str(path), "size": size},
            message=f"Successfully wrote file: {args.path}",
        )


class EditFileTool(BaseTool):
    """
    Replace the first occurrence of a literal text in a file.

    The search text is matched verbatim. Only the first occurrence is
    replaced; later occurrences are left untouched.
    """

    name = "edit_file"
    description = "Edit a file by replacing the first occurrence of specific text"
    args_model = EditFileArgs

    def run(self, args: EditFileArgs) -> ToolResult:
        path = self.authorize(args.path, OperationKind.READ)
        self.authorize(args.path, OperationKind.WRITE)

        if not fs.exists(path):
            raise PathNotFoundError(str(path), "File")

        original, original_size = fs.read_text(path)
        if args.old_text not in original:
            raise TextNotFoundError(str(path), args.old_text)

        updated = original.replace(args.old_text, args.new_text, 1)
        new_size = fs.write_text(path, updated)
        logger.info(f"File edited successfully: {path}")

        return ToolResult.ok(
            data={
                "path": str(path),
                "original_size": original_size,
                "new_size": new_size,
                "replacements": 1,
            },
            message=f"Successfully edited file: {args.path}",
        )


class GetFileInfoTool(BaseTool):
    """Return metadata for a file or directory."""

    name = "get_file_info"
    description = "Get information about a file or directory"
    args_model = GetFileInfoArgs

    def run(self, args: GetFileInfoArgs) -> ToolResult:
        path = self.authorize(args.path, OperationKind.STAT)

        if not fs.exists(path):
            raise PathNotFoundError(str(path))

        info = FileInfo.from_stat(path, fs.stat(path))
        return ToolResult.ok(
            data=info.model_dump(mode="json"),
            message=f"File info retrieved: {args.path}",
        )
