"""
Directory and tree tools: list, create, move and delete.
"""

import logging
import os
import stat as stat_module
from pathlib import Path
from typing import Iterator

from pydantic import Field

from bcoder_tools.security import OperationKind, SecurityGate
from bcoder_tools.tools import fs
from bcoder_tools.tools.base import BaseTool, ToolArguments
from bcoder_tools.tools.exceptions import (
    PathExistsError,
    PathNotFoundError,
    ToolError,
    ToolIOError,
)
from bcoder_tools.tools.models import FileInfo, ToolResult

logger = logging.getLogger(__name__)


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def walk_tree(
    gate: SecurityGate,
    directory: Path,
    *,
    recursive: bool,
    include_hidden: bool,
) -> Iterator[tuple[Path, os.stat_result]]:
    """
    Walk a directory tree in pre-order.

    A directory is yielded before its children. Entries are visited in name
    order. Hidden entries are skipped unless include_hidden is set, and
    entries the gate rejects (deny-listed, or symlinks leading outside the
    sandbox) are skipped. Symlinked directories are yielded but not
    entered. Only a failure to read `directory` itself is raised; entries
    that cannot be read further down are logged and skipped.

    Depth is not limited. The walk keeps its own stack of pending
    directories, so very deep trees cost memory and time but never hit the
    interpreter's recursion limit. Callers that need bounded latency must
    apply their own timeout.

    Args:
        gate: Security gate used to filter entries
        directory: Authorized directory to walk
        recursive: Descend into subdirectories
        include_hidden: Include dot-prefixed entries

    Yields:
        Tuples of (path, stat result)
    """
    stack = [_scan(gate, directory, include_hidden, top=True)]
    while stack:
        try:
            path, st, is_link = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue

        yield path, st

        if recursive and stat_module.S_ISDIR(st.st_mode) and not is_link:
            stack.append(_scan(gate, path, include_hidden, top=False))


def _scan(
    gate: SecurityGate,
    directory: Path,
    include_hidden: bool,
    top: bool,
) -> Iterator[tuple[Path, os.stat_result, bool]]:
    """Yield the visible, allowed entries of one directory in name order."""
    try:
        entries = fs.list_entries(directory)
    except ToolError as e:
        if top:
            raise
        logger.warning(f"Cannot read directory: {directory}: {e}")
        return

    for entry in entries:
        if not include_hidden and is_hidden(entry.name):
            continue

        path = Path(entry.path)
        if not gate.is_allowed(path):
            logger.debug(f"Skipping restricted entry: {path}")
            continue

        try:
            st = fs.stat(path)
        except ToolError as e:
            logger.warning(f"Cannot access file: {path}: {e}")
            continue

        yield path, st, entry.is_symlink()


def require_directory(path: Path) -> None:
    """
    Raises:
        PathNotFoundError: If the path does not exist
        ToolIOError: If the path is not a directory
    """
    if not fs.exists(path):
        raise PathNotFoundError(str(path), "Directory")
    if not path.is_dir():
        raise ToolIOError(f"Path is not a directory: {path}", path=str(path))


class ListFilesArgs(ToolArguments):
    path: str = Field(description="Path to the directory to list")
    recursive: bool = Field(default=False, description="Whether to list files recursively")
    include_hidden: bool = Field(
        default=False, description="Whether to include hidden files"
    )


class CreateDirectoryArgs(ToolArguments):
    path: str = Field(description="Path of the directory to create")
    recursive: bool = Field(
        default=True,
        description="Whether to create parent directories if they do not exist",
    )


class MoveFileArgs(ToolArguments):
    source: str = Field(description="Source path of the file or directory")
    destination: str = Field(description="Destination path")


class DeleteFileArgs(ToolArguments):
    path: str = Field(description="Path to the file or directory to delete")
    recursive: bool = Field(
        default=False, description="Whether to delete non-empty directories recursively"
    )


class ListFilesTool(BaseTool):
    """List directory entries, optionally for the whole subtree."""

    name = "list_files"
    description = "List files and directories in a given path"
    args_model = ListFilesArgs

    def run(self, args: ListFilesArgs) -> ToolResult:
        directory = self.authorize_directory(args.path)
        require_directory(directory)

        files = [
            FileInfo.from_stat(path, st).model_dump(mode="json")
            for path, st in walk_tree(
                self.gate,
                directory,
                recursive=args.recursive,
                include_hidden=args.include_hidden,
            )
        ]
        logger.info(f"Listed {len(files)} files in: {directory}")

        return ToolResult.ok(
            data={"path": str(directory), "files": files, "count": len(files)},
            message=f"Found {len(files)} files in {args.path}",
        )


class CreateDirectoryTool(BaseTool):
    """Create a directory; an existing path is an error."""

    name = "create_directory"
    description = "Create a new directory"
    args_model = CreateDirectoryArgs

    def run(self, args: CreateDirectoryArgs) -> ToolResult:
        path = self.authorize(args.path, OperationKind.WRITE)

        if fs.exists(path):
            raise PathExistsError(str(path), "Directory")
        if not args.recursive and not fs.exists(path.parent):
            raise PathNotFoundError(str(path.parent), "Parent directory")

        fs.make_directory(path, parents=args.recursive)
        logger.info(f"Directory created: {path}")

        return ToolResult.ok(
            data={"path": str(path), "created": True},
            message=f"Successfully created directory: {args.path}",
        )


class MoveFileTool(BaseTool):
    """
    Move or rename a file or directory.

    Never overwrites: an existing destination is an error and both paths
    are left untouched.
    """

    name = "move_file"
    description = "Move or rename a file or directory"
    args_model = MoveFileArgs

    def run(self, args: MoveFileArgs) -> ToolResult:
        source = self.authorize(args.source, OperationKind.DELETE)
        destination = self.authorize(args.destination, OperationKind.WRITE)

        if not fs.exists(source):
            raise PathNotFoundError(str(source), "Source file or directory")
        if fs.exists(destination):
            raise PathExistsError(str(destination), "Destination")

        if not fs.exists(destination.parent):
            fs.make_directory(destination.parent, parents=True)

        fs.rename(source, destination)
        logger.info(f"File moved: {source} -> {destination}")

        return ToolResult.ok(
            data={"source": str(source), "destination": str(destination)},
            message=f"Successfully moved: {args.source} -> {args.destination}",
        )


class DeleteFileTool(BaseTool):
    """
    Delete a file or directory.

    Non-empty directories are only removed when recursive is set.
    """

    name = "delete_file"
    description = "Delete a file or directory"
    args_model = DeleteFileArgs

    def run(self, args: DeleteFileArgs) -> ToolResult:
        path = self.authorize(args.path, OperationKind.DELETE)

        if not fs.exists(path):
            raise PathNotFoundError(str(path))

        was_directory = path.is_dir() and not path.is_symlink()
        if was_directory:
            if args.recursive:
                fs.remove_tree(path)
            elif fs.is_empty_directory(path):
                fs.remove_directory(path)
            else:
                raise ToolIOError(
                    f"Directory is not empty (set recursive to delete it): {path}",
                    path=str(path),
                )
        else:
            fs.remove_file(path)

        logger.info(f"File deleted: {path}")

        return ToolResult.ok(
            data={"path": str(path), "was_directory": was_directory},
            message=f"Successfully deleted: {args.path}",
        )
