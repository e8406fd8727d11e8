"""
Sandboxed filesystem tools.

Provides the tool base class, the standard file/directory/search tools,
the dispatcher that validates and executes calls, and the ToolSystem that
wires them to a security gate.

Usage:
    from bcoder_tools.tools import create_tool_system

    system = create_tool_system("/path/to/workspace")
    result = await system.execute_tool("list_files", {"path": "."})
"""

from bcoder_tools.tools.base import BaseTool, ToolArguments
from bcoder_tools.tools.directory_tools import (
    CreateDirectoryTool,
    DeleteFileTool,
    ListFilesTool,
    MoveFileTool,
)
from bcoder_tools.tools.dispatcher import ToolDispatcher
from bcoder_tools.tools.exceptions import (
    ErrorKind,
    PathExistsError,
    PathNotFoundError,
    PermissionDeniedError,
    TextNotFoundError,
    ToolError,
    ToolIOError,
    ToolRegistrationError,
    ToolValidationError,
)
from bcoder_tools.tools.file_tools import (
    EditFileTool,
    GetFileInfoTool,
    ReadFileTool,
    WriteFileTool,
)
from bcoder_tools.tools.models import (
    FileInfo,
    ParameterKind,
    SearchMatch,
    ToolCall,
    ToolDescriptor,
    ToolParameter,
    ToolResult,
)
from bcoder_tools.tools.search_tools import SearchFilesTool, SearchInFilesTool
from bcoder_tools.tools.system import STANDARD_TOOLS, ToolSystem, create_tool_system

__all__ = [
    # Base
    "BaseTool",
    "ToolArguments",
    # Tools
    "ReadFileTool",
    "WriteFileTool",
    "EditFileTool",
    "GetFileInfoTool",
    "ListFilesTool",
    "CreateDirectoryTool",
    "MoveFileTool",
    "DeleteFileTool",
    "SearchFilesTool",
    "SearchInFilesTool",
    "STANDARD_TOOLS",
    # Dispatch
    "ToolDispatcher",
    "ToolSystem",
    "create_tool_system",
    # Models
    "ParameterKind",
    "ToolParameter",
    "ToolDescriptor",
    "ToolCall",
    "ToolResult",
    "FileInfo",
    "SearchMatch",
    # Exceptions
    "ErrorKind",
    "ToolError",
    "ToolRegistrationError",
    "ToolValidationError",
    "PermissionDeniedError",
    "PathNotFoundError",
    "PathExistsError",
    "TextNotFoundError",
    "ToolIOError",
]
