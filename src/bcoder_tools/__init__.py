"""
bcoder-tools - sandboxed filesystem tools for coding agents.

This package lets an LLM-driven agent read, write, edit, list, move,
delete and search files inside a bounded workspace. Every path is
authorized by a central security gate, and every call returns a uniform
result instead of raising.
"""

__version__ = "0.1.0"

from bcoder_tools.security import (
    DEFAULT_DENIED_NAMES,
    DEFAULT_MAX_FILE_SIZE,
    OperationKind,
    PermissionVerdict,
    SecurityContext,
    SecurityGate,
)

from bcoder_tools.settings import ToolSystemSettings

from bcoder_tools.tools import (
    BaseTool,
    ErrorKind,
    FileInfo,
    ParameterKind,
    SearchMatch,
    ToolArguments,
    ToolCall,
    ToolDescriptor,
    ToolDispatcher,
    ToolError,
    ToolParameter,
    ToolResult,
    ToolSystem,
    create_tool_system,
)

__all__ = [
    # Version
    "__version__",
    # Security
    "SecurityContext",
    "SecurityGate",
    "OperationKind",
    "PermissionVerdict",
    "DEFAULT_DENIED_NAMES",
    "DEFAULT_MAX_FILE_SIZE",
    # Settings
    "ToolSystemSettings",
    # Tools
    "BaseTool",
    "ToolArguments",
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
    # Errors
    "ErrorKind",
    "ToolError",
]
