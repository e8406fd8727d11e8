"""
Tool system wiring.

Builds the security gate, the dispatcher and the standard filesystem tool
set for a workspace, and exposes the operations an agent loop needs.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from bcoder_tools.security import SecurityContext, SecurityGate
from bcoder_tools.settings import ToolSystemSettings
from bcoder_tools.tools.base import BaseTool
from bcoder_tools.tools.directory_tools import (
    CreateDirectoryTool,
    DeleteFileTool,
    ListFilesTool,
    MoveFileTool,
)
from bcoder_tools.tools.dispatcher import ToolDispatcher
from bcoder_tools.tools.file_tools import (
    EditFileTool,
    GetFileInfoTool,
    ReadFileTool,
    WriteFileTool,
)
from bcoder_tools.tools.models import ToolCall, ToolDescriptor, ToolResult
from bcoder_tools.tools.search_tools import SearchFilesTool, SearchInFilesTool

logger = logging.getLogger(__name__)

STANDARD_TOOLS: tuple[type[BaseTool], ...] = (
    ReadFileTool,
    WriteFileTool,
    EditFileTool,
    GetFileInfoTool,
    ListFilesTool,
    CreateDirectoryTool,
    MoveFileTool,
    DeleteFileTool,
    SearchFilesTool,
    SearchInFilesTool,
)


class ToolSystem:
    """
    Sandboxed tool set for one workspace.

    All tools share one SecurityGate. Changing the workspace root swaps the
    gate's context, so tools never need to be re-created.

    Usage:
        system = ToolSystem(SecurityContext.for_workspace(Path("/ws")))

        schemas = system.get_tool_schemas()
        result = await system.execute_tool("read_file", {"path": "README.md"})
    """

    def __init__(self, context: Union[SecurityContext, ToolSystemSettings]) -> None:
        """
        Initialize the tool system.

        Args:
            context: Security context, or settings to build one from
        """
        if isinstance(context, ToolSystemSettings):
            context = context.build_security_context()

        self._gate = SecurityGate(context)
        self._dispatcher = ToolDispatcher(tool_cls(self._gate) for tool_cls in STANDARD_TOOLS)
        logger.info(
            f"Tool system ready: {len(self._dispatcher)} tools, root={context.workspace_root}"
        )

    @property
    def gate(self) -> SecurityGate:
        return self._gate

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    @property
    def workspace_root(self) -> Path:
        return self._gate.workspace_root

    def update_workspace_root(self, workspace_root: Union[str, Path]) -> SecurityContext:
        """
        Move the sandbox to a new root.

        Args:
            workspace_root: New workspace root

        Returns:
            The new security context
        """
        return self._gate.update_workspace_root(workspace_root)

    def list_descriptors(self) -> list[ToolDescriptor]:
        return self._dispatcher.list_descriptors()

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        """OpenAI-style function schemas for every tool."""
        return self._dispatcher.get_tool_schemas()

    async def execute_tool(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> ToolResult:
        """
        Execute one tool by name.

        Args:
            name: Tool name
            arguments: Argument map

        Returns:
            ToolResult (never raises)
        """
        return await self._dispatcher.execute(ToolCall(name=name, arguments=arguments or {}))

    async def execute_tools(
        self, calls: Iterable[Union[ToolCall, dict[str, Any]]]
    ) -> list[ToolResult]:
        """Execute a batch of calls in order; see ToolDispatcher.execute_batch."""
        return await self._dispatcher.execute_batch(calls)

    def __repr__(self) -> str:
        return f"ToolSystem(root={str(self.workspace_root)!r}, tools={len(self._dispatcher)})"


def create_tool_system(
    workspace_root: Optional[Union[str, Path]] = None,
    settings: Optional[ToolSystemSettings] = None,
) -> ToolSystem:
    """
    Create a tool system with the standard tools.

    Args:
        workspace_root: Sandbox root; overrides the settings' root
            (default: settings root, else the current directory)
        settings: Optional settings (default: built-in defaults)

    Returns:
        Configured ToolSystem
    """
    settings = settings or ToolSystemSettings()
    if workspace_root is not None:
        settings = settings.model_copy(
            update={"workspace_root": Path(workspace_root).expanduser().resolve()}
        )
    return ToolSystem(settings)
