"""
Tool registry and dispatcher.

Owns the name -> tool mapping, advertises tool schemas to function-calling
callers, validates call arguments against each tool's declared parameters,
and converts every failure into a ToolResult.
"""

import logging
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from bcoder_tools.tools.base import BaseTool
from bcoder_tools.tools.exceptions import ErrorKind, ToolRegistrationError, ToolValidationError
from bcoder_tools.tools.models import ToolCall, ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """
    Registry and executor for sandboxed tools.

    Tools are registered once at startup; afterwards the registry is only
    read. Callers never see an exception from execute() or
    execute_batch(): unknown tools, invalid arguments and tool crashes all
    come back as failed ToolResults.

    Usage:
        dispatcher = ToolDispatcher()
        dispatcher.register(ReadFileTool(gate))

        schemas = dispatcher.get_tool_schemas()
        result = await dispatcher.execute(
            ToolCall(name="read_file", arguments={"path": "README.md"})
        )
    """

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None) -> None:
        """
        Initialize the dispatcher.

        Args:
            tools: Tools to register immediately
        """
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """
        Register a tool under its declared name.

        Raises:
            ToolRegistrationError: If the name is already taken
        """
        if tool.name in self._tools:
            raise ToolRegistrationError(tool.name)
        self._tools[tool.name] = tool
        logger.info(f"Tool registered: {tool.name}")

    def get(self, name: str) -> Optional[BaseTool]:
        return self._tools.get(name)

    @property
    def tools(self) -> list[BaseTool]:
        return list(self._tools.values())

    def list_descriptors(self) -> list[ToolDescriptor]:
        """
        Describe every registered tool.

        Descriptors are derived from the same argument models the
        dispatcher validates against.
        """
        return [tool.descriptor() for tool in self._tools.values()]

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        """
        Get OpenAI function calling schemas for all registered tools.

        Returns:
            List of tool schemas in OpenAI format
        """
        return [descriptor.to_openai_tool() for descriptor in self.list_descriptors()]

    def validate(self, tool: BaseTool, arguments: dict[str, Any]) -> None:
        """
        Check arguments against the tool's parameter schema.

        A None value counts as absent.

        Raises:
            ToolValidationError: On a missing required parameter or a kind
                mismatch
        """
        for param in tool.parameters:
            value = arguments.get(param.name)
            if value is None:
                if param.required:
                    raise ToolValidationError(f"Missing required parameter: {param.name}")
                continue
            if not param.kind.matches(value):
                raise ToolValidationError(
                    f"Parameter '{param.name}' must be of type {param.kind.value}"
                )

    async def execute(self, call: Union[ToolCall, dict[str, Any]]) -> ToolResult:
        """
        Execute a single tool call.

        Args:
            call: ToolCall (or a dict with `name` and `arguments`)

        Returns:
            The tool's result, or a failed result (never raises)
        """
        try:
            if not isinstance(call, ToolCall):
                call = ToolCall.model_validate(call)
        except ValidationError as e:
            return ToolResult.fail(f"Malformed tool call: {e}", ErrorKind.VALIDATION.value)

        tool = self._tools.get(call.name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {call.name}")
            return ToolResult.fail(
                f"Tool '{call.name}' not found", ErrorKind.VALIDATION.value
            )

        try:
            logger.info(f"Executing tool: {call.name} (arguments: {sorted(call.arguments)})")
            self.validate(tool, call.arguments)
            args = tool.parse_arguments(call.arguments)
        except ToolValidationError as e:
            logger.warning(f"Invalid call to {call.name}: {e}")
            return ToolResult.fail(str(e), e.kind.value)

        try:
            result = await tool.execute(args)
        except Exception as e:
            logger.exception(f"Tool execution failed: {call.name}")
            return ToolResult.fail(f"Tool execution failed: {e}", "UnexpectedError")

        logger.info(
            f"Tool execution completed: {call.name} "
            f"(success={result.success}, error={result.error})"
        )
        return result

    async def execute_batch(
        self, calls: Iterable[Union[ToolCall, dict[str, Any]]]
    ) -> list[ToolResult]:
        """
        Execute calls one after another, in order.

        A failed call does not stop the batch; every call gets a result.
        Calls do not pass data to each other, but each call sees the
        filesystem changes made by the calls before it.

        Args:
            calls: Tool calls to execute

        Returns:
            One result per call, in input order
        """
        results: list[ToolResult] = []
        for index, call in enumerate(calls):
            result = await self.execute(call)
            results.append(result)
            if not result.success:
                logger.warning(f"Tool call #{index} failed, continuing with next")
        return results

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
