"""
Base class for sandboxed filesystem tools.
"""

import logging
import types
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from bcoder_tools.security import OperationKind, SecurityGate
from bcoder_tools.tools.exceptions import (
    ErrorKind,
    PermissionDeniedError,
    ToolError,
    ToolValidationError,
)
from bcoder_tools.tools.models import ParameterKind, ToolDescriptor, ToolParameter, ToolResult

logger = logging.getLogger(__name__)

_KIND_BY_TYPE: dict[Any, ParameterKind] = {
    str: ParameterKind.STRING,
    int: ParameterKind.NUMBER,
    float: ParameterKind.NUMBER,
    bool: ParameterKind.BOOLEAN,
    list: ParameterKind.ARRAY,
    tuple: ParameterKind.ARRAY,
    dict: ParameterKind.OBJECT,
}


def parameter_kind(annotation: Any) -> ParameterKind:
    """
    Map a Python annotation onto a primitive parameter kind.

    Optional[X] maps to the kind of X.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) != 1:
            raise TypeError(f"Unsupported parameter annotation: {annotation!r}")
        return parameter_kind(args[0])
    if origin is not None:
        annotation = origin
    try:
        return _KIND_BY_TYPE[annotation]
    except KeyError:
        raise TypeError(f"Unsupported parameter annotation: {annotation!r}")


class ToolArguments(BaseModel):
    """
    Typed arguments of a tool.

    Field order is the advertised parameter order; Field descriptions are
    the advertised parameter descriptions.
    """

    model_config = {"extra": "ignore"}

    @classmethod
    def parameters(cls) -> list[ToolParameter]:
        params = []
        for name, field in cls.model_fields.items():
            required = field.is_required()
            default = None if required else field.get_default(call_default_factory=True)
            params.append(
                ToolParameter(
                    name=name,
                    kind=parameter_kind(field.annotation),
                    description=field.description or "",
                    required=required,
                    default=default,
                )
            )
        return params


class BaseTool(ABC):
    """
    A named, schema-described filesystem operation.

    Subclasses declare `name`, `description` and an `args_model`, and
    implement `run`. Tools are stateless: they only hold a reference to the
    shared SecurityGate, so every call is independent and safe to retry.

    Usage:
        class ReadFileTool(BaseTool):
            name = "read_file"
            description = "Read the contents of a file"
            args_model = ReadFileArgs

            def run(self, args: ReadFileArgs) -> ToolResult:
                path = self.authorize(args.path, OperationKind.READ)
                ...
    """

    name: ClassVar[str]
    description: ClassVar[str]
    args_model: ClassVar[type[ToolArguments]]

    def __init__(self, gate: SecurityGate) -> None:
        """
        Initialize the tool.

        Args:
            gate: Shared security gate (not owned by the tool)
        """
        self.gate = gate

    @property
    def parameters(self) -> list[ToolParameter]:
        return self.args_model.parameters()

    @property
    def workspace_root(self) -> Path:
        return self.gate.workspace_root

    def descriptor(self) -> ToolDescriptor:
        """Describe the tool for function-calling callers."""
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
        )

    def parse_arguments(self, arguments: dict[str, Any]) -> ToolArguments:
        """
        Convert a raw argument map into the typed argument model.

        Raises:
            ToolValidationError: If a value violates a field constraint
        """
        cleaned = {k: v for k, v in arguments.items() if v is not None}
        try:
            return self.args_model.model_validate(cleaned)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise ToolValidationError(f"Invalid arguments for {self.name}: {problems}")

    def authorize(self, path: str, operation: OperationKind) -> Path:
        """
        Ask the security gate for permission.

        Returns:
            Canonical path to operate on

        Raises:
            PermissionDeniedError: If the gate rejects the path
        """
        verdict = self.gate.authorize(path, operation)
        if not verdict.granted:
            raise PermissionDeniedError(path, verdict.reason)
        return Path(verdict.resolved_path)

    def authorize_directory(self, path: str) -> Path:
        """Authorize a directory before traversing it."""
        verdict = self.gate.authorize_directory(path)
        if not verdict.granted:
            raise PermissionDeniedError(path, verdict.reason)
        return Path(verdict.resolved_path)

    async def execute(self, args: ToolArguments) -> ToolResult:
        """
        Run the tool and convert every failure into a ToolResult.

        Args:
            args: Validated arguments

        Returns:
            ToolResult (never raises)
        """
        try:
            return self.run(args)
        except ToolError as e:
            logger.warning(f"{self.name} failed: {e}")
            return ToolResult.fail(str(e), e.kind.value)
        except OSError as e:
            logger.error(f"{self.name} OS error: {e}")
            return ToolResult.fail(f"{self.name} failed: {e}", ErrorKind.IO_ERROR.value)
        except Exception as e:
            logger.exception(f"{self.name} unexpected error: {e}")
            return ToolResult.fail(f"Tool execution failed: {e}", "UnexpectedError")

    @abstractmethod
    def run(self, args: ToolArguments) -> ToolResult:
        """Perform the operation (blocking)."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
