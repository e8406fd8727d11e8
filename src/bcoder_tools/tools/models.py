"""
Tool data models.

This module defines Pydantic models exchanged between the dispatcher,
the tools, and the orchestration layer.
"""

import stat as stat_module
from datetime import datetime, timezone
from enum import Enum
from os import stat_result
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class ParameterKind(str, Enum):
    """Primitive kinds a tool parameter can declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    def matches(self, value: Any) -> bool:
        """Check a JSON-shaped value against this kind."""
        if self is ParameterKind.STRING:
            return isinstance(value, str)
        if self is ParameterKind.NUMBER:
            # bool is an int subclass but never a number here
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if self is ParameterKind.BOOLEAN:
            return isinstance(value, bool)
        if self is ParameterKind.ARRAY:
            return isinstance(value, (list, tuple))
        return isinstance(value, dict)


class ToolParameter(BaseModel):
    """One entry of a tool's parameter schema."""

    name: str = Field(description="Argument name")
    kind: ParameterKind = Field(description="Primitive kind of the argument")
    description: str = Field(default="", description="Human description")
    required: bool = Field(default=False, description="Whether the argument is required")
    default: Optional[Any] = Field(default=None, description="Default when omitted")


class ToolDescriptor(BaseModel):
    """Advertised description of a tool for function-calling callers."""

    name: str = Field(description="Tool name")
    description: str = Field(description="What the tool does")
    parameters: list[ToolParameter] = Field(
        default_factory=list, description="Ordered parameter schema"
    )

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]

    def to_function_schema(self) -> dict[str, Any]:
        """
        Render the descriptor as a function-calling schema.

        Returns:
            {name, description, parameters: {type, properties, required}}
        """
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": {
                    p.name: {"type": p.kind.value, "description": p.description}
                    for p in self.parameters
                },
                "required": self.required,
            },
        }

    def to_openai_tool(self) -> dict[str, Any]:
        """Wrap the function schema in the OpenAI tools envelope."""
        return {"type": "function", "function": self.to_function_schema()}


class ToolCall(BaseModel):
    """A request to invoke one tool."""

    name: str = Field(description="Tool name")
    arguments: dict[str, Any] = Field(
        default_factory=dict, description="Untyped argument mapping"
    )


class ToolResult(BaseModel):
    """
    Uniform outcome of a tool call.

    `success` is the discriminator: a successful result never carries an
    error, a failed one never carries data.
    """

    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @model_validator(mode="after")
    def _check_branch(self) -> "ToolResult":
        if self.success:
            if self.error is not None or self.error_type is not None:
                raise ValueError("A successful result cannot carry an error")
        else:
            if not self.error:
                raise ValueError("A failed result requires a non-empty error")
            if self.data is not None:
                raise ValueError("A failed result cannot carry data")
        return self

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ToolResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, error_type: Optional[str] = None) -> "ToolResult":
        return cls(success=False, error=error, error_type=error_type)

    def __str__(self) -> str:
        if self.success:
            return f"ok: {self.message or ''}".rstrip()
        return f"failed ({self.error_type}): {self.error}"


class FileInfo(BaseModel):
    """Metadata of a file or directory."""

    path: str = Field(description="Absolute path")
    name: str = Field(description="Base name")
    size: int = Field(description="Size in bytes")
    is_directory: bool = Field(description="Whether the entry is a directory")
    last_modified: datetime = Field(description="Last modification time (UTC)")
    extension: Optional[str] = Field(
        default=None, description="File extension including the dot (files only)"
    )

    @classmethod
    def from_stat(cls, path: Path, st: stat_result) -> "FileInfo":
        is_dir = stat_module.S_ISDIR(st.st_mode)
        return cls(
            path=str(path),
            name=path.name,
            size=st.st_size,
            is_directory=is_dir,
            last_modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            extension=None if is_dir else (path.suffix or None),
        )


class SearchMatch(BaseModel):
    """One occurrence found by content search."""

    path: str = Field(description="File containing the match")
    line: int = Field(description="1-based line number")
    column: int = Field(description="1-based column of the match start")
    content: str = Field(description="Full text of the matched line")
    context: str = Field(description="Up to two lines before and after the match")

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}: {self.content}"
