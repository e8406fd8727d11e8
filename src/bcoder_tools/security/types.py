"""
Types for the security gate.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class OperationKind(str, Enum):
    """Kind of filesystem access a tool is asking for."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    LIST = "list"
    STAT = "stat"

    @property
    def is_mutation(self) -> bool:
        return self in (OperationKind.WRITE, OperationKind.DELETE)


class PermissionVerdict(BaseModel):
    """
    Result of a security gate check.

    A denied verdict always carries a reason that can be shown to the
    caller. A granted verdict carries the canonical path the tool must
    operate on.
    """

    model_config = {"frozen": True}

    granted: bool
    reason: Optional[str] = None
    auto_approved: bool = False
    resolved_path: Optional[str] = Field(
        default=None,
        description="Canonical absolute path (set when granted)",
    )

    @model_validator(mode="after")
    def _require_reason(self) -> "PermissionVerdict":
        if not self.granted and not self.reason:
            raise ValueError("A denied verdict requires a reason")
        return self

    @classmethod
    def allow(cls, resolved_path: str) -> "PermissionVerdict":
        return cls(granted=True, auto_approved=True, resolved_path=resolved_path)

    @classmethod
    def deny(cls, reason: str) -> "PermissionVerdict":
        return cls(granted=False, reason=reason)
