"""
Sandbox security for filesystem tools.

The SecurityGate canonicalizes every path argument against a workspace
root and decides whether a tool may act on it.
"""

from bcoder_tools.security.context import (
    DEFAULT_DENIED_NAMES,
    DEFAULT_MAX_FILE_SIZE,
    SecurityContext,
)
from bcoder_tools.security.gate import SecurityGate
from bcoder_tools.security.types import OperationKind, PermissionVerdict

__all__ = [
    "DEFAULT_DENIED_NAMES",
    "DEFAULT_MAX_FILE_SIZE",
    "SecurityContext",
    "SecurityGate",
    "OperationKind",
    "PermissionVerdict",
]
