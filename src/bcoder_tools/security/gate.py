"""
Security gate for sandboxed filesystem tools.

Every path argument a tool receives is canonicalized and authorized here
before the tool touches the filesystem. The gate owns the current
SecurityContext and swaps it as a whole when the workspace changes.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from bcoder_tools.security.context import SecurityContext, is_within
from bcoder_tools.security.types import OperationKind, PermissionVerdict

logger = logging.getLogger(__name__)


class SecurityGate:
    """
    Path authorization against a sandbox root, allow/deny lists and a
    read-size ceiling.

    Usage:
        gate = SecurityGate(SecurityContext.for_workspace(Path("/ws")))

        verdict = gate.authorize("src/main.py", OperationKind.READ)
        if not verdict.granted:
            print(verdict.reason)
    """

    def __init__(self, context: SecurityContext) -> None:
        """
        Initialize the gate.

        Args:
            context: Initial security context
        """
        self._context = context

    @property
    def context(self) -> SecurityContext:
        """The current (immutable) security context."""
        return self._context

    @property
    def workspace_root(self) -> Path:
        return self._context.workspace_root

    def replace_context(self, context: SecurityContext) -> None:
        """
        Swap in a new security context.

        Args:
            context: Replacement context
        """
        self._context = context
        logger.info(f"Security context replaced: {context!r}")

    def update_workspace_root(self, workspace_root: Union[str, Path]) -> SecurityContext:
        """
        Rebuild the context for a new workspace root.

        The allow-list, deny-list and size ceiling carry over. Deny entries
        that lie under the old root are moved under the new root; entries
        outside it are kept as they are.

        Args:
            workspace_root: New sandbox root

        Returns:
            The new context
        """
        old = self._context
        denied = [
            p.relative_to(old.workspace_root) if is_within(p, old.workspace_root) else p
            for p in old.denied_paths
        ]
        context = SecurityContext.for_workspace(
            Path(workspace_root),
            allowed_paths=old.allowed_paths,
            denied_paths=denied,
            max_file_size=old.max_file_size,
        )
        self.replace_context(context)
        return context

    def resolve(
        self,
        path: Union[str, Path],
        context: Optional[SecurityContext] = None,
        follow_symlinks: bool = True,
    ) -> Path:
        """
        Canonicalize a path relative to the sandbox root.

        Args:
            path: Absolute path, or path relative to the root
            context: Context to resolve against (default: current)
            follow_symlinks: Resolve a symlink in the final component. When
                False only the parent is resolved, so the link itself is
                the target (used for delete and move sources).

        Returns:
            Absolute path with `.`/`..` segments and symlinks resolved
        """
        context = context or self._context
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = context.workspace_root / candidate
        if follow_symlinks:
            return candidate.resolve()

        candidate = Path(os.path.normpath(candidate))
        if not candidate.name:
            return candidate.resolve()
        return candidate.parent.resolve() / candidate.name

    def authorize(
        self, path: Union[str, Path], operation: OperationKind
    ) -> PermissionVerdict:
        """
        Decide whether an operation may act on a path.

        Args:
            path: Path argument as supplied by the caller
            operation: Kind of access requested

        Returns:
            PermissionVerdict; when granted, resolved_path is the path the
            tool must use
        """
        # One snapshot per decision; a concurrent root change cannot mix
        # rules from two contexts.
        context = self._context

        try:
            resolved = self.resolve(
                path, context, follow_symlinks=operation != OperationKind.DELETE
            )
        except (OSError, RuntimeError, ValueError) as e:
            return self._deny(path, operation, f"Invalid path format: {e}")

        reason = self._check_location(resolved, context)
        if reason is None and operation.is_mutation and resolved == context.workspace_root:
            reason = f"Cannot {operation.value} the workspace root"
        if reason is None and operation == OperationKind.READ:
            reason = self._check_size(resolved, context)

        if reason is not None:
            return self._deny(path, operation, reason)
        return PermissionVerdict.allow(str(resolved))

    def authorize_directory(
        self, path: Union[str, Path], operation: OperationKind = OperationKind.LIST
    ) -> PermissionVerdict:
        """
        Authorize the root of a directory traversal before it begins.

        Args:
            path: Directory to traverse
            operation: Access kind (default: list)

        Returns:
            PermissionVerdict
        """
        return self.authorize(path, operation)

    def is_allowed(self, path: Union[str, Path]) -> bool:
        """
        Quiet location check used for entries found while walking a tree.

        Args:
            path: Entry path

        Returns:
            True if the entry is inside the sandbox and not deny-listed
        """
        context = self._context
        try:
            resolved = self.resolve(path, context)
        except (OSError, RuntimeError, ValueError):
            return False
        return self._check_location(resolved, context) is None

    def _check_location(self, resolved: Path, context: SecurityContext) -> Optional[str]:
        if not is_within(resolved, context.workspace_root) and not any(
            is_within(resolved, allowed) for allowed in context.allowed_paths
        ):
            return "Path is outside workspace"

        for denied in context.denied_paths:
            if is_within(resolved, denied):
                return f"Path is in denied list: {denied}"

        return None

    def _check_size(self, resolved: Path, context: SecurityContext) -> Optional[str]:
        try:
            if resolved.is_file():
                size = resolved.stat().st_size
                if size > context.max_file_size:
                    return f"File too large ({size} bytes, max {context.max_file_size})"
        except OSError as e:
            return f"File access error: {e}"
        return None

    def _deny(
        self, path: Union[str, Path], operation: OperationKind, reason: str
    ) -> PermissionVerdict:
        logger.warning(f"Access denied ({operation.value}) to {path}: {reason}")
        return PermissionVerdict.deny(reason)
