"""
Security context for sandboxed tool execution.
"""

from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB

# Resolved against the workspace root
DEFAULT_DENIED_NAMES: tuple[str, ...] = (
    "node_modules",
    ".git",
    ".vscode",
    "dist",
    "build",
    "out",
)


def is_within(path: Path, directory: Path) -> bool:
    """Check if path is directory itself or one of its descendants."""
    try:
        path.relative_to(directory)
        return True
    except ValueError:
        return False


class SecurityContext(BaseModel):
    """
    Immutable sandbox definition for one workspace session.

    The context is never modified in place. When the workspace root
    changes, a new context is built and handed to the gate as a whole.

    Usage:
        context = SecurityContext.for_workspace(Path("/tmp/project"))
        gate = SecurityGate(context)
    """

    model_config = {"frozen": True}

    workspace_root: Path = Field(
        description="Sandbox root (resolved to an absolute path)",
    )

    allowed_paths: tuple[Path, ...] = Field(
        default=(),
        description="Locations outside the root that may still be accessed",
    )

    denied_paths: tuple[Path, ...] = Field(
        default=(),
        description="Locations that are always rejected, even inside the root",
    )

    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=0,
        description="Maximum size of a file that may be read (bytes)",
    )

    @field_validator("workspace_root", mode="before")
    @classmethod
    def resolve_root(cls, v):
        """Resolve the root to an absolute path."""
        return Path(v).expanduser().resolve()

    @field_validator("allowed_paths", "denied_paths", mode="before")
    @classmethod
    def resolve_paths(cls, v, info: ValidationInfo):
        """Resolve list entries; relative entries are taken from the root."""
        if not v:
            return ()
        root = info.data.get("workspace_root")
        resolved = []
        for p in v:
            p = Path(p).expanduser()
            if not p.is_absolute() and root is not None:
                p = root / p
            resolved.append(p.resolve())
        return tuple(resolved)

    @classmethod
    def for_workspace(
        cls,
        workspace_root: Path,
        *,
        allowed_paths: Iterable[Path] = (),
        denied_paths: Optional[Iterable[Path]] = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> "SecurityContext":
        """
        Build the default context for a workspace.

        Args:
            workspace_root: Sandbox root directory
            allowed_paths: Extra locations outside the root to allow
            denied_paths: Deny-list (default: build/VCS/editor folders)
            max_file_size: Read size ceiling in bytes

        Returns:
            New SecurityContext
        """
        if denied_paths is None:
            denied_paths = [Path(name) for name in DEFAULT_DENIED_NAMES]
        return cls(
            workspace_root=workspace_root,
            allowed_paths=tuple(allowed_paths),
            denied_paths=tuple(denied_paths),
            max_file_size=max_file_size,
        )

    def __repr__(self) -> str:
        return (
            f"SecurityContext("
            f"root={str(self.workspace_root)!r}, "
            f"allowed={len(self.allowed_paths)}, "
            f"denied={len(self.denied_paths)}, "
            f"max_size={self.max_file_size})"
        )
