"""
Tool system configuration.

This module provides configuration management for the sandboxed tool
system: the workspace root, allow/deny lists and size limits.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from bcoder_tools.security.context import (
    DEFAULT_DENIED_NAMES,
    DEFAULT_MAX_FILE_SIZE,
    SecurityContext,
)


class ToolSystemSettings(BaseModel):
    """
    Complete tool system configuration.

    Relative entries in `allowed_paths` and `denied_paths` are resolved
    against the workspace root when the security context is built.

    Example:
        ```python
        settings = ToolSystemSettings(
            workspace_root="~/projects/demo",
            denied_paths=[".git", "node_modules", "secrets"],
            max_file_size_bytes=2_000_000,
        )

        # Load from file
        settings = ToolSystemSettings.from_file("~/.bcoder/tools.yaml")

        context = settings.build_security_context()
        ```
    """

    model_config = {"extra": "forbid"}

    workspace_root: Path = Field(
        default_factory=Path.cwd,
        description="Sandbox root directory (default: current directory)",
    )
    allowed_paths: list[Path] = Field(
        default_factory=list,
        description="Locations outside the workspace that tools may access",
    )
    denied_paths: list[Path] = Field(
        default_factory=lambda: [Path(name) for name in DEFAULT_DENIED_NAMES],
        description="Locations tools may never access, even inside the workspace",
    )
    max_file_size_bytes: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=0,
        description="Maximum file size that can be read (bytes)",
    )

    @field_validator("workspace_root", mode="before")
    @classmethod
    def expand_root(cls, v):
        """Expand ~ and resolve the root to an absolute path."""
        return Path(v).expanduser().resolve()

    @field_validator("allowed_paths", "denied_paths", mode="before")
    @classmethod
    def split_path_list(cls, v):
        """Accept a path-separator delimited string (as found in env vars)."""
        if v is None:
            return []
        if isinstance(v, str):
            return [p for p in v.split(os.pathsep) if p]
        return v

    def build_security_context(self) -> SecurityContext:
        """
        Create the security context described by these settings.

        Returns:
            New SecurityContext
        """
        return SecurityContext.for_workspace(
            self.workspace_root,
            allowed_paths=self.allowed_paths,
            denied_paths=self.denied_paths,
            max_file_size=self.max_file_size_bytes,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ToolSystemSettings":
        """
        Load settings from a YAML or JSON file.

        File format (YAML):
            ```yaml
            workspace_root: ~/projects/demo
            allowed_paths:
              - /usr/share/dict
            denied_paths:
              - .git
              - node_modules
            max_file_size_bytes: 2000000
            ```

        Args:
            path: Path to configuration file

        Returns:
            Loaded ToolSystemSettings instance

        Raises:
            FileNotFoundError: If the config file doesn't exist
        """
        path = Path(path).expanduser().resolve()

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text()

        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "ToolSystemSettings":
        """
        Create settings from a dictionary.

        Args:
            data: Settings dictionary

        Returns:
            ToolSystemSettings instance
        """
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = "BCODER_") -> "ToolSystemSettings":
        """
        Load settings from environment variables.

        Environment variables:
            BCODER_WORKSPACE_ROOT - Sandbox root directory
            BCODER_ALLOWED_PATHS - Extra allowed paths (os.pathsep separated)
            BCODER_DENIED_PATHS - Denied paths (os.pathsep separated)
            BCODER_MAX_FILE_SIZE_BYTES - Read size ceiling

        Unset variables keep their defaults.

        Args:
            prefix: Environment variable prefix

        Returns:
            ToolSystemSettings instance
        """
        data: dict = {}

        root = os.environ.get(f"{prefix}WORKSPACE_ROOT")
        if root:
            data["workspace_root"] = root

        allowed = os.environ.get(f"{prefix}ALLOWED_PATHS")
        if allowed is not None:
            data["allowed_paths"] = allowed

        denied = os.environ.get(f"{prefix}DENIED_PATHS")
        if denied is not None:
            data["denied_paths"] = denied

        max_size = os.environ.get(f"{prefix}MAX_FILE_SIZE_BYTES")
        if max_size:
            data["max_file_size_bytes"] = int(max_size)

        return cls.from_dict(data)

    @classmethod
    def load(
        cls,
        config_path: Optional[Union[str, Path]] = None,
        workspace_root: Optional[Union[str, Path]] = None,
    ) -> "ToolSystemSettings":
        """
        Load settings from a file if given, else from the environment.

        Args:
            config_path: Optional YAML/JSON settings file
            workspace_root: Optional override for the workspace root

        Returns:
            ToolSystemSettings instance
        """
        settings = cls.from_file(config_path) if config_path else cls.from_env()
        if workspace_root is not None:
            settings = settings.model_copy(
                update={"workspace_root": Path(workspace_root).expanduser().resolve()}
            )
        return settings

    def to_dict(self) -> dict:
        """
        Export settings to a plain dictionary.

        Returns:
            Dictionary representation (paths as strings)
        """
        return {
            "workspace_root": str(self.workspace_root),
            "allowed_paths": [str(p) for p in self.allowed_paths],
            "denied_paths": [str(p) for p in self.denied_paths],
            "max_file_size_bytes": self.max_file_size_bytes,
        }

    def save(self, path: Union[str, Path], format: str = "yaml") -> None:
        """
        Save settings to a file.

        Args:
            path: Output file path
            format: Output format ('yaml' or 'json')
        """
        path = Path(path).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.to_dict()

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content)

    def __str__(self) -> str:
        return (
            f"ToolSystemSettings(root={self.workspace_root}, "
            f"denied={len(self.denied_paths)}, max_size={self.max_file_size_bytes})"
        )
