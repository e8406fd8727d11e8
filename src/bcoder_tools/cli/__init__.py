"""
CLI module for bcoder-tools.

Provides a command-line interface for listing tools and executing
tool calls against a workspace.
"""

from bcoder_tools.cli.main import cli

__all__ = ["cli"]
