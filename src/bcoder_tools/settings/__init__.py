"""
Settings and configuration for bcoder-tools.

Example:
    ```python
    from bcoder_tools.settings import ToolSystemSettings

    settings = ToolSystemSettings.from_file("~/.bcoder/tools.yaml")
    print(settings.workspace_root)
    ```
"""

from bcoder_tools.settings.config import ToolSystemSettings

__all__ = ["ToolSystemSettings"]
