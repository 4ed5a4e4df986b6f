from gcloud_mcp.tool.base import BaseTool, CLIResult, ToolFailure, ToolResult
from gcloud_mcp.tool.run_gcloud_command import RunGcloudCommand

__all__ = [
    "BaseTool",
    "CLIResult",
    "RunGcloudCommand",
    "ToolFailure",
    "ToolResult",
]
