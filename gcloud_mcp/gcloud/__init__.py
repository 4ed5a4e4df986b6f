from gcloud_mcp.gcloud.client import GcloudExecutable, create
from gcloud_mcp.gcloud.executor import GcloudExecutor, find_executable, is_available

__all__ = [
    "GcloudExecutable",
    "GcloudExecutor",
    "create",
    "find_executable",
    "is_available",
]
