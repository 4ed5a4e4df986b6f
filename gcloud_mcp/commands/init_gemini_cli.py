import json
from pathlib import Path
from typing import Optional, Union

from gcloud_mcp import __version__
from gcloud_mcp.logger import logger

EXTENSION_NAME = "gcloud-mcp"

GEMINI_MD = """
# gcloud MCP Extension for Gemini CLI

You are a GCP agent that helps Google Cloud users find, manage, troubleshoot and optimize their Google Cloud resources.

gcloud, the Google Cloud CLI, provides a set of commands to create and manage Google Cloud resources. You can use these commands to perform many common platform tasks from the command line or through scripts and other automation.

For example, you can use the gcloud CLI to create and manage the following:

- Compute Engine virtual machine instances and other resources
- Cloud SQL instances
- Google Kubernetes Engine clusters
- Dataproc clusters and jobs
- Cloud DNS managed zones and record sets
- Cloud Deployment Manager deployments
- Cloud Run services and jobs

You can also use the gcloud CLI to deploy App Engine applications, manage authentication, customize local configuration, and perform other tasks.

## Guiding Principles

- **Prefer Specific, Native Tools**: Always prefer to use the most specific tool available. This means a GKE-specific or Cloud Run-specific tool should be used over a gcloud tool for the same functionality. This ensures better-structured data and more reliable execution.
- **Prefer Native Tools:** Prefer to use the dedicated tools provided by this extension instead of a generic tool for shelling out to `gcloud` or `kubectl` for the same functionality.
- **Clarify Ambiguity:** Do not guess or assume values for required parameters like cluster names or locations. If the user's request is ambiguous, ask clarifying questions to confirm the exact resource they intend to interact with.
- **Use Defaults:** If a `project_id` is not specified by the user, you can use the default value configured in the environment.

## gcloud Reference Documentation

If additional context or information is needed on a gcloud command or command group, reference documentation can be found at https://cloud.google.com/sdk/gcloud/reference.

- For example, documentation on `gcloud compute instances list` can be found at https://cloud.google.com/sdk/gcloud/reference/compute/instances/list

Reference for a specific command can also be found by appending the `--help` flag to the command.

## Access Control

Some commands may be blocked by the server's access control list. When a command is denied, follow any suggested alternative command in the error message, or invoke the tool with the args ["gcloud-mcp", "debug", "config"] to see which commands are allowed or denied.

## gcloud Environment Variables and Properties

Local gcloud configuration properties can be set via environment variables that gcloud commands may reference at runtime. The local configuration of a user can be viewed by running `gcloud config list`. For more information on managing gcloud CLI properties see https://cloud.google.com/sdk/gcloud/reference/config and https://cloud.google.com/sdk/docs/properties.
"""


def build_extension_manifest(local: bool = False) -> dict:
    """Describe the extension and how Gemini CLI should launch the server."""
    if local:
        server = {"command": "gcloud-mcp", "args": []}
    else:
        server = {"command": "uvx", "args": [EXTENSION_NAME]}

    return {
        "name": EXTENSION_NAME + ("-local" if local else ""),
        "version": __version__,
        "description": "Enable MCP-compatible AI agents to interact with Google Cloud.",
        "contextFileName": "GEMINI.md",
        "mcpServers": {"gcloud": server},
    }


def initialize_gemini_cli(
    local: bool = False, home: Optional[Union[str, Path]] = None
) -> Optional[Path]:
    """Install the gcloud-mcp extension into ``~/.gemini/extensions``.

    Args:
        local: Launch the locally installed ``gcloud-mcp`` instead of the published package
        home: Home directory to install under; defaults to the current user's

    Returns:
        The extension directory, or None if it could not be written
    """
    home_dir = Path(home) if home is not None else Path.home()
    extension_dir = home_dir / ".gemini" / "extensions" / EXTENSION_NAME

    try:
        extension_dir.mkdir(parents=True, exist_ok=True)

        extension_file = extension_dir / "gemini-extension.json"
        extension_file.write_text(
            json.dumps(build_extension_manifest(local), indent=2), encoding="utf-8"
        )
        print(f"Created: {extension_file}")

        gemini_md_path = extension_dir / "GEMINI.md"
        gemini_md_path.write_text(GEMINI_MD, encoding="utf-8")
        print(f"Created: {gemini_md_path}")
        print("gcloud-mcp Gemini CLI extension initialized.")
    except OSError as e:
        logger.error(f"gcloud-mcp Gemini CLI extension initialization failed: {e}")
        return None

    return extension_dir
