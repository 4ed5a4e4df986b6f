import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from gcloud_mcp.exceptions import ConfigurationError
from gcloud_mcp.security.acl import AccessControlList


# Commands that are never permitted, whatever the user configuration says.
DEFAULT_DENY: List[str] = ["interactive"]

BOTH_LISTS_ERROR = 'Configuration can not specify both "allow" and "deny" lists. Please choose one.'


class McpConfig(BaseModel):
    """User configuration for the gcloud MCP server."""

    allow: Optional[List[str]] = Field(
        None, description="Command groups or commands the agent may run; everything else is denied"
    )
    deny: Optional[List[str]] = Field(
        None, description="Command groups or commands the agent may not run"
    )

    @model_validator(mode="after")
    def _allow_xor_deny(self) -> "McpConfig":
        if self.allow is not None and self.deny is not None:
            raise ValueError(BOTH_LISTS_ERROR)
        return self


def load_config(path: Optional[Union[str, Path]] = None) -> McpConfig:
    """Load the server configuration from an absolute JSON file path.

    Returns an empty configuration when no path is given.

    Raises:
        ConfigurationError: If the path is relative, the file can not be read
            or parsed, or it specifies both an allow and a deny list.
    """
    if path is None:
        return McpConfig()

    config_path = Path(path)
    if not config_path.is_absolute():
        raise ConfigurationError(f"Config file path must be absolute: {path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error reading or parsing config file: {path}. {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigurationError(
            f"Error reading or parsing config file: {path}. Expected a JSON object."
        )

    if raw_config.get("allow") is not None and raw_config.get("deny") is not None:
        raise ConfigurationError(BOTH_LISTS_ERROR)

    try:
        return McpConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Error reading or parsing config file: {path}. {e}") from e


def create_access_control_list(config: McpConfig) -> AccessControlList:
    """Build the access control list for a configuration, adding the default deny rules."""
    return AccessControlList(allow=config.allow, deny=config.deny, default_deny=DEFAULT_DENY)
