"""
Security package providing command access control and release-track suggestions.

Decides whether a canonical gcloud command may run and, when it may not,
looks for a permitted equivalent on another release track.
"""

from gcloud_mcp.security.acl import (
    AccessControlList,
    AllowList,
    DenyList,
    Pattern,
    allow_commands,
    deny_commands,
)
from gcloud_mcp.security.suggest import (
    find_suggested_alternative_command,
    parse_release_track,
)

__all__ = [
    "AccessControlList",
    "AllowList",
    "DenyList",
    "Pattern",
    "allow_commands",
    "deny_commands",
    "find_suggested_alternative_command",
    "parse_release_track",
]
