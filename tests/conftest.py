"""
Shared test fixtures.

Provides:
- A fake gcloud client whose lint/invoke coroutines are AsyncMocks
- A lint implementation that strips flags, like `gcloud meta lint-gcloud-commands`
- Access control list factories
- Capture of loguru records
"""

from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from gcloud_mcp.config import DEFAULT_DENY
from gcloud_mcp.logger import logger
from gcloud_mcp.schema import GcloudInvocationResult, ParsedGcloudLintResult
from gcloud_mcp.security.acl import AccessControlList


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as needing a real gcloud installation"
    )


# ============================================================================
# gcloud fakes
# ============================================================================

async def strip_flags_lint(command: str) -> ParsedGcloudLintResult:
    """Canonicalize by dropping flags and the 'debug' verb used in tests."""
    tokens = [t for t in command.split(" ") if not t.startswith("-") and t != "debug"]
    return ParsedGcloudLintResult.ok(" ".join(tokens))


async def echo_lint(command: str) -> ParsedGcloudLintResult:
    """Canonicalize a command to itself."""
    return ParsedGcloudLintResult.ok(command)


def make_gcloud(lint=strip_flags_lint, stdout: str = "", stderr: str = "", code: int = 0):
    gcloud = MagicMock()
    gcloud.lint = AsyncMock(side_effect=lint)
    gcloud.invoke = AsyncMock(
        return_value=GcloudInvocationResult(code=code, stdout=stdout, stderr=stderr)
    )
    return gcloud


@pytest.fixture
def gcloud():
    """A fake gcloud client; lint strips flags and invoke returns empty output."""
    return make_gcloud()


# ============================================================================
# Access control
# ============================================================================

def make_acl(config: Optional[Dict[str, List[str]]] = None) -> AccessControlList:
    """Build an ACL the way the server does, with the default deny rules added."""
    config = config or {}
    return AccessControlList(
        allow=config.get("allow"),
        deny=config.get("deny"),
        default_deny=DEFAULT_DENY,
    )


# ============================================================================
# Logging
# ============================================================================

@pytest.fixture
def log_messages():
    """Collect the messages of every loguru record emitted during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
