"""gcloud client used by the tools.

Bundles command execution with command canonicalization. The canonical form
of a command comes from ``gcloud meta lint-gcloud-commands``, which strips
flags and positional arguments without running anything::

    compute instances describe my-vm --zone us-central1-a
    -> compute instances describe
"""

from typing import List, Optional, Sequence

from pydantic import TypeAdapter

from gcloud_mcp.exceptions import GcloudLintError
from gcloud_mcp.gcloud.executor import GcloudExecutor, find_executable
from gcloud_mcp.schema import (
    GcloudInvocationResult,
    LintCommandOutput,
    ParsedGcloudLintResult,
)

GCLOUD_PREFIX = "gcloud "

_lint_output_adapter = TypeAdapter(List[LintCommandOutput])


class GcloudExecutable:
    """Invokes and lints gcloud commands through a single executor."""

    def __init__(self, executor: GcloudExecutor):
        self._executor = executor

    async def invoke(self, args: Sequence[str]) -> GcloudInvocationResult:
        return await self._executor.execute(list(args))

    async def lint(self, command: str) -> ParsedGcloudLintResult:
        """Canonicalize a gcloud command string (without the leading ``gcloud``).

        Raises:
            GcloudLintError: If gcloud produced no lint entry
            pydantic.ValidationError: If the lint output is not the expected JSON
        """
        result = await self._executor.execute(
            [
                "meta",
                "lint-gcloud-commands",
                "--command-string",
                f"{GCLOUD_PREFIX}{command}",
            ]
        )

        lint_commands = _lint_output_adapter.validate_json(result.stdout)
        if not lint_commands:
            raise GcloudLintError("gcloud lint result contained no contents")
        lint_command = lint_commands[0]

        if result.code != 0:
            return ParsedGcloudLintResult.failed(result.stderr)

        if not lint_command.success:
            error = f"{lint_command.error_message}"
            if lint_command.error_type:
                error = f"{lint_command.error_type}: {error}"
            return ParsedGcloudLintResult.failed(error)

        parsed_command = lint_command.command_string_no_args
        if parsed_command.startswith(GCLOUD_PREFIX):
            parsed_command = parsed_command[len(GCLOUD_PREFIX):]
        elif parsed_command == GCLOUD_PREFIX.strip():
            parsed_command = ""
        return ParsedGcloudLintResult.ok(parsed_command)


def create(timeout: Optional[float] = None) -> GcloudExecutable:
    """Create the gcloud client once at startup; raises GcloudNotFoundError."""
    return GcloudExecutable(find_executable(timeout=timeout))
