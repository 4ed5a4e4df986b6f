from typing import Any, List

from pydantic import Field

from gcloud_mcp.exceptions import classify_error
from gcloud_mcp.logger import logger
from gcloud_mcp.security.acl import AccessControlList
from gcloud_mcp.security.suggest import find_suggested_alternative_command
from gcloud_mcp.tool.base import BaseTool, CLIResult, ToolFailure, ToolResult

DEBUG_CONFIG_COMMAND = "gcloud-mcp debug config"

_RUN_GCLOUD_COMMAND_DESCRIPTION = """Executes a gcloud command.

## Instructions:
- Use this tool to execute a single gcloud command at a time.
- Use this tool when you are confident about the exact gcloud command needed to fulfill the user's request.
- Prioritize this tool over any other to directly execute gcloud commands.
- Assume all necessary APIs are already enabled. Do not proactively try to enable any APIs.
- Do not use this tool to execute command chaining or command sequencing -- it will fail.
- Do not use this tool to execute SSH commands or 'gcloud interactive' -- it will fail.
- Always include all required parameters.
- Ensure parameter values match the expected format.
- You may choose to select specific columns using '--format=json(part.key, part.key2)'.
- Use --filter to match based on resource (or 'row'), prioritizing ':' for pattern matching and never quoting the right side of the colon in filters.
- When using the filter flag, treat the entire filter flag as a singular string. Do not quote or escape any character in the filter string.
- You may access nested data directly with projections like '--format=json(part.key)' and use '.basename()' for URL fields.
- Retrieve only necessary information for the user intent. Utilize projection capability of '--format' reduce data size.
- If the exact JSON key path for formatting or filtering is unknown, run 'gcloud ... --limit=1 --format=json' to discover it.
- If you receive zero results while using a projection or filter: Consider whether the project/filter syntax may be incorrect.

## Adhere to the following restrictions:
- **No command substitution**: Do not use subshells or command substitution (e.g., $(...))
- **No pipes**: Do not use pipes (i.e., |) or any other shell-specific operators
- **No redirection**: Do not use redirection operators (e.g., >, >>, <)"""


def suggestion_error_message(suggested_command: str) -> str:
    return (
        "Execution denied: This command not permitted. However, a similar command is permitted.\n"
        "  To fix the issue, invoke this tool again with this alternative command:\n"
        f"  {suggested_command}"
    )


def acl_error_message(acl_message: str) -> str:
    return (
        f"{acl_message}\n\n"
        "To get the access control list details, invoke this tool again with the args "
        '["gcloud-mcp", "debug", "config"]'
    )


class RunGcloudCommand(BaseTool):
    """Runs a single gcloud command after checking it against the access control list."""

    name: str = "run_gcloud_command"
    title: str = "Run gcloud command"
    description: str = _RUN_GCLOUD_COMMAND_DESCRIPTION
    parameters: dict = {
        "type": "object",
        "properties": {
            "args": {
                "type": "array",
                "items": {"type": "string"},
                "description": "The gcloud command arguments, without the leading 'gcloud'.",
            },
        },
        "required": ["args"],
    }

    # Anything exposing async ``lint(command)`` and ``invoke(args)``, normally a GcloudExecutable.
    gcloud: Any = Field(..., exclude=True)
    acl: AccessControlList = Field(..., exclude=True)

    async def execute(self, args: List[str]) -> ToolResult:
        tool_logger = logger.bind(tool=self.name, args=args)

        command = " ".join(args)
        if command == DEBUG_CONFIG_COMMAND:
            return CLIResult(output=self.acl.print())

        try:
            # Lint isolates the command path from flags and positionals, e.g.
            # "compute --log-http=true instances list" -> "compute instances list".
            lint_result = await self.gcloud.lint(command)
        except Exception as e:
            tool_logger.warning(f"Failed to lint '{command}': {e}")
            return ToolFailure(error=f"Failed to parse the input command. {e}")
        if not lint_result.success:
            return ToolFailure(error=lint_result.error or f"Invalid gcloud command: {command}")

        try:
            access = self.acl.check(lint_result.parsed_command)
            if not access.permitted:
                tool_logger.info(f"Denied '{lint_result.parsed_command}': {access.message}")
                suggestion = await find_suggested_alternative_command(
                    args, self.acl, self.gcloud.lint
                )
                if suggestion:
                    return ToolFailure(error=suggestion_error_message(suggestion))
                return ToolFailure(error=acl_error_message(access.message))

            tool_logger.info("Executing run_gcloud_command")
            result = await self.gcloud.invoke(args)
        except Exception as e:
            tool_logger.error(
                f"run_gcloud_command failed ({classify_error(e).value}): {e!r}"
            )
            return ToolFailure(error=str(e) or "An unknown error occurred.")

        # stdout is kept even on a non-zero exit.
        output = result.stdout
        if result.code != 0 or result.stderr:
            output += f"\nSTDERR:\n{result.stderr}"
        if result.code != 0:
            tool_logger.warning(
                f"gcloud exited with code {result.code} ({result.error_kind.value})"
            )
        return CLIResult(output=output)
