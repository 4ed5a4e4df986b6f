import argparse
import sys
from inspect import Parameter, Signature
from typing import Any, Dict, List, Optional, Sequence

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError as MCPToolError

from gcloud_mcp import __version__
from gcloud_mcp.commands.init_gemini_cli import initialize_gemini_cli
from gcloud_mcp.config import create_access_control_list, load_config
from gcloud_mcp.exceptions import ConfigurationError, GcloudMcpError
from gcloud_mcp.gcloud import client as gcloud_client
from gcloud_mcp.logger import logger
from gcloud_mcp.security.acl import AccessControlList
from gcloud_mcp.tool.base import BaseTool, ToolResult
from gcloud_mcp.tool.run_gcloud_command import RunGcloudCommand

SERVER_NAME = "gcloud-mcp-server"

_JSON_SCHEMA_TYPES = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "object": dict,
}

_JSON_SCHEMA_ITEM_TYPES = {
    "string": List[str],
    "integer": List[int],
    "number": List[float],
    "boolean": List[bool],
}


class MCPServer:
    """MCP server exposing gcloud tools over stdio.

    The gcloud client and the access control list are built once at startup
    and handed to every tool.
    """

    def __init__(
        self,
        gcloud: Any,
        acl: AccessControlList,
        name: str = SERVER_NAME,
    ):
        self.server = FastMCP(name)
        self.tools: Dict[str, BaseTool] = {}
        self.gcloud = gcloud
        self.acl = acl

    def create_tools(self) -> List[BaseTool]:
        return [RunGcloudCommand(gcloud=self.gcloud, acl=self.acl)]

    def register_tool(self, tool: BaseTool, method_name: Optional[str] = None) -> None:
        """Register a tool, deriving its MCP signature and documentation from its parameters."""
        tool_name = method_name or tool.name
        tool_param = tool.to_param()
        tool_function = tool_param["function"]

        async def tool_method(**kwargs):
            result = await tool(**kwargs)

            if isinstance(result, ToolResult):
                if result.is_error:
                    # FastMCP reports this as an isError result.
                    raise MCPToolError(result.error)
                return str(result.output) if result.output is not None else ""
            return result

        tool_method.__name__ = tool_name
        tool_method.__doc__ = self._build_docstring(tool_function)
        tool_method.__signature__ = self._build_signature(tool_function)

        self.server.tool(name=tool_name, description=tool.description)(tool_method)
        self.tools[tool_name] = tool
        logger.info(f"Registered tool: {tool_name}")

    def _build_docstring(self, tool_function: dict) -> str:
        """Build a formatted docstring from tool function metadata."""
        description = tool_function.get("description", "")
        param_props = tool_function.get("parameters", {}).get("properties", {})
        required_params = tool_function.get("parameters", {}).get("required", [])

        docstring = description
        if param_props:
            docstring += "\n\nParameters:\n"
            for param_name, param_details in param_props.items():
                required_str = (
                    "(required)" if param_name in required_params else "(optional)"
                )
                param_type = param_details.get("type", "any")
                param_desc = param_details.get("description", "")
                docstring += (
                    f"    {param_name} ({param_type}) {required_str}: {param_desc}\n"
                )

        return docstring

    def _build_signature(self, tool_function: dict) -> Signature:
        """Build a function signature from tool function metadata."""
        param_props = tool_function.get("parameters", {}).get("properties", {})
        required_params = tool_function.get("parameters", {}).get("required", [])

        parameters = []
        for param_name, param_details in param_props.items():
            param_type = param_details.get("type", "")
            default = Parameter.empty if param_name in required_params else None

            if param_type == "array":
                item_type = param_details.get("items", {}).get("type", "")
                annotation = _JSON_SCHEMA_ITEM_TYPES.get(item_type, list)
            else:
                annotation = _JSON_SCHEMA_TYPES.get(param_type, Any)

            parameters.append(
                Parameter(
                    name=param_name,
                    kind=Parameter.KEYWORD_ONLY,
                    default=default,
                    annotation=annotation,
                )
            )

        return Signature(parameters=parameters)

    def register_all_tools(self) -> None:
        tools = self.create_tools()
        logger.info(f"Registering {len(tools)} tools: {[tool.name for tool in tools]}")
        for tool in tools:
            self.register_tool(tool)

    def run(self, transport: str = "stdio") -> None:
        """Run the MCP server."""
        self.register_all_tools()

        logger.info(f"Starting {SERVER_NAME} {__version__} ({transport} mode)")
        self.server.run(transport=transport)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gcloud-mcp",
        description="MCP server that lets AI agents run gcloud commands under an access control list",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Absolute path to a JSON file with an 'allow' or a 'deny' list of commands",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds after which a gcloud invocation is killed (default: no limit)",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio"],
        default="stdio",
        help="Communication method (default: stdio)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")
    init_parser = subparsers.add_parser("init", help="Initialize an agent integration")
    init_parser.add_argument(
        "--agent",
        choices=["gemini-cli"],
        required=True,
        help="The agent to initialize",
    )
    init_parser.add_argument(
        "--local",
        action="store_true",
        help="Point the integration at the locally installed server",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    if args.command == "init":
        if args.agent == "gemini-cli":
            initialize_gemini_cli(local=args.local)
        return 0

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    acl = create_access_control_list(config)

    try:
        gcloud = gcloud_client.create(timeout=args.timeout)
    except GcloudMcpError as e:
        logger.error(f"Unable to start gcloud mcp server: {e}")
        return 1

    server = MCPServer(gcloud=gcloud, acl=acl)
    server.run(transport=args.transport)
    logger.info(f"{SERVER_NAME} stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
