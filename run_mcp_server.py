# coding: utf-8
# A shortcut to launch the gcloud MCP server from a source checkout.
import sys

from gcloud_mcp.mcp.server import main


if __name__ == "__main__":
    sys.exit(main())
