import sys

from gcloud_mcp.mcp.server import main


if __name__ == "__main__":
    sys.exit(main())
