import json

from gcloud_mcp import __version__
from gcloud_mcp.commands.init_gemini_cli import (
    EXTENSION_NAME,
    build_extension_manifest,
    initialize_gemini_cli,
)


def test_manifest_uses_published_package():
    manifest = build_extension_manifest()
    assert manifest["name"] == EXTENSION_NAME
    assert manifest["version"] == __version__
    assert manifest["mcpServers"]["gcloud"] == {"command": "uvx", "args": ["gcloud-mcp"]}


def test_manifest_local():
    manifest = build_extension_manifest(local=True)
    assert manifest["name"] == "gcloud-mcp-local"
    assert manifest["mcpServers"]["gcloud"] == {"command": "gcloud-mcp", "args": []}


def test_initialize_writes_extension(tmp_path, capsys):
    extension_dir = initialize_gemini_cli(home=tmp_path)

    assert extension_dir == tmp_path / ".gemini" / "extensions" / "gcloud-mcp"
    manifest = json.loads((extension_dir / "gemini-extension.json").read_text(encoding="utf-8"))
    assert manifest["contextFileName"] == "GEMINI.md"
    assert "gcloud MCP Extension" in (extension_dir / "GEMINI.md").read_text(encoding="utf-8")
    assert "Created:" in capsys.readouterr().out


def test_initialize_failure_returns_none(tmp_path, log_messages):
    blocker = tmp_path / ".gemini"
    blocker.write_text("not a directory", encoding="utf-8")

    assert initialize_gemini_cli(home=tmp_path) is None
    assert any("initialization failed" in m for m in log_messages)
