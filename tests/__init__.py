"""
Test suite for gcloud-mcp.

Modules:
- conftest.py: Shared fixtures and gcloud fakes
- test_acl.py: Pattern matching and access control
- test_suggest.py: Release-track suggestions
- test_run_gcloud_command.py: The run_gcloud_command tool end to end
- test_gcloud_client.py / test_executor.py: gcloud canonicalization and execution
- test_config.py, test_server.py, test_init_gemini_cli.py, test_exceptions.py

Usage:
    # Run all tests
    pytest tests/ -v
"""
