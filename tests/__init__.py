"""
Test Package
============

Unit tests for the AVD launcher.

Test organization:
    - test_launcher.py: Launch sequence tests against fake runner/file store
    - test_avd_config.py: config.ini parsing and override tests
    - test_config.py: Launch options and environment fallback tests
    - test_host.py: Subprocess runner, file store and platform tests
    - test_cli.py: CLI, action metadata and logging tests

Run tests with:
    pytest tests/ -v
    pytest tests/ -v --cov=avd_launcher --cov-report=html
"""
