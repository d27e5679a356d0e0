"""
Tests Package.

This package contains test suites for the flowchart quality analyzer,
including unit tests for reachability, individual rules, metrics and scoring,
and end-to-end tests of the analyzer, the document loader and the CLI.
"""

# Tests Package
