"""Packages used by the test-suite."""
