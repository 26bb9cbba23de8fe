"""Broken module declarations for discovery failure tests."""
