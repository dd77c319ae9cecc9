"""Test support helpers shared across test packages."""
