"""Shared test doubles and payload builders for download monitor tests."""
