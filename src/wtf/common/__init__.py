"""Helpers shared by the store, catalog and installer (HTTP, logging, platform)."""
