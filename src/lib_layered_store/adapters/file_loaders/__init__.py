"""Structured file sources (TOML, JSON, YAML)."""
