"""Concrete configuration sources and their loaders."""
