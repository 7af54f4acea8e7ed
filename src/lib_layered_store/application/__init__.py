"""Ports and the layered store."""
