"""Dotenv file source."""
