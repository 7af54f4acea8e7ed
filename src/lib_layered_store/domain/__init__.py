"""Domain records and the error taxonomy."""
