"""Command-line interface for pubvalues."""
