"""Command-line interface for Booster."""
