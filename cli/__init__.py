"""Command-line interface for the token vesting engine."""
