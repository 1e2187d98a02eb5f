"""Domain layer for ledgersync application."""
