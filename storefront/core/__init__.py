"""Core infrastructure: configuration, logging, errors and pub/sub."""
