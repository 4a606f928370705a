"""Core infrastructure: configuration, logging, errors and DI."""
