"""Core package: models, schemas and shared utilities."""
