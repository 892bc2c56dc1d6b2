"""MCP server, API client and data models for the Kaggle API."""

__version__ = "0.1.0"

__all__ = ["cli", "client", "demo", "errors", "models", "server"]