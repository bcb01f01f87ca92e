"""AI-First React scaffolding tool."""

__version__ = "0.1.0"
